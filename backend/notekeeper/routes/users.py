"""
NoteKeeper Backend: User & Token Route Handlers
===============================================

What:  POST /api/users/register and POST /api/token. Both are public.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.database import get_db_session
from notekeeper.exceptions import ValidationError
from notekeeper.schemas.common import ErrorResponse, MessageResponse
from notekeeper.schemas.user import TokenRequest, TokenResponse, UserRegister
from notekeeper.services.token_service import token_service
from notekeeper.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])


@router.post(
    "/users/register",
    response_model=MessageResponse,
    responses={400: {"description": "User could not be registered", "model": ErrorResponse}},
    summary="Register a new user",
)
async def register_user(
    model: UserRegister,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    if await user_service.register_user(db, model):
        return MessageResponse(message="User was registered.")
    # Same message for a taken email and a taken username
    raise ValidationError(message="User could not be registered.")


@router.post(
    "/token",
    response_model=TokenResponse,
    responses={400: {"description": "Invalid username or password", "model": ErrorResponse}},
    summary="Exchange credentials for a bearer token",
)
async def issue_token(
    request: TokenRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    token = await token_service.authenticate(db, request)
    if token is None:
        raise ValidationError(message="Invalid username or password.")
    return token
