"""
NoteKeeper Backend: Identity Context Resolver
=============================================

What:  Turns an authenticated session into the owner identity that every
       note operation is scoped to.
How:   The bearer token is decoded by TokenService; its `Id` claim is
       validated into an immutable `Identity`, which route handlers pass
       explicitly into NoteService.
When:  Once per request, before any business logic runs.

Failure Policy:
    A missing header, a bad token, or a token whose `Id` claim is absent or
    not a positive integer all end the request with the same generic 401. The
    specific reason is logged server-side only.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from notekeeper.exceptions import AuthenticationError, IdentityResolutionError
from notekeeper.services.token_service import token_service

logger = logging.getLogger(__name__)

ID_CLAIM = "Id"

# auto_error=False: we raise our own AuthenticationError so the response
# body has the same shape as every other error.
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller. `user_id` is the owner every note is filtered by."""
    user_id: int


def resolve_identity(claims: Mapping[str, Any]) -> Identity:
    """
    Build an Identity from session claims.

    Accepts the `Id` claim as a positive int or as a string of ASCII digits
    (tokens carry it as a string). Booleans, floats, signs, whitespace,
    underscores and non-ASCII digits are all rejected even though `int()`
    would accept some of them.

    Raises:
        IdentityResolutionError: claim missing, malformed or non-numeric.
    """
    value = claims.get(ID_CLAIM)

    if value is None:
        raise IdentityResolutionError("missing Id claim")

    if isinstance(value, bool):
        raise IdentityResolutionError("non-numeric Id claim", value)

    if isinstance(value, int):
        user_id = value
    elif isinstance(value, str):
        if not (value.isascii() and value.isdigit()):
            raise IdentityResolutionError("non-numeric Id claim", value)
        user_id = int(value)
    else:
        raise IdentityResolutionError("malformed Id claim", value)

    if user_id <= 0:
        raise IdentityResolutionError("non-positive Id claim", value)
    return Identity(user_id=user_id)


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    """
    FastAPI dependency: the caller's Identity, or a 401.

    Usage:
        @router.get("/notes")
        async def list_notes(owner: Identity = Depends(get_current_identity)):
            ...
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(reason="missing bearer token")

    claims = token_service.decode_token(credentials.credentials)
    identity = resolve_identity(claims)
    logger.debug("Resolved identity user_id=%s", identity.user_id)
    return identity
