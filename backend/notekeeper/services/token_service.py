"""
NoteKeeper Backend: Token Service (Credentials & Bearer Tokens)
===============================================================

What:  Password hashing, credential verification and JWT issuance/decoding.
Who:   UserService hashes with it; POST /api/token issues with it; the
       identity dependency decodes with it.

Token Claims:
    Id        User id as a string. The only claim the note store relies on.
    UserName  Informational
    Email     Informational
    iat/exp   Issued-at and expiry (seconds since epoch)

Libraries:
    passlib CryptContext with bcrypt: salted, adaptive password hashing
    python-jose: HS256 signing and verification
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.config import settings
from notekeeper.exceptions import AuthenticationError
from notekeeper.models.user import User
from notekeeper.schemas.user import TokenRequest, TokenResponse

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenService:
    """Stateless; configuration is read from `settings` on each call."""

    # ── Passwords ─────────────────────────────────────────────────────────

    def hash_password(self, password: str) -> str:
        return pwd_context.hash(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        return pwd_context.verify(password, password_hash)

    # ── Tokens ────────────────────────────────────────────────────────────

    def create_token(self, user: User) -> TokenResponse:
        """Signs a token for `user` valid for access_token_expire_minutes."""
        issued_at = datetime.now(timezone.utc)
        expires_at = issued_at + timedelta(minutes=settings.access_token_expire_minutes)
        claims = {
            "Id": str(user.id),
            "UserName": user.username,
            "Email": user.email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
        return TokenResponse(token=token, issued_at=issued_at, expires_at=expires_at)

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry and return the claims.

        Raises:
            AuthenticationError: for any invalid, tampered or expired token.
        """
        try:
            return jwt.decode(
                token,
                settings.jwt_secret_key,
                algorithms=[settings.jwt_algorithm],
            )
        except JWTError as e:
            raise AuthenticationError(reason=f"invalid token: {type(e).__name__}")

    async def authenticate(
        self, db: AsyncSession, request: TokenRequest
    ) -> Optional[TokenResponse]:
        """
        Exchange a username/password pair for a token.

        Returns None for an unknown user and for a wrong password alike, so
        the response never reveals which usernames exist.
        """
        result = await db.execute(select(User).where(User.username == request.username))
        user = result.scalar_one_or_none()

        if user is None or not self.verify_password(request.password, user.password_hash):
            logger.info("Token request rejected for username=%s", request.username)
            return None

        logger.info("Token issued for user %s", user.id)
        return self.create_token(user)


token_service = TokenService()
