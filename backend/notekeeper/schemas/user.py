"""
NoteKeeper Backend: User and Token Schemas
==========================================

What:  Request/response models for registration and token issuance.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, model_validator


class UserRegister(BaseModel):
    """
    Body of POST /api/users/register.

    `confirm_password` only exists to catch typos; it is checked here and
    never reaches the service.
    """
    email: EmailStr = Field(description="Unique email address")
    username: str = Field(min_length=4, max_length=50, description="Unique username")
    password: str = Field(min_length=8, max_length=128)
    confirm_password: str = Field(min_length=8, max_length=128)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)

    @model_validator(mode="after")
    def passwords_match(self) -> "UserRegister":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class TokenRequest(BaseModel):
    """Body of POST /api/token."""
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1, max_length=128)


class TokenResponse(BaseModel):
    """Issued bearer token and its validity window."""
    token: str = Field(description="Signed JWT to send as 'Authorization: Bearer <token>'")
    issued_at: datetime
    expires_at: datetime
