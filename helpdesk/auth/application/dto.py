"""
Auth Application DTOs
=====================

Pydantic models for the authentication endpoints.
"""

from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import EmailStr, Field, StringConstraints, field_validator

from helpdesk.auth.domain import normalize_email
from helpdesk.shared.api import CamelModel

RoleStr = Literal["agent", "admin"]

# bcrypt only reads the first 72 bytes
MAX_PASSWORD_BYTES = 72


# ========== Request DTOs ==========

class SignupRequest(CamelModel):
    """Request model for account creation."""
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
    email: EmailStr
    password: str = Field(..., min_length=6, description="Plain text password, hashed before storage")
    role: Optional[RoleStr] = Field(None, description="Defaults to agent")

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class LoginRequest(CamelModel):
    """Request model for login."""
    email: EmailStr
    password: str = Field(..., min_length=1, description="Password is required")

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return normalize_email(v)


# ========== Response DTOs ==========

class UserInfo(CamelModel):
    """Public view of a user. The password hash is not part of it."""
    id: str
    name: str
    email: str
    role: RoleStr
    created_at: Optional[datetime] = None


class AuthData(CamelModel):
    """Payload returned by signup and login."""
    token: str
    user: UserInfo


class ProfileData(CamelModel):
    """Payload returned by the profile endpoint."""
    user: UserInfo
