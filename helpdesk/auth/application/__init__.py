"""
Auth Application Layer
======================

Contains:
- Services: AuthService
- Interfaces: user repository, password hasher, token service
- DTOs: request/response models for the auth endpoints
"""

from helpdesk.auth.application.dto import (
    SignupRequest,
    LoginRequest,
    UserInfo,
    AuthData,
    ProfileData,
)
from helpdesk.auth.application.services import (
    AuthService,
    IUserRepository,
    IPasswordHasher,
    ITokenService,
)

__all__ = [
    # DTOs
    "SignupRequest",
    "LoginRequest",
    "UserInfo",
    "AuthData",
    "ProfileData",
    # Services
    "AuthService",
    # Interfaces
    "IUserRepository",
    "IPasswordHasher",
    "ITokenService",
]
