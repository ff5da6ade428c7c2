"""
Auth Dependencies
=================

FastAPI dependencies that build the auth service and resolve the caller
from the `Authorization: Bearer <token>` header.
"""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.auth.application import AuthService
from helpdesk.auth.domain import Principal
from helpdesk.auth.infrastructure import (
    BcryptPasswordHasher,
    JWTTokenService,
    SQLAlchemyUserRepository,
)
from helpdesk.config import Settings, get_settings
from helpdesk.core import AccessDeniedException
from helpdesk.infrastructure.database import get_session


def bearer_token(request: Request) -> Optional[str]:
    """Token part of a `Bearer <token>` header, or None."""
    header = request.headers.get("Authorization")
    if not header:
        return None

    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


async def get_auth_service(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings)
) -> AuthService:
    """Get auth service instance."""
    return AuthService(
        SQLAlchemyUserRepository(session),
        BcryptPasswordHasher(settings.bcrypt_rounds),
        JWTTokenService.from_settings(settings),
    )


async def get_current_principal(
    request: Request,
    service: AuthService = Depends(get_auth_service)
) -> Principal:
    """Authenticated caller; rejects the request otherwise."""
    principal = await service.authenticate(bearer_token(request))
    request.state.principal = principal
    return principal


async def require_admin(
    principal: Principal = Depends(get_current_principal)
) -> Principal:
    """Admin-only routes."""
    if not principal.is_admin:
        raise AccessDeniedException("Admin access required")
    return principal
