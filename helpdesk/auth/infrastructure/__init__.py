"""
Auth Infrastructure Layer
=========================

- Models: SQLAlchemy ORM models
- Repositories: Data access layer
- Security: bcrypt hashing and JWT tokens
"""

from helpdesk.auth.infrastructure.models import UserModel
from helpdesk.auth.infrastructure.repositories import SQLAlchemyUserRepository, parse_uuid
from helpdesk.auth.infrastructure.security import BcryptPasswordHasher, JWTTokenService

__all__ = [
    "UserModel",
    "SQLAlchemyUserRepository",
    "parse_uuid",
    "BcryptPasswordHasher",
    "JWTTokenService",
]
