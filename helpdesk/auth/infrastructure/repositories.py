"""
Auth Infrastructure Repositories
================================

SQLAlchemy implementation of the user repository.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.auth.application import IUserRepository
from helpdesk.auth.domain import User, normalize_email
from helpdesk.auth.infrastructure.models import UserModel
from helpdesk.core import ConflictException


def parse_uuid(value: str) -> Optional[UUID]:
    """UUID from its string form, or None when malformed."""
    try:
        return UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        return None


def to_entity(model: UserModel) -> User:
    return User(
        id=str(model.id),
        name=model.name,
        email=model.email,
        role=model.role,
        password_hash=model.password_hash,
        created_at=model.created_at,
    )


class SQLAlchemyUserRepository(IUserRepository):
    """
    SQLAlchemy implementation of user repository.

    Handles persistence of User entities using async SQLAlchemy.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        user_uuid = parse_uuid(user_id)
        if user_uuid is None:
            return None

        model = await self._session.get(UserModel, user_uuid)
        return to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(UserModel).where(UserModel.email == normalize_email(email))
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return to_entity(model) if model else None

    async def create(self, user: User) -> User:
        model = UserModel(
            id=uuid4(),
            name=user.name,
            email=user.email,
            role=user.role,
            password_hash=user.password_hash,
            created_at=user.created_at,
        )
        self._session.add(model)

        try:
            await self._session.flush()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            raise ConflictException("User already exists with this email")

        return to_entity(model)
