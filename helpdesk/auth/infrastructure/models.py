"""
Auth Infrastructure Models
==========================

SQLAlchemy ORM model for users.
"""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from helpdesk.config import Role
from helpdesk.infrastructure.database import Base


class UserModel(Base):
    """
    Database model for User entity.

    Maps to the 'users' table.
    """
    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    role: Mapped[Role] = mapped_column(String(20), nullable=False, default=Role.AGENT, index=True)

    # bcrypt hash; never selected into API responses
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )
