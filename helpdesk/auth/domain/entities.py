"""
Auth Domain Entities
====================

Pure Python identity objects. No framework or storage imports.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from helpdesk.config import Role


def normalize_email(email: str) -> str:
    """Emails are stored and looked up trimmed and lower-cased."""
    return email.strip().lower()


@dataclass
class User:
    """
    A person who can sign in: an agent working tickets or an admin.

    The password hash never leaves the application layer.
    """
    id: Optional[str]
    name: str
    email: str
    role: Role
    password_hash: str = field(repr=False)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        self.email = normalize_email(self.email)


@dataclass(frozen=True)
class Principal:
    """
    The authenticated caller of a request, as carried by the bearer token.
    """
    id: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
