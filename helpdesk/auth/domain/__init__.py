"""
Auth Domain Layer
=================

Contains:
- Entities: User, Principal

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from helpdesk.auth.domain.entities import User, Principal, normalize_email

__all__ = [
    "User",
    "Principal",
    "normalize_email",
]
