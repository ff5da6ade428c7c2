"""
Ticket Domain Entities
======================

Pure Python domain entities for the ticket lifecycle.

Following Domain-Driven Design principles, these entities contain
business logic and are free of infrastructure concerns.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from helpdesk.config import (
    Category, Priority, TicketStatus,
    VALID_CATEGORIES, VALID_PRIORITIES, VALID_STATUSES,
)

TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 200
DESCRIPTION_MIN_LENGTH = 10
DESCRIPTION_MAX_LENGTH = 2000


@dataclass(frozen=True)
class UserRef:
    """Summary of a referenced user (creator or assignee)."""
    id: str
    name: str
    email: str


@dataclass
class Ticket:
    """
    Ticket entity representing a support ticket.

    Invariant: `resolved_at` is set exactly while the status is resolved.
    """

    id: Optional[str]
    title: str
    description: str
    priority: Priority
    category: Category
    status: TicketStatus
    created_by: str
    assigned_to: str

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resolved_at: Optional[datetime] = None
    attachments: List[str] = field(default_factory=list)

    # Populated when loaded for presentation
    creator: Optional[UserRef] = None
    assignee: Optional[UserRef] = None

    def __post_init__(self):
        """Validate ticket on initialization."""
        self.title = self.title.strip()
        self.description = self.description.strip()

        if not TITLE_MIN_LENGTH <= len(self.title) <= TITLE_MAX_LENGTH:
            raise ValueError(
                f"Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters"
            )
        if not DESCRIPTION_MIN_LENGTH <= len(self.description) <= DESCRIPTION_MAX_LENGTH:
            raise ValueError(
                f"Description must be between {DESCRIPTION_MIN_LENGTH} and {DESCRIPTION_MAX_LENGTH} characters"
            )
        if self.priority not in VALID_PRIORITIES:
            raise ValueError(f"Invalid priority: {self.priority}")
        if self.category not in VALID_CATEGORIES:
            raise ValueError(f"Invalid category: {self.category}")
        if self.status not in VALID_STATUSES:
            raise ValueError(f"Invalid status: {self.status}")

        self._sync_resolved_at(self.updated_at)

    @classmethod
    def open(
        cls,
        title: str,
        description: str,
        priority: Priority,
        category: Category,
        created_by: str,
        assigned_to: str,
    ) -> "Ticket":
        """A freshly created ticket; always starts open."""
        return cls(
            id=None,
            title=title,
            description=description,
            priority=priority,
            category=category,
            status=TicketStatus.OPEN,
            created_by=created_by,
            assigned_to=assigned_to,
        )

    def is_assigned_to(self, user_id: str) -> bool:
        return self.assigned_to == user_id

    def change_status(self, status: TicketStatus, timestamp: Optional[datetime] = None) -> None:
        """Move to a new status, keeping resolved_at in step."""
        if status not in VALID_STATUSES:
            raise ValueError(f"Invalid status: {status}")

        now = timestamp or datetime.now(timezone.utc)
        self.status = status
        self._sync_resolved_at(now)
        self.updated_at = now

    def change_priority(self, priority: Priority, timestamp: Optional[datetime] = None) -> None:
        if priority not in VALID_PRIORITIES:
            raise ValueError(f"Invalid priority: {priority}")
        self.priority = priority
        self.updated_at = timestamp or datetime.now(timezone.utc)

    def reassign(self, agent_id: str, timestamp: Optional[datetime] = None) -> None:
        self.assigned_to = agent_id
        self.updated_at = timestamp or datetime.now(timezone.utc)

    def _sync_resolved_at(self, now: datetime) -> None:
        if self.status == TicketStatus.RESOLVED:
            # Re-resolving keeps the original resolution time
            if self.resolved_at is None:
                self.resolved_at = now
        else:
            self.resolved_at = None
