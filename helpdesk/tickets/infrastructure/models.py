"""
Tickets Infrastructure Models
=============================

SQLAlchemy ORM model for tickets.
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import String, Text, DateTime, ForeignKey, Index, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from helpdesk.auth.infrastructure.models import UserModel
from helpdesk.config import TicketStatus
from helpdesk.infrastructure.database import Base


class TicketModel(Base):
    """
    Database model for Ticket entity.

    Maps to the 'tickets' table. Deleting a user leaves its tickets alone.
    """
    __tablename__ = "tickets"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    priority: Mapped[str] = mapped_column(String(20), nullable=False)
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=TicketStatus.OPEN)

    created_by: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    assigned_to: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    attachments: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    creator: Mapped[Optional[UserModel]] = relationship(foreign_keys=[created_by], lazy="joined")
    assignee: Mapped[Optional[UserModel]] = relationship(foreign_keys=[assigned_to], lazy="joined")

    __table_args__ = (
        Index("ix_tickets_status_priority", "status", "priority"),
    )
