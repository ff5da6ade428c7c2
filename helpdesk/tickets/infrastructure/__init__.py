"""
Tickets Infrastructure Layer
============================

SQLAlchemy model and repositories for tickets.
"""

from helpdesk.tickets.infrastructure.models import TicketModel
from helpdesk.tickets.infrastructure.repositories import (
    SQLAlchemyTicketRepository,
    SQLAlchemyAgentDirectory,
)

__all__ = [
    "TicketModel",
    "SQLAlchemyTicketRepository",
    "SQLAlchemyAgentDirectory",
]
