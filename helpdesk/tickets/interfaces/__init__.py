"""
Tickets Interfaces Layer
========================

HTTP routes for the ticket lifecycle.
"""

from helpdesk.tickets.interfaces.controllers import router as tickets_router
from helpdesk.tickets.interfaces.dependencies import get_ticket_service

__all__ = [
    "tickets_router",
    "get_ticket_service",
]
