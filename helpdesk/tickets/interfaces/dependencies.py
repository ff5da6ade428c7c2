"""
Tickets Dependencies
====================

Builds a TicketService per request from the session and the process-wide
LLM client and random source kept on `app.state`.
"""

import random

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.infrastructure.database import get_session
from helpdesk.tickets.application import CategorizationService, TicketService
from helpdesk.tickets.domain import AccessPolicy, KeywordCategorizer
from helpdesk.tickets.infrastructure import SQLAlchemyAgentDirectory, SQLAlchemyTicketRepository


def get_rng(request: Request) -> random.Random:
    rng = getattr(request.app.state, "rng", None)
    if rng is None:
        rng = request.app.state.rng = random.Random()
    return rng


async def get_ticket_service(
    request: Request,
    session: AsyncSession = Depends(get_session),
    rng: random.Random = Depends(get_rng)
) -> TicketService:
    """Get ticket service instance."""
    categorization = CategorizationService(
        KeywordCategorizer(rng=rng),
        getattr(request.app.state, "llm_client", None),
    )
    return TicketService(
        SQLAlchemyTicketRepository(session),
        SQLAlchemyAgentDirectory(session),
        categorization,
        policy=AccessPolicy(),
        rng=rng,
    )
