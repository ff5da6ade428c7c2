"""
Tickets Application Layer
=========================

Use cases and DTOs for the ticket lifecycle.
"""

from helpdesk.tickets.application.services import (
    TicketFilters,
    TicketPage,
    TicketStats,
    ITicketRepository,
    IAgentDirectory,
    CategorizationService,
    TicketService,
    normalize_paging,
    is_valid_id,
)
from helpdesk.tickets.application.dto import (
    TicketCreateRequest,
    TicketUpdateRequest,
    UserSummary,
    TicketResponse,
    AIAnalysis,
    CreateTicketData,
    TicketData,
    Pagination,
    TicketListData,
    StatsOverview,
    GroupCount,
    StatsData,
    PriorityStr,
    CategoryStr,
    TicketStatusStr,
    SortOrderStr,
)

__all__ = [
    # Services
    "TicketFilters",
    "TicketPage",
    "TicketStats",
    "ITicketRepository",
    "IAgentDirectory",
    "CategorizationService",
    "TicketService",
    "normalize_paging",
    "is_valid_id",
    # DTOs
    "TicketCreateRequest",
    "TicketUpdateRequest",
    "UserSummary",
    "TicketResponse",
    "AIAnalysis",
    "CreateTicketData",
    "TicketData",
    "Pagination",
    "TicketListData",
    "StatsOverview",
    "GroupCount",
    "StatsData",
    "PriorityStr",
    "CategoryStr",
    "TicketStatusStr",
    "SortOrderStr",
]
