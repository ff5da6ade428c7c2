"""
Tickets Application DTOs
========================

Pydantic models for the ticket endpoints. Field names are snake_case in
Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import Field, StringConstraints

from helpdesk.tickets.domain.entities import (
    TITLE_MIN_LENGTH, TITLE_MAX_LENGTH,
    DESCRIPTION_MIN_LENGTH, DESCRIPTION_MAX_LENGTH,
)
from helpdesk.shared.api import CamelModel


# ========== Type Aliases for Literals ==========
PriorityStr = Literal["low", "medium", "high", "urgent"]
CategoryStr = Literal["technical", "billing", "general", "feature-request", "bug-report"]
TicketStatusStr = Literal["open", "in-progress", "resolved", "closed"]
SortOrderStr = Literal["asc", "desc"]


# ========== Request DTOs ==========

class TicketCreateRequest(CamelModel):
    """Request model for opening a ticket."""
    title: Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    ]
    description: Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=DESCRIPTION_MIN_LENGTH, max_length=DESCRIPTION_MAX_LENGTH)
    ]
    priority: Optional[PriorityStr] = Field(
        None, description="Overrides the suggested priority when given"
    )


class TicketUpdateRequest(CamelModel):
    """Partial update; omitted fields are left alone."""
    status: Optional[TicketStatusStr] = None
    priority: Optional[PriorityStr] = Field(None, description="Admin only")
    assigned_to: Optional[str] = Field(None, description="Agent user ID; admin only")


# ========== Response DTOs ==========

class UserSummary(CamelModel):
    """Creator or assignee as embedded in a ticket."""
    id: str
    name: str
    email: str


class TicketResponse(CamelModel):
    """A ticket as returned by the API."""
    id: str
    title: str
    description: str
    priority: PriorityStr
    category: CategoryStr
    status: TicketStatusStr
    created_by: Optional[UserSummary] = None
    assigned_to: Optional[UserSummary] = None
    attachments: List[str] = Field(default_factory=list)
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class AIAnalysis(CamelModel):
    """What the categorizer suggested for a new ticket."""
    suggested_category: CategoryStr
    suggested_priority: PriorityStr
    confidence: float = Field(..., ge=0.0, le=1.0)


class CreateTicketData(CamelModel):
    ticket: TicketResponse
    ai_analysis: AIAnalysis


class TicketData(CamelModel):
    ticket: TicketResponse


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_tickets: int
    has_next_page: bool
    has_prev_page: bool


class TicketListData(CamelModel):
    tickets: List[TicketResponse]
    pagination: Pagination


class StatsOverview(CamelModel):
    total: int
    open: int
    in_progress: int
    resolved: int
    closed: int


class GroupCount(CamelModel):
    """One bucket of a grouped count, keyed by `_id` on the wire."""
    value: str = Field(..., alias="_id")
    count: int


class StatsData(CamelModel):
    overview: StatsOverview
    by_priority: List[GroupCount]
    by_category: List[GroupCount]
