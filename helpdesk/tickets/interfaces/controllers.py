"""
Tickets Controllers (API Routes)
================================

FastAPI routes for the ticket lifecycle.

Controllers are thin - they delegate to the TicketService and map
domain objects onto response DTOs.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from helpdesk.auth.domain import Principal
from helpdesk.auth.interfaces.dependencies import get_current_principal, require_admin
from helpdesk.config import TicketStatus
from helpdesk.shared.api import ApiResponse
from helpdesk.tickets.application import (
    TicketService,
    TicketFilters,
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
from helpdesk.tickets.domain import Ticket, UserRef
from helpdesk.tickets.interfaces.dependencies import get_ticket_service

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


# ========== Example payloads for Swagger ==========

TICKET_CREATE_EXAMPLE = {
    "title": "Server crash on login",
    "description": "Urgent, users cannot log in at all since the last deploy.",
}

CREATE_RESPONSE_EXAMPLE = {
    "success": True,
    "message": "Ticket created successfully",
    "data": {
        "ticket": {
            "id": "9b2f0c1e-6c1d-4d3a-9d7e-3f6a2b1c0d4e",
            "title": "Server crash on login",
            "description": "Urgent, users cannot log in at all since the last deploy.",
            "priority": "urgent",
            "category": "bug-report",
            "status": "open",
            "createdBy": {"id": "2c1d...", "name": "Sarah Admin", "email": "admin@superops.com"},
            "assignedTo": {"id": "7e4a...", "name": "John Agent", "email": "agent@superops.com"},
            "attachments": [],
            "resolvedAt": None,
            "createdAt": "2024-01-15T10:00:00Z",
            "updatedAt": "2024-01-15T10:00:00Z",
        },
        "aiAnalysis": {
            "suggestedCategory": "bug-report",
            "suggestedPriority": "urgent",
            "confidence": 0.97,
        },
    },
}


def _user_summary(ref: Optional[UserRef]) -> Optional[UserSummary]:
    if ref is None:
        return None
    return UserSummary(id=ref.id, name=ref.name, email=ref.email)


def _ticket_response(ticket: Ticket) -> TicketResponse:
    return TicketResponse(
        id=ticket.id,
        title=ticket.title,
        description=ticket.description,
        priority=ticket.priority,
        category=ticket.category,
        status=ticket.status,
        created_by=_user_summary(ticket.creator),
        assigned_to=_user_summary(ticket.assignee),
        attachments=ticket.attachments,
        resolved_at=ticket.resolved_at,
        created_at=ticket.created_at,
        updated_at=ticket.updated_at,
    )


# ========== Route Handlers ==========

@router.post(
    "",
    response_model=ApiResponse[CreateTicketData],
    status_code=status.HTTP_201_CREATED,
    summary="Open a ticket",
    description="""
    Open a support ticket. The category is always decided by the categorizer;
    the priority is the caller's when given, the suggested one otherwise.
    The ticket is assigned to a randomly chosen agent.
    """,
    responses={
        201: {"content": {"application/json": {"example": CREATE_RESPONSE_EXAMPLE}}},
        400: {"description": "Validation errors"},
        503: {"description": "No agents available for assignment"},
    },
    openapi_extra={"requestBody": {"content": {"application/json": {"example": TICKET_CREATE_EXAMPLE}}}},
)
async def create_ticket(
    payload: TicketCreateRequest,
    principal: Principal = Depends(get_current_principal),
    service: TicketService = Depends(get_ticket_service)
):
    ticket, analysis = await service.create(
        principal, payload.title, payload.description, payload.priority
    )
    return ApiResponse(
        success=True,
        message="Ticket created successfully",
        data=CreateTicketData(
            ticket=_ticket_response(ticket),
            ai_analysis=AIAnalysis(
                suggested_category=analysis.category,
                suggested_priority=analysis.priority,
                confidence=analysis.confidence,
            ),
        ),
    )


@router.get(
    "",
    response_model=ApiResponse[TicketListData],
    summary="List tickets",
    description="Agents only see tickets assigned to them; admins see all and may filter by assignee."
)
async def list_tickets(
    ticket_status: Optional[TicketStatusStr] = Query(None, alias="status", description="Filter by status"),
    category: Optional[CategoryStr] = Query(None, description="Filter by category"),
    priority: Optional[PriorityStr] = Query(None, description="Filter by priority"),
    assigned_to: Optional[str] = Query(None, alias="assignedTo", description="Assignee user ID (admin only)"),
    page: Optional[str] = Query(None, description="Page number, from 1"),
    limit: Optional[str] = Query(None, description="Results per page, 1 to 50"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="Ticket field in camelCase"),
    sort_order: Optional[SortOrderStr] = Query(None, alias="sortOrder", description="asc or desc"),
    principal: Principal = Depends(get_current_principal),
    service: TicketService = Depends(get_ticket_service)
):
    filters = TicketFilters(
        status=ticket_status,
        category=category,
        priority=priority,
        assigned_to=assigned_to,
    )
    result = await service.list(
        principal, filters,
        page=page, limit=limit,
        sort_by=sort_by, sort_order=sort_order,
    )

    return ApiResponse(
        success=True,
        data=TicketListData(
            tickets=[_ticket_response(t) for t in result.tickets],
            pagination=Pagination(
                current_page=result.page,
                total_pages=result.total_pages,
                total_tickets=result.total,
                has_next_page=result.has_next_page,
                has_prev_page=result.has_prev_page,
            ),
        ),
    )


@router.get(
    "/stats",
    response_model=ApiResponse[StatsData],
    summary="Ticket counts by status, priority and category"
)
async def ticket_stats(
    principal: Principal = Depends(get_current_principal),
    service: TicketService = Depends(get_ticket_service)
):
    stats = await service.stats(principal)

    return ApiResponse(
        success=True,
        data=StatsData(
            overview=StatsOverview(
                total=stats.total,
                open=stats.status_count(TicketStatus.OPEN),
                in_progress=stats.status_count(TicketStatus.IN_PROGRESS),
                resolved=stats.status_count(TicketStatus.RESOLVED),
                closed=stats.status_count(TicketStatus.CLOSED),
            ),
            by_priority=[GroupCount(value=v, count=c) for v, c in stats.by_priority],
            by_category=[GroupCount(value=v, count=c) for v, c in stats.by_category],
        ),
    )


@router.get(
    "/{ticket_id}",
    response_model=ApiResponse[TicketData],
    summary="Get a ticket",
    responses={
        400: {"description": "Invalid ticket ID"},
        403: {"description": "Not assigned to the caller"},
        404: {"description": "Ticket not found"},
    }
)
async def get_ticket(
    ticket_id: str,
    principal: Principal = Depends(get_current_principal),
    service: TicketService = Depends(get_ticket_service)
):
    ticket = await service.get(principal, ticket_id)
    return ApiResponse(success=True, data=TicketData(ticket=_ticket_response(ticket)))


@router.patch(
    "/{ticket_id}",
    response_model=ApiResponse[TicketData],
    summary="Update status, priority or assignee",
    description="""
    Assignees may change the status. Only admins may change the priority or
    reassign the ticket, and the new assignee must be an agent.
    Moving to `resolved` stamps `resolvedAt`; any other status clears it.
    """,
    responses={
        400: {"description": "Invalid ticket ID or assigned user"},
        403: {"description": "Access denied"},
        404: {"description": "Ticket not found"},
    }
)
async def update_ticket(
    ticket_id: str,
    payload: TicketUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    service: TicketService = Depends(get_ticket_service)
):
    ticket = await service.update(
        principal,
        ticket_id,
        status=payload.status,
        priority=payload.priority,
        assigned_to=payload.assigned_to,
    )
    return ApiResponse(
        success=True,
        message="Ticket updated successfully",
        data=TicketData(ticket=_ticket_response(ticket)),
    )


@router.delete(
    "/{ticket_id}",
    response_model=ApiResponse,
    summary="Delete a ticket (admin only)",
    responses={
        400: {"description": "Invalid ticket ID"},
        403: {"description": "Admin access required"},
        404: {"description": "Ticket not found"},
    }
)
async def delete_ticket(
    ticket_id: str,
    principal: Principal = Depends(require_admin),
    service: TicketService = Depends(get_ticket_service)
):
    await service.delete(principal, ticket_id)
    return ApiResponse(success=True, message="Ticket deleted successfully")
