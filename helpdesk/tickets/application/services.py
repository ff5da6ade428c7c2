"""
Tickets Application Services
============================

Use cases for the ticket lifecycle: categorization on create, automatic
assignment, role-scoped listing, updates, deletion and statistics.

Following SOLID principles:
- Single Responsibility: CategorizationService decides category and
  priority, TicketService owns the lifecycle
- Dependency Inversion: both depend on repository and client abstractions
"""

import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union
from uuid import UUID

from helpdesk.auth.domain import Principal
from helpdesk.config import Role, get_settings
from helpdesk.core import (
    InvalidIdException,
    InvalidReferenceException,
    NoAgentsAvailableException,
    ResourceNotFoundException,
    ValidationException,
)
from helpdesk.infrastructure.llm import ILLMClient
from helpdesk.shared.infrastructure.logging import get_logger, log_latency
from helpdesk.tickets.domain import (
    AccessPolicy,
    CategorizationPromptBuilder,
    CategorizationResult,
    KeywordCategorizer,
    Operation,
    Ticket,
    parse_categorization_reply,
)

logger = get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 50
DEFAULT_SORT = "createdAt"
SORTABLE_FIELDS = (
    "title", "description", "priority", "category", "status",
    "createdAt", "updatedAt", "resolvedAt",
)


def is_valid_id(value: Optional[str]) -> bool:
    try:
        UUID(str(value))
    except (ValueError, TypeError):
        return False
    return True


# ========== Query / Result objects ==========

@dataclass
class TicketFilters:
    """Equality filters for listing and counting tickets."""
    status: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    assigned_to: Optional[str] = None


@dataclass
class TicketPage:
    tickets: List[Ticket]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1


@dataclass
class TicketStats:
    total: int
    by_status: Dict[str, int] = field(default_factory=dict)
    by_priority: List[Tuple[str, int]] = field(default_factory=list)
    by_category: List[Tuple[str, int]] = field(default_factory=list)

    def status_count(self, status: str) -> int:
        return self.by_status.get(status, 0)


# ========== Interfaces (Dependency Inversion) ==========

class ITicketRepository(ABC):
    """Interface for ticket data access."""

    @abstractmethod
    async def get_by_id(self, ticket_id: str) -> Optional[Ticket]:
        """Get ticket with creator and assignee references."""

    @abstractmethod
    async def create(self, ticket: Ticket) -> Ticket:
        """Persist a new ticket and return it with its ID and references."""

    @abstractmethod
    async def update(self, ticket: Ticket) -> Ticket:
        """Write status, priority, assignment and timestamps back."""

    @abstractmethod
    async def delete(self, ticket_id: str) -> bool:
        """Hard delete; False when nothing was removed."""

    @abstractmethod
    async def list(
        self,
        filters: TicketFilters,
        sort_by: str,
        descending: bool,
        limit: int,
        offset: int
    ) -> List[Ticket]:
        """List tickets matching the filters."""

    @abstractmethod
    async def count(self, filters: TicketFilters) -> int:
        """Count tickets matching the filters."""

    @abstractmethod
    async def count_by(self, column: str, assigned_to: Optional[str] = None) -> List[Tuple[str, int]]:
        """Ticket counts grouped by one column, largest group first."""


class IAgentDirectory(ABC):
    """Read access to users for assignment decisions."""

    @abstractmethod
    async def list_agent_ids(self) -> List[str]:
        """IDs of every user with the agent role, in a stable order."""

    @abstractmethod
    async def get_role(self, user_id: str) -> Optional[str]:
        """Role of a user, or None when the user does not exist."""


# ========== Application Services ==========

class CategorizationService:
    """
    Decides category, suggested priority and confidence for a new ticket.

    Asks the language model when a client is configured and falls back to
    the keyword heuristic on any failure. Never raises.
    """

    def __init__(self, categorizer: KeywordCategorizer, llm_client: Optional[ILLMClient] = None):
        self._categorizer = categorizer
        self._llm = llm_client

    async def categorize(self, title: str, description: str) -> CategorizationResult:
        if self._llm is None:
            return self._categorizer.categorize(title, description)

        settings = get_settings()
        messages = CategorizationPromptBuilder.build_messages(title, description)

        try:
            with log_latency(logger, "remote_categorization", model=settings.llm_model):
                response = await self._llm.chat_completion(
                    messages=messages,
                    temperature=settings.llm_temperature,
                    max_tokens=settings.llm_max_tokens,
                    operation="categorization"
                )
            return parse_categorization_reply(response.content)
        except Exception as e:
            logger.warning(
                "Remote categorization failed, using keyword heuristic",
                extra={"error": str(e), "error_type": type(e).__name__}
            )
            return self._categorizer.categorize(title, description)


class TicketService:
    """
    Service for the ticket lifecycle.

    Every operation takes the calling principal and is checked against
    the access policy before anything is read or written.
    """

    def __init__(
        self,
        ticket_repository: ITicketRepository,
        agent_directory: IAgentDirectory,
        categorization_service: CategorizationService,
        policy: Optional[AccessPolicy] = None,
        rng: Optional[random.Random] = None
    ):
        self._tickets = ticket_repository
        self._agents = agent_directory
        self._categorization = categorization_service
        self._policy = policy or AccessPolicy()
        self._rng = rng or random.Random()

    async def create(
        self,
        principal: Principal,
        title: str,
        description: str,
        priority: Optional[str] = None
    ) -> Tuple[Ticket, CategorizationResult]:
        """
        Open a ticket, categorize it and hand it to a random agent.

        Returns:
            The stored ticket and the categorization that produced it

        Raises:
            ValidationException: title or description out of bounds
            NoAgentsAvailableException: there is no agent to assign
        """
        analysis = await self._categorization.categorize(title, description)

        agent_id = await self.pick_agent()
        if agent_id is None:
            raise NoAgentsAvailableException()

        try:
            ticket = Ticket.open(
                title=title,
                description=description,
                priority=priority or analysis.priority,
                category=analysis.category,
                created_by=principal.id,
                assigned_to=agent_id,
            )
        except ValueError as e:
            raise ValidationException(errors=[{"field": "ticket", "message": str(e)}])

        ticket = await self._tickets.create(ticket)

        logger.info(
            "Ticket created",
            extra={
                "ticket_id": ticket.id,
                "category": ticket.category,
                "priority": ticket.priority,
                "assigned_to": agent_id,
                "confidence": analysis.confidence,
                "categorization_source": analysis.source,
            }
        )
        return ticket, analysis

    async def pick_agent(self) -> Optional[str]:
        """Uniformly random agent ID, or None when there are no agents."""
        agent_ids = await self._agents.list_agent_ids()
        if not agent_ids:
            return None
        return self._rng.choice(agent_ids)

    async def list(
        self,
        principal: Principal,
        filters: TicketFilters,
        page: Union[int, str, None] = None,
        limit: Union[int, str, None] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> TicketPage:
        """
        One page of tickets visible to the principal.

        Agents only ever see their own assignments, whatever assignee
        filter they send. Out-of-range paging values are normalized.
        """
        scoped_to = self._policy.assignee_filter(principal, Operation.LIST)
        if scoped_to is not None:
            filters.assigned_to = scoped_to
        elif filters.assigned_to is not None and not is_valid_id(filters.assigned_to):
            raise InvalidIdException("User", filters.assigned_to)

        page, limit = normalize_paging(page, limit)
        if sort_by not in SORTABLE_FIELDS:
            sort_by = DEFAULT_SORT
        descending = sort_order != "asc"

        total = await self._tickets.count(filters)
        tickets = await self._tickets.list(
            filters,
            sort_by=sort_by,
            descending=descending,
            limit=limit,
            offset=(page - 1) * limit,
        )

        return TicketPage(tickets=tickets, page=page, limit=limit, total=total)

    async def get(self, principal: Principal, ticket_id: str) -> Ticket:
        ticket = await self._load(ticket_id)
        self._policy.enforce(principal, Operation.VIEW, ticket.assigned_to)
        return ticket

    async def update(
        self,
        principal: Principal,
        ticket_id: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        assigned_to: Optional[str] = None
    ) -> Ticket:
        """
        Apply a partial update.

        Raises:
            InvalidIdException: malformed ticket ID
            ResourceNotFoundException: no such ticket
            AccessDeniedException: not the assignee, or a non-admin touching
                priority or assignment
            InvalidReferenceException: new assignee is not an agent
        """
        ticket = await self._load(ticket_id)

        self._policy.enforce(principal, Operation.UPDATE_STATUS, ticket.assigned_to)
        if priority is not None:
            self._policy.enforce(principal, Operation.UPDATE_PRIORITY, ticket.assigned_to)
        if assigned_to is not None:
            self._policy.enforce(principal, Operation.REASSIGN, ticket.assigned_to)
            await self._ensure_agent(assigned_to)

        if status is not None:
            ticket.change_status(status)
        if priority is not None:
            ticket.change_priority(priority)
        if assigned_to is not None:
            ticket.reassign(assigned_to)

        ticket = await self._tickets.update(ticket)

        logger.info(
            "Ticket updated",
            extra={
                "ticket_id": ticket.id,
                "user_id": principal.id,
                "status": ticket.status,
                "priority": ticket.priority,
                "assigned_to": ticket.assigned_to,
            }
        )
        return ticket

    async def delete(self, principal: Principal, ticket_id: str) -> None:
        self._policy.enforce(principal, Operation.DELETE)

        if not is_valid_id(ticket_id):
            raise InvalidIdException("Ticket", ticket_id)
        if not await self._tickets.delete(ticket_id):
            raise ResourceNotFoundException("Ticket", ticket_id)

        logger.info("Ticket deleted", extra={"ticket_id": ticket_id, "user_id": principal.id})

    async def stats(self, principal: Principal) -> TicketStats:
        """Counts by status, priority and category over the principal's scope."""
        scoped_to = self._policy.assignee_filter(principal, Operation.STATS)

        by_status = dict(await self._tickets.count_by("status", scoped_to))
        return TicketStats(
            total=sum(by_status.values()),
            by_status=by_status,
            by_priority=await self._tickets.count_by("priority", scoped_to),
            by_category=await self._tickets.count_by("category", scoped_to),
        )

    async def _load(self, ticket_id: str) -> Ticket:
        if not is_valid_id(ticket_id):
            raise InvalidIdException("Ticket", ticket_id)

        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None:
            raise ResourceNotFoundException("Ticket", ticket_id)
        return ticket

    async def _ensure_agent(self, user_id: str) -> None:
        role = await self._agents.get_role(user_id) if is_valid_id(user_id) else None
        if role != Role.AGENT:
            raise InvalidReferenceException(
                "Invalid assigned user",
                errors=[{"field": "assignedTo", "message": "Assigned user must be an existing agent"}]
            )


def _as_int(value: Union[int, str, None]) -> Optional[int]:
    if value is None or isinstance(value, int):
        return value
    try:
        return int(value.strip())
    except ValueError:
        return None


def normalize_paging(
    page: Union[int, str, None],
    limit: Union[int, str, None]
) -> Tuple[int, int]:
    """
    Clamp paging values.

    page below 1 or unparsable becomes 1; an unparsable limit falls back to
    the default, anything else is clamped to [1, MAX_LIMIT].
    """
    page = _as_int(page)
    limit = _as_int(limit)
    if page is None or page < 1:
        page = DEFAULT_PAGE
    if limit is None:
        limit = DEFAULT_LIMIT
    return page, min(max(1, limit), MAX_LIMIT)
