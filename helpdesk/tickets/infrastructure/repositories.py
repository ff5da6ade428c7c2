"""
Tickets Infrastructure Repositories
===================================

Concrete implementations of the ticket repository and agent directory
using SQLAlchemy.
"""

from typing import List, Optional, Tuple
from uuid import uuid4

from sqlalchemy import select, and_, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.auth.infrastructure import UserModel, parse_uuid
from helpdesk.config import Role
from helpdesk.core import RepositoryException
from helpdesk.tickets.application import IAgentDirectory, ITicketRepository, TicketFilters
from helpdesk.tickets.domain import Ticket, UserRef
from helpdesk.tickets.infrastructure.models import TicketModel

SORT_COLUMNS = {
    "title": TicketModel.title,
    "description": TicketModel.description,
    "priority": TicketModel.priority,
    "category": TicketModel.category,
    "status": TicketModel.status,
    "createdAt": TicketModel.created_at,
    "updatedAt": TicketModel.updated_at,
    "resolvedAt": TicketModel.resolved_at,
}

GROUP_COLUMNS = {
    "status": TicketModel.status,
    "priority": TicketModel.priority,
    "category": TicketModel.category,
}


def _user_ref(model: Optional[UserModel]) -> Optional[UserRef]:
    if model is None:
        return None
    return UserRef(id=str(model.id), name=model.name, email=model.email)


def to_entity(model: TicketModel) -> Ticket:
    return Ticket(
        id=str(model.id),
        title=model.title,
        description=model.description,
        priority=model.priority,
        category=model.category,
        status=model.status,
        created_by=str(model.created_by),
        assigned_to=str(model.assigned_to),
        created_at=model.created_at,
        updated_at=model.updated_at,
        resolved_at=model.resolved_at,
        attachments=list(model.attachments or []),
        creator=_user_ref(model.creator),
        assignee=_user_ref(model.assignee),
    )


class SQLAlchemyTicketRepository(ITicketRepository):
    """
    SQLAlchemy implementation of ticket repository.

    Handles persistence of Ticket entities using async SQLAlchemy.
    Creator and assignee are joined in on every load.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _get_model(self, ticket_id: str) -> Optional[TicketModel]:
        ticket_uuid = parse_uuid(ticket_id)
        if ticket_uuid is None:
            return None
        return await self._session.get(TicketModel, ticket_uuid)

    async def get_by_id(self, ticket_id: str) -> Optional[Ticket]:
        model = await self._get_model(ticket_id)
        return to_entity(model) if model else None

    async def create(self, ticket: Ticket) -> Ticket:
        model = TicketModel(
            id=uuid4(),
            title=ticket.title,
            description=ticket.description,
            priority=ticket.priority,
            category=ticket.category,
            status=ticket.status,
            created_by=parse_uuid(ticket.created_by),
            assigned_to=parse_uuid(ticket.assigned_to),
            attachments=list(ticket.attachments),
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
            resolved_at=ticket.resolved_at,
        )

        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)

        return to_entity(model)

    async def update(self, ticket: Ticket) -> Ticket:
        model = await self._get_model(ticket.id)
        if not model:
            raise RepositoryException(f"Ticket {ticket.id} not found")

        model.status = ticket.status
        model.priority = ticket.priority
        model.assigned_to = parse_uuid(ticket.assigned_to)
        model.updated_at = ticket.updated_at
        model.resolved_at = ticket.resolved_at

        await self._session.flush()
        await self._session.refresh(model)

        return to_entity(model)

    async def delete(self, ticket_id: str) -> bool:
        ticket_uuid = parse_uuid(ticket_id)
        if ticket_uuid is None:
            return False

        result = await self._session.execute(
            delete(TicketModel).where(TicketModel.id == ticket_uuid)
        )
        return result.rowcount > 0

    def _conditions(self, filters: TicketFilters) -> list:
        conditions = []
        if filters.status:
            conditions.append(TicketModel.status == filters.status)
        if filters.category:
            conditions.append(TicketModel.category == filters.category)
        if filters.priority:
            conditions.append(TicketModel.priority == filters.priority)
        if filters.assigned_to:
            conditions.append(TicketModel.assigned_to == parse_uuid(filters.assigned_to))
        return conditions

    async def list(
        self,
        filters: TicketFilters,
        sort_by: str = "createdAt",
        descending: bool = True,
        limit: int = 10,
        offset: int = 0
    ) -> List[Ticket]:
        stmt = select(TicketModel)

        conditions = self._conditions(filters)
        if conditions:
            stmt = stmt.where(and_(*conditions))

        column = SORT_COLUMNS.get(sort_by, TicketModel.created_at)
        order = column.desc() if descending else column.asc()
        # Tie-break on id so pages never overlap
        stmt = stmt.order_by(order, TicketModel.id.asc())
        stmt = stmt.limit(limit).offset(offset)

        result = await self._session.execute(stmt)
        return [to_entity(model) for model in result.scalars().all()]

    async def count(self, filters: TicketFilters) -> int:
        stmt = select(func.count(TicketModel.id))

        conditions = self._conditions(filters)
        if conditions:
            stmt = stmt.where(and_(*conditions))

        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def count_by(self, column: str, assigned_to: Optional[str] = None) -> List[Tuple[str, int]]:
        group_column = GROUP_COLUMNS.get(column)
        if group_column is None:
            raise RepositoryException(f"Cannot group tickets by {column}")

        count = func.count(TicketModel.id)
        stmt = select(group_column, count).group_by(group_column)
        if assigned_to:
            stmt = stmt.where(TicketModel.assigned_to == parse_uuid(assigned_to))
        stmt = stmt.order_by(count.desc(), group_column.asc())

        result = await self._session.execute(stmt)
        return [(value, total) for value, total in result.all()]


class SQLAlchemyAgentDirectory(IAgentDirectory):
    """Looks up agents in the users table."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def list_agent_ids(self) -> List[str]:
        stmt = (
            select(UserModel.id)
            .where(UserModel.role == Role.AGENT)
            .order_by(UserModel.created_at.asc(), UserModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [str(user_id) for user_id in result.scalars().all()]

    async def get_role(self, user_id: str) -> Optional[str]:
        user_uuid = parse_uuid(user_id)
        if user_uuid is None:
            return None

        result = await self._session.execute(
            select(UserModel.role).where(UserModel.id == user_uuid)
        )
        return result.scalar_one_or_none()
