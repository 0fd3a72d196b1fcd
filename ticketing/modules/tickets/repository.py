from typing import Sequence
from datetime import datetime
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.modules.tickets.models import Ticket, TicketComment, TicketAttachment, TicketFeedback

# Columns accepted by TicketRepository.count / list_filtered
_FILTER_COLUMNS = {
    "created_by_id": Ticket.created_by_id,
    "assigned_to_id": Ticket.assigned_to_id,
    "department_id": Ticket.department_id,
    "team_id": Ticket.team_id,
    "status_id": Ticket.status_id,
    "priority_id": Ticket.priority_id,
    "category_id": Ticket.category_id,
}

def _conditions(active: bool | None = None, created_from: datetime | None = None,
                created_to: datetime | None = None, **filters) -> list:
    conditions = []
    for key, value in filters.items():
        if value is None:
            continue
        column = _FILTER_COLUMNS.get(key)
        if column is None:
            raise TypeError(f"Unknown ticket filter: {key}")
        conditions.append(column == value)
    if active is True:   conditions.append(Ticket.closed_at.is_(None))
    if active is False:  conditions.append(Ticket.closed_at.is_not(None))
    if created_from:     conditions.append(Ticket.created_at >= created_from)
    if created_to:       conditions.append(Ticket.created_at <= created_to)
    return conditions

class TicketRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _details(self):
        return (
            select(Ticket)
            .options(
                selectinload(Ticket.category),
                selectinload(Ticket.priority),
                selectinload(Ticket.status),
                selectinload(Ticket.department),
                selectinload(Ticket.team),
                selectinload(Ticket.assigned_to),
                selectinload(Ticket.created_by),
            )
            .execution_options(populate_existing=True)
        )

    async def create(self, **data) -> Ticket:
        obj = Ticket(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, ticket_id: int) -> Ticket | None:
        return await self.session.get(Ticket, ticket_id)

    async def get_details(self, ticket_id: int) -> Ticket | None:
        q = self._details().where(Ticket.id == ticket_id)
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list_filtered(self, **filters) -> Sequence[Ticket]:
        q = (
            self._details()
            .where(*_conditions(**filters))
            .order_by(Ticket.created_at.desc(), Ticket.id.desc())
        )
        res = await self.session.execute(q)
        return res.scalars().all()

    async def count(self, **filters) -> int:
        q = select(func.count(Ticket.id)).where(*_conditions(**filters))
        return (await self.session.execute(q)).scalar_one()

    async def delete(self, ticket: Ticket) -> None:
        # load owned rows so the ORM cascade removes them
        q = (
            select(Ticket)
            .options(selectinload(Ticket.comments), selectinload(Ticket.attachments), selectinload(Ticket.feedback))
            .where(Ticket.id == ticket.id)
            .execution_options(populate_existing=True)
        )
        obj = (await self.session.execute(q)).scalar_one()
        await self.session.delete(obj)
        await self.session.flush()

class TicketCommentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> TicketComment:
        obj = TicketComment(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, comment_id: int) -> TicketComment | None:
        q = select(TicketComment).options(selectinload(TicketComment.user)).where(TicketComment.id == comment_id).execution_options(populate_existing=True)
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list_for_ticket(self, ticket_id: int, include_internal: bool = False) -> Sequence[TicketComment]:
        q = (
            select(TicketComment)
            .options(selectinload(TicketComment.user))
            .where(TicketComment.ticket_id == ticket_id)
            .order_by(TicketComment.created_at.desc(), TicketComment.id.desc())
            .execution_options(populate_existing=True)
        )
        if not include_internal:
            q = q.where(TicketComment.is_internal.is_(False))
        res = await self.session.execute(q)
        return res.scalars().all()

class TicketAttachmentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> TicketAttachment:
        obj = TicketAttachment(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, attachment_id: int) -> TicketAttachment | None:
        q = select(TicketAttachment).options(selectinload(TicketAttachment.user)).where(TicketAttachment.id == attachment_id).execution_options(populate_existing=True)
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list_for_ticket(self, ticket_id: int) -> Sequence[TicketAttachment]:
        q = (
            select(TicketAttachment)
            .options(selectinload(TicketAttachment.user))
            .where(TicketAttachment.ticket_id == ticket_id)
            .order_by(TicketAttachment.uploaded_at.desc(), TicketAttachment.id.desc())
            .execution_options(populate_existing=True)
        )
        res = await self.session.execute(q)
        return res.scalars().all()

    async def delete(self, obj: TicketAttachment) -> None:
        await self.session.delete(obj)
        await self.session.flush()

class TicketFeedbackRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> TicketFeedback:
        obj = TicketFeedback(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get_for_ticket(self, ticket_id: int) -> TicketFeedback | None:
        q = select(TicketFeedback).options(selectinload(TicketFeedback.user)).where(TicketFeedback.ticket_id == ticket_id).execution_options(populate_existing=True)
        res = await self.session.execute(q)
        return res.scalar_one_or_none()
