from typing import Sequence
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.modules.statuses.models import TicketStatus

class TicketStatusRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> TicketStatus:
        obj = TicketStatus(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, status_id: int) -> TicketStatus | None:
        return await self.session.get(TicketStatus, status_id)

    async def list(self, *, order_by_name: bool = False) -> Sequence[TicketStatus]:
        order = TicketStatus.name if order_by_name else TicketStatus.id
        res = await self.session.execute(select(TicketStatus).order_by(order))
        return res.scalars().all()

    async def delete(self, obj: TicketStatus) -> None:
        await self.session.delete(obj)
        await self.session.flush()

    async def name_exists(self, name: str, exclude_id: int | None = None) -> bool:
        q = select(func.count(TicketStatus.id)).where(func.lower(TicketStatus.name) == name.strip().lower())
        if exclude_id is not None:
            q = q.where(TicketStatus.id != exclude_id)
        return (await self.session.execute(q)).scalar_one() > 0
