from typing import Sequence
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.modules.priorities.models import TicketPriority

class TicketPriorityRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> TicketPriority:
        obj = TicketPriority(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, priority_id: int) -> TicketPriority | None:
        return await self.session.get(TicketPriority, priority_id)

    async def list(self, *, order_by_name: bool = False) -> Sequence[TicketPriority]:
        order = TicketPriority.name if order_by_name else TicketPriority.id
        res = await self.session.execute(select(TicketPriority).order_by(order))
        return res.scalars().all()

    async def delete(self, obj: TicketPriority) -> None:
        await self.session.delete(obj)
        await self.session.flush()

    async def name_exists(self, name: str, exclude_id: int | None = None) -> bool:
        q = select(func.count(TicketPriority.id)).where(func.lower(TicketPriority.name) == name.strip().lower())
        if exclude_id is not None:
            q = q.where(TicketPriority.id != exclude_id)
        return (await self.session.execute(q)).scalar_one() > 0
