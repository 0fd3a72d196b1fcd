from typing import Sequence
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.modules.categories.models import TicketCategory

class TicketCategoryRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> TicketCategory:
        obj = TicketCategory(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, category_id: int) -> TicketCategory | None:
        return await self.session.get(TicketCategory, category_id)

    async def list(self, *, active_only: bool = False) -> Sequence[TicketCategory]:
        q = select(TicketCategory)
        if active_only:
            q = q.where(TicketCategory.is_active.is_(True))
        res = await self.session.execute(q.order_by(TicketCategory.name))
        return res.scalars().all()

    async def name_exists(self, name: str, exclude_id: int | None = None) -> bool:
        q = select(func.count(TicketCategory.id)).where(func.lower(TicketCategory.name) == name.strip().lower())
        if exclude_id is not None:
            q = q.where(TicketCategory.id != exclude_id)
        return (await self.session.execute(q)).scalar_one() > 0
