from typing import Sequence
from sqlalchemy import select, func, or_
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.modules.faq.models import FAQCategory, FAQItem

class FAQRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    # ---- Categories ----
    async def add_category(self, **data) -> FAQCategory:
        obj = FAQCategory(**data); self.session.add(obj); await self.session.flush(); return obj

    async def get_category(self, category_id: int) -> FAQCategory | None:
        return await self.session.get(FAQCategory, category_id)

    async def get_category_with_items(self, category_id: int) -> FAQCategory | None:
        q = (
            select(FAQCategory)
            .where(FAQCategory.id == category_id)
            .options(selectinload(FAQCategory.items).selectinload(FAQItem.created_by))
            .execution_options(populate_existing=True)
        )
        return (await self.session.execute(q)).scalar_one_or_none()

    async def list_active_categories(self) -> Sequence[FAQCategory]:
        q = select(FAQCategory).where(FAQCategory.is_active.is_(True)).order_by(FAQCategory.name)
        return (await self.session.execute(q)).scalars().all()

    async def category_name_exists(self, name: str, exclude_id: int | None = None) -> bool:
        q = select(func.count(FAQCategory.id)).where(func.lower(FAQCategory.name) == name.strip().lower())
        if exclude_id is not None:
            q = q.where(FAQCategory.id != exclude_id)
        return (await self.session.execute(q)).scalar_one() > 0

    # ---- Items ----
    def _items(self):
        return select(FAQItem).options(selectinload(FAQItem.created_by)).execution_options(populate_existing=True)

    async def add_item(self, **data) -> FAQItem:
        obj = FAQItem(**data); self.session.add(obj); await self.session.flush(); return obj

    async def get_item(self, item_id: int) -> FAQItem | None:
        return (await self.session.execute(self._items().where(FAQItem.id == item_id))).scalar_one_or_none()

    async def list_items_for_category(self, category_id: int) -> Sequence[FAQItem]:
        q = self._items().where(FAQItem.category_id == category_id, FAQItem.is_active.is_(True)).order_by(FAQItem.id)
        return (await self.session.execute(q)).scalars().all()

    async def list_active_items(self) -> Sequence[FAQItem]:
        q = (
            self._items()
            .join(FAQCategory, FAQCategory.id == FAQItem.category_id)
            .where(FAQItem.is_active.is_(True), FAQCategory.is_active.is_(True))
            .order_by(FAQItem.category_id, FAQItem.id)
        )
        return (await self.session.execute(q)).scalars().all()

    async def search_items(self, term: str) -> Sequence[FAQItem]:
        escaped = term.strip().lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        q = self._items().where(
            FAQItem.is_active.is_(True),
            or_(func.lower(FAQItem.question).like(pattern, escape="\\"), func.lower(FAQItem.answer).like(pattern, escape="\\")),
        ).order_by(FAQItem.id)
        return (await self.session.execute(q)).scalars().all()
