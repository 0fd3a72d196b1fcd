import logging
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.errors import NotFoundError, ValidationError
from ticketing.modules.faq.repository import FAQRepository
from ticketing.modules.faq.models import FAQCategory
from ticketing.modules.faq.schemas import (
    FAQCategoryCreate, FAQCategoryUpdate, FAQCategoryWithItems,
    FAQItemCreate, FAQItemUpdate, FAQItemOut
)
from ticketing.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

class FAQService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = FAQRepository(session)
        self.users = UserRepository(session)

    # ---- Categories ----
    async def get_all_categories(self):
        return await self.repo.list_active_categories()

    async def get_category_with_items(self, category_id: int) -> FAQCategoryWithItems:
        category = await self.repo.get_category_with_items(category_id)
        if not category or not category.is_active:
            raise NotFoundError("FAQ category not found")
        return FAQCategoryWithItems(
            id=category.id,
            name=category.name,
            description=category.description,
            is_active=category.is_active,
            items=[FAQItemOut.from_entity(i) for i in category.items if i.is_active],
        )

    async def create_category(self, payload: FAQCategoryCreate) -> FAQCategory:
        name = (payload.name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        if await self.repo.category_name_exists(name):
            raise ValidationError("Category name already exists")
        obj = await self.repo.add_category(name=name, description=payload.description, is_active=True)
        await self.session.commit()
        logger.info("Created FAQ category %s (%s)", obj.id, obj.name)
        return obj

    async def update_category(self, category_id: int, payload: FAQCategoryUpdate) -> FAQCategory:
        obj = await self.repo.get_category(category_id)
        if not obj:
            raise NotFoundError("FAQ category not found")
        name = (payload.name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        if await self.repo.category_name_exists(name, exclude_id=category_id):
            raise ValidationError("Category name already exists")
        obj.name = name
        obj.description = payload.description
        obj.is_active = payload.is_active
        await self.session.commit()
        return obj

    async def deactivate_category(self, category_id: int) -> bool:
        obj = await self.repo.get_category(category_id)
        if not obj:
            raise NotFoundError("FAQ category not found")
        obj.is_active = False
        await self.session.commit()
        logger.info("Deactivated FAQ category %s", category_id)
        return True

    # ---- Items ----
    async def get_item(self, item_id: int) -> FAQItemOut:
        item = await self.repo.get_item(item_id)
        if not item or not item.is_active:
            raise NotFoundError("FAQ not found")
        return FAQItemOut.from_entity(item)

    async def get_items_by_category(self, category_id: int) -> list[FAQItemOut]:
        return [FAQItemOut.from_entity(i) for i in await self.repo.list_items_for_category(category_id)]

    async def get_active_items(self) -> list[FAQItemOut]:
        return [FAQItemOut.from_entity(i) for i in await self.repo.list_active_items()]

    async def search(self, term: str) -> list[FAQItemOut]:
        if not term or not term.strip():
            return await self.get_active_items()
        return [FAQItemOut.from_entity(i) for i in await self.repo.search_items(term)]

    async def create_item(self, payload: FAQItemCreate, created_by_id: int) -> FAQItemOut:
        if not payload.question.strip():
            raise ValidationError("Question is required")
        if not payload.answer.strip():
            raise ValidationError("Answer is required")
        category = await self.repo.get_category(payload.category_id)
        if not category or not category.is_active:
            raise ValidationError("Invalid or inactive category")
        user = await self.users.get(created_by_id)
        if not user or not user.is_active:
            raise ValidationError("Invalid user")
        item = await self.repo.add_item(
            category_id=payload.category_id,
            question=payload.question.strip(),
            answer=payload.answer.strip(),
            created_by_id=created_by_id,
            is_active=True,
        )
        await self.session.commit()
        logger.info("Created FAQ %s in category %s", item.id, item.category_id)
        return await self.get_item(item.id)

    async def update_item(self, item_id: int, payload: FAQItemUpdate) -> FAQItemOut:
        item = await self.repo.get_item(item_id)
        if not item:
            raise NotFoundError("FAQ not found")
        if not payload.question.strip():
            raise ValidationError("Question is required")
        if not payload.answer.strip():
            raise ValidationError("Answer is required")
        item.question = payload.question.strip()
        item.answer = payload.answer.strip()
        item.is_active = payload.is_active
        await self.session.commit()
        return FAQItemOut.from_entity(await self.repo.get_item(item_id))

    async def deactivate_item(self, item_id: int) -> bool:
        item = await self.repo.get_item(item_id)
        if not item:
            raise NotFoundError("FAQ not found")
        item.is_active = False
        await self.session.commit()
        logger.info("Deactivated FAQ %s", item_id)
        return True
