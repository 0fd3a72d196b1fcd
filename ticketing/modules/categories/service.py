import logging
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.errors import NotFoundError, ValidationError
from ticketing.modules.categories.repository import TicketCategoryRepository
from ticketing.modules.categories.models import TicketCategory
from ticketing.modules.categories.schemas import TicketCategoryCreate, TicketCategoryUpdate
from ticketing.modules.tickets.repository import TicketRepository

logger = logging.getLogger(__name__)

class TicketCategoryService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = TicketCategoryRepository(session)
        self.tickets = TicketRepository(session)

    async def _check_name(self, name: str | None, exclude_id: int | None = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        if await self.repo.name_exists(name, exclude_id):
            logger.warning("Ticket category name already exists: %s", name)
            raise ValidationError("Category name already exists")
        return name

    async def get_by_id(self, category_id: int) -> TicketCategory:
        obj = await self.repo.get(category_id)
        if not obj:
            logger.warning("Ticket category not found: %s", category_id)
            raise NotFoundError("Ticket category not found")
        return obj

    async def get_all(self):
        return await self.repo.list()

    async def get_active(self):
        return await self.repo.list(active_only=True)

    async def create(self, payload: TicketCategoryCreate) -> TicketCategory:
        name = await self._check_name(payload.name)
        obj = await self.repo.create(name=name, description=payload.description, is_active=True)
        await self.session.commit()
        logger.info("Created ticket category %s (%s)", obj.id, obj.name)
        return obj

    async def update(self, category_id: int, payload: TicketCategoryUpdate) -> TicketCategory:
        obj = await self.get_by_id(category_id)
        obj.name = await self._check_name(payload.name, exclude_id=category_id)
        obj.description = payload.description
        obj.is_active = payload.is_active
        await self.session.commit()
        logger.info("Updated ticket category %s", category_id)
        return obj

    async def deactivate(self, category_id: int) -> bool:
        obj = await self.get_by_id(category_id)
        if not obj.is_active:
            return False
        open_tickets = await self.tickets.count(category_id=category_id, active=True)
        if open_tickets > 0:
            logger.warning("Cannot deactivate ticket category %s - has %s active tickets", category_id, open_tickets)
            raise ValidationError(f"Cannot deactivate category with {open_tickets} active tickets")
        obj.is_active = False
        await self.session.commit()
        logger.info("Deactivated ticket category %s", category_id)
        return True
