import logging
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.errors import NotFoundError, ValidationError
from ticketing.modules.priorities.repository import TicketPriorityRepository
from ticketing.modules.priorities.models import TicketPriority
from ticketing.modules.priorities.schemas import TicketPriorityCreate, TicketPriorityUpdate
from ticketing.modules.tickets.repository import TicketRepository

logger = logging.getLogger(__name__)

class TicketPriorityService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = TicketPriorityRepository(session)
        self.tickets = TicketRepository(session)

    async def _check_name(self, name: str | None, exclude_id: int | None = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Priority name is required")
        if await self.repo.name_exists(name, exclude_id):
            logger.warning("Ticket priority name already exists: %s", name)
            raise ValidationError("Priority name already exists")
        return name

    async def get_by_id(self, priority_id: int) -> TicketPriority:
        obj = await self.repo.get(priority_id)
        if not obj:
            logger.warning("Ticket priority not found: %s", priority_id)
            raise NotFoundError("Ticket priority not found")
        return obj

    async def get_all(self):
        return await self.repo.list()

    async def get_all_ordered_by_name(self):
        return await self.repo.list(order_by_name=True)

    async def create(self, payload: TicketPriorityCreate) -> TicketPriority:
        name = await self._check_name(payload.name)
        obj = await self.repo.create(**payload.model_dump(exclude={"name"}), name=name)
        await self.session.commit()
        logger.info("Created ticket priority %s (%s)", obj.id, obj.name)
        return obj

    async def update(self, priority_id: int, payload: TicketPriorityUpdate) -> TicketPriority:
        obj = await self.get_by_id(priority_id)
        name = await self._check_name(payload.name, exclude_id=priority_id)
        for k, v in payload.model_dump(exclude={"name"}).items():
            setattr(obj, k, v)
        obj.name = name
        await self.session.commit()
        logger.info("Updated ticket priority %s", priority_id)
        return obj

    async def delete(self, priority_id: int) -> bool:
        obj = await self.get_by_id(priority_id)
        in_use = await self.tickets.count(priority_id=priority_id)
        if in_use > 0:
            logger.warning("Cannot delete ticket priority %s - has %s tickets", priority_id, in_use)
            raise ValidationError(f"Cannot delete priority that is being used by {in_use} tickets")
        await self.repo.delete(obj)
        await self.session.commit()
        logger.info("Deleted ticket priority %s (%s)", priority_id, obj.name)
        return True

    async def ticket_count(self, priority_id: int) -> int:
        await self.get_by_id(priority_id)
        return await self.tickets.count(priority_id=priority_id)
