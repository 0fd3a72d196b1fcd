import logging
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.errors import NotFoundError, ValidationError
from ticketing.modules.statuses.repository import TicketStatusRepository
from ticketing.modules.statuses.models import TicketStatus
from ticketing.modules.statuses.schemas import TicketStatusCreate, TicketStatusUpdate
from ticketing.modules.statuses.workflow import is_terminal
from ticketing.modules.tickets.repository import TicketRepository

logger = logging.getLogger(__name__)

class TicketStatusService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = TicketStatusRepository(session)
        self.tickets = TicketRepository(session)

    async def _check_name(self, name: str | None, exclude_id: int | None = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Status name is required")
        if await self.repo.name_exists(name, exclude_id):
            logger.warning("Ticket status name already exists: %s", name)
            raise ValidationError("Status name already exists")
        return name

    async def get_by_id(self, status_id: int) -> TicketStatus:
        obj = await self.repo.get(status_id)
        if not obj:
            logger.warning("Ticket status not found: %s", status_id)
            raise NotFoundError("Ticket status not found")
        return obj

    async def get_all(self):
        return await self.repo.list()

    async def get_all_ordered_by_name(self):
        return await self.repo.list(order_by_name=True)

    async def create(self, payload: TicketStatusCreate) -> TicketStatus:
        name = await self._check_name(payload.name)
        obj = await self.repo.create(**payload.model_dump(exclude={"name"}), name=name)
        await self.session.commit()
        logger.info("Created ticket status %s (%s)", obj.id, obj.name)
        return obj

    async def update(self, status_id: int, payload: TicketStatusUpdate) -> TicketStatus:
        obj = await self.get_by_id(status_id)
        name = await self._check_name(payload.name, exclude_id=status_id)
        if is_terminal(name) != is_terminal(obj.name):
            in_use = await self.tickets.count(status_id=status_id)
            if in_use > 0:
                logger.warning("Rename of ticket status %s would change closed state of %s tickets", status_id, in_use)
                raise ValidationError(f"Cannot change the lifecycle meaning of a status used by {in_use} tickets")
        for k, v in payload.model_dump(exclude={"name"}).items():
            setattr(obj, k, v)
        obj.name = name
        await self.session.commit()
        logger.info("Updated ticket status %s", status_id)
        return obj

    async def delete(self, status_id: int) -> bool:
        obj = await self.get_by_id(status_id)
        in_use = await self.tickets.count(status_id=status_id)
        if in_use > 0:
            logger.warning("Cannot delete ticket status %s - has %s tickets", status_id, in_use)
            raise ValidationError(f"Cannot delete status that is being used by {in_use} tickets")
        await self.repo.delete(obj)
        await self.session.commit()
        logger.info("Deleted ticket status %s (%s)", status_id, obj.name)
        return True

    async def ticket_count(self, status_id: int) -> int:
        await self.get_by_id(status_id)
        return await self.tickets.count(status_id=status_id)
