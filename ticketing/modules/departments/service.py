import logging
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.errors import NotFoundError, ValidationError
from ticketing.modules.departments.repository import DepartmentRepository
from ticketing.modules.departments.models import Department
from ticketing.modules.departments.schemas import (
    DepartmentCreate, DepartmentUpdate, DepartmentDetails, TeamSummary, MemberSummary
)
from ticketing.modules.tickets.repository import TicketRepository

logger = logging.getLogger(__name__)

class DepartmentService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = DepartmentRepository(session)
        self.tickets = TicketRepository(session)

    async def _get_active(self, department_id: int) -> Department:
        obj = await self.repo.get(department_id)
        if not obj or not obj.is_active:
            logger.warning("Department not found or inactive: %s", department_id)
            raise NotFoundError("Department not found")
        return obj

    async def _check_name(self, name: str | None, exclude_id: int | None = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Department name is required")
        if await self.repo.name_exists(name, exclude_id):
            logger.warning("Department name already exists: %s", name)
            raise ValidationError("Department name already exists")
        return name

    async def get_by_id(self, department_id: int) -> Department:
        return await self._get_active(department_id)

    async def get_details(self, department_id: int) -> DepartmentDetails:
        dep = await self.repo.get_with_teams(department_id)
        if not dep or not dep.is_active:
            raise NotFoundError("Department not found")
        users = await self.repo.members(department_id)
        active = await self.tickets.count(department_id=department_id, active=True)
        return DepartmentDetails(
            id=dep.id,
            name=dep.name,
            description=dep.description,
            is_active=dep.is_active,
            created_at=dep.created_at,
            teams=[TeamSummary.model_validate(t) for t in dep.teams],
            users=[MemberSummary.model_validate(u) for u in users],
            active_tickets_count=active,
        )

    async def get_all_active(self):
        return await self.repo.list_active()

    async def get_by_user(self, user_id: int):
        return await self.repo.list_for_user(user_id)

    async def create(self, payload: DepartmentCreate) -> Department:
        name = await self._check_name(payload.name)
        obj = await self.repo.create(name=name, description=payload.description, is_active=True)
        await self.session.commit()
        logger.info("Created department %s (%s)", obj.id, obj.name)
        return obj

    async def update(self, department_id: int, payload: DepartmentUpdate) -> Department:
        obj = await self._get_active(department_id)
        obj.name = await self._check_name(payload.name, exclude_id=department_id)
        obj.description = payload.description
        obj.is_active = payload.is_active
        await self.session.commit()
        logger.info("Updated department %s", department_id)
        return obj

    async def deactivate(self, department_id: int) -> bool:
        obj = await self.repo.get(department_id)
        if not obj:
            raise NotFoundError("Department not found")
        if not obj.is_active:
            return False
        obj.is_active = False
        await self.session.commit()
        logger.info("Deactivated department %s", department_id)
        return True
