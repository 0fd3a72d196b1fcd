import logging
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.errors import NotFoundError, ValidationError
from ticketing.modules.teams.repository import TeamRepository
from ticketing.modules.teams.models import Team
from ticketing.modules.teams.schemas import TeamCreate, TeamUpdate, TeamOut, TeamDetails
from ticketing.modules.departments.repository import DepartmentRepository
from ticketing.modules.departments.schemas import MemberSummary
from ticketing.modules.tickets.repository import TicketRepository

logger = logging.getLogger(__name__)

class TeamService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = TeamRepository(session)
        self.departments = DepartmentRepository(session)
        self.tickets = TicketRepository(session)

    async def _get_active(self, team_id: int) -> Team:
        team = await self.repo.get(team_id)
        if not team or not team.is_active:
            logger.warning("Team not found or inactive: %s", team_id)
            raise NotFoundError("Team not found")
        return team

    async def _check_name(self, name: str | None, department_id: int, exclude_id: int | None = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Team name is required")
        if await self.repo.name_exists(name, department_id, exclude_id):
            logger.warning("Team name %r already exists in department %s", name, department_id)
            raise ValidationError("Team name already exists in this department")
        return name

    async def get_by_id(self, team_id: int) -> TeamOut:
        return TeamOut.from_entity(await self._get_active(team_id))

    async def get_details(self, team_id: int) -> TeamDetails:
        team = await self._get_active(team_id)
        users = await self.repo.members(team_id)
        active = await self.tickets.count(team_id=team_id, active=True)
        return TeamDetails(
            **TeamOut.from_entity(team).model_dump(),
            users=[MemberSummary.model_validate(u) for u in users],
            active_tickets_count=active,
        )

    async def get_all_active(self) -> list[TeamOut]:
        return [TeamOut.from_entity(t) for t in await self.repo.list_active()]

    async def get_by_department(self, department_id: int) -> list[TeamOut]:
        return [TeamOut.from_entity(t) for t in await self.repo.list_for_department(department_id)]

    async def get_by_user(self, user_id: int) -> list[TeamOut]:
        return [TeamOut.from_entity(t) for t in await self.repo.list_for_user(user_id)]

    async def create(self, payload: TeamCreate) -> TeamOut:
        department = await self.departments.get(payload.department_id)
        if not department or not department.is_active:
            logger.warning("Invalid department for team: %s", payload.department_id)
            raise ValidationError("Invalid department")
        name = await self._check_name(payload.name, payload.department_id)
        obj = await self.repo.create(
            department_id=payload.department_id, name=name, description=payload.description, is_active=True
        )
        await self.session.commit()
        logger.info("Created team %s (%s) in department %s", obj.id, obj.name, obj.department_id)
        return await self.get_by_id(obj.id)

    async def update(self, team_id: int, payload: TeamUpdate) -> TeamOut:
        team = await self._get_active(team_id)
        team.name = await self._check_name(payload.name, team.department_id, exclude_id=team_id)
        team.description = payload.description
        team.is_active = payload.is_active
        await self.session.commit()
        logger.info("Updated team %s", team_id)
        return TeamOut.from_entity(await self.repo.get(team_id))

    async def deactivate(self, team_id: int) -> bool:
        team = await self.repo.get(team_id)
        if not team:
            raise NotFoundError("Team not found")
        if not team.is_active:
            return False
        team.is_active = False
        await self.session.commit()
        logger.info("Deactivated team %s", team_id)
        return True
