from typing import Sequence
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.modules.teams.models import Team
from ticketing.modules.users.models import User, UserRole

class TeamRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _select(self):
        return select(Team).options(selectinload(Team.department)).execution_options(populate_existing=True)

    async def create(self, **data) -> Team:
        obj = Team(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, team_id: int) -> Team | None:
        res = await self.session.execute(self._select().where(Team.id == team_id))
        return res.scalar_one_or_none()

    async def list_active(self) -> Sequence[Team]:
        q = self._select().where(Team.is_active.is_(True)).order_by(Team.name)
        res = await self.session.execute(q)
        return res.scalars().all()

    async def list_for_department(self, department_id: int) -> Sequence[Team]:
        q = self._select().where(Team.department_id == department_id, Team.is_active.is_(True)).order_by(Team.name)
        res = await self.session.execute(q)
        return res.scalars().all()

    async def list_for_user(self, user_id: int) -> Sequence[Team]:
        q = (
            self._select()
            .join(UserRole, UserRole.team_id == Team.id)
            .where(UserRole.user_id == user_id, Team.is_active.is_(True))
            .distinct()
            .order_by(Team.name)
        )
        res = await self.session.execute(q)
        return res.scalars().all()

    async def members(self, team_id: int) -> Sequence[User]:
        q = (
            select(User)
            .join(UserRole, UserRole.user_id == User.id)
            .where(UserRole.team_id == team_id)
            .distinct()
            .order_by(User.last_name, User.first_name)
        )
        res = await self.session.execute(q)
        return res.scalars().all()

    async def name_exists(self, name: str, department_id: int, exclude_id: int | None = None) -> bool:
        q = select(func.count(Team.id)).where(
            Team.department_id == department_id,
            func.lower(Team.name) == name.strip().lower(),
        )
        if exclude_id is not None:
            q = q.where(Team.id != exclude_id)
        return (await self.session.execute(q)).scalar_one() > 0
