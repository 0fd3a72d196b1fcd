from typing import Sequence
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.modules.departments.models import Department
from ticketing.modules.users.models import User, UserRole

class DepartmentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> Department:
        obj = Department(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, department_id: int) -> Department | None:
        return await self.session.get(Department, department_id)

    async def get_with_teams(self, department_id: int) -> Department | None:
        q = (
            select(Department)
            .where(Department.id == department_id)
            .options(selectinload(Department.teams))
            .execution_options(populate_existing=True)
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list_active(self) -> Sequence[Department]:
        q = select(Department).where(Department.is_active.is_(True)).order_by(Department.name)
        res = await self.session.execute(q)
        return res.scalars().all()

    async def list_for_user(self, user_id: int) -> Sequence[Department]:
        q = (
            select(Department)
            .join(UserRole, UserRole.department_id == Department.id)
            .where(UserRole.user_id == user_id, Department.is_active.is_(True))
            .distinct()
            .order_by(Department.name)
        )
        res = await self.session.execute(q)
        return res.scalars().all()

    async def members(self, department_id: int) -> Sequence[User]:
        q = (
            select(User)
            .join(UserRole, UserRole.user_id == User.id)
            .where(UserRole.department_id == department_id)
            .distinct()
            .order_by(User.last_name, User.first_name)
        )
        res = await self.session.execute(q)
        return res.scalars().all()

    async def name_exists(self, name: str, exclude_id: int | None = None) -> bool:
        q = select(func.count(Department.id)).where(func.lower(Department.name) == name.strip().lower())
        if exclude_id is not None:
            q = q.where(Department.id != exclude_id)
        return (await self.session.execute(q)).scalar_one() > 0
