from typing import Sequence
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.modules.users.models import User, Role, UserRole

def _with_roles(q):
    return q.options(
        selectinload(User.user_roles).selectinload(UserRole.role),
        selectinload(User.user_roles).selectinload(UserRole.department),
        selectinload(User.user_roles).selectinload(UserRole.team),
    ).execution_options(populate_existing=True)

class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> User:
        obj = User(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, user_id: int) -> User | None:
        return await self.session.get(User, user_id)

    async def get_with_roles(self, user_id: int) -> User | None:
        res = await self.session.execute(_with_roles(select(User).where(User.id == user_id)))
        return res.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        q = _with_roles(select(User).where(func.lower(User.email) == email.strip().lower()))
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list_active(self) -> Sequence[User]:
        q = _with_roles(select(User).where(User.is_active.is_(True)).order_by(User.last_name, User.first_name))
        res = await self.session.execute(q)
        return res.scalars().all()

    async def list_for_department(self, department_id: int) -> Sequence[User]:
        q = _with_roles(
            select(User)
            .join(UserRole, UserRole.user_id == User.id)
            .where(UserRole.department_id == department_id, User.is_active.is_(True))
            .distinct()
            .order_by(User.last_name, User.first_name)
        )
        res = await self.session.execute(q)
        return res.scalars().all()

    async def list_for_team(self, team_id: int) -> Sequence[User]:
        q = _with_roles(
            select(User)
            .join(UserRole, UserRole.user_id == User.id)
            .where(UserRole.team_id == team_id, User.is_active.is_(True))
            .distinct()
            .order_by(User.last_name, User.first_name)
        )
        res = await self.session.execute(q)
        return res.scalars().all()

    async def email_exists(self, email: str, exclude_id: int | None = None) -> bool:
        q = select(func.count(User.id)).where(func.lower(User.email) == email.strip().lower())
        if exclude_id is not None:
            q = q.where(User.id != exclude_id)
        return (await self.session.execute(q)).scalar_one() > 0

class RoleRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, role_id: int) -> Role | None:
        return await self.session.get(Role, role_id)

    async def get_by_name(self, name: str) -> Role | None:
        res = await self.session.execute(select(Role).where(func.lower(Role.name) == name.lower()))
        return res.scalar_one_or_none()

    async def list(self) -> Sequence[Role]:
        res = await self.session.execute(select(Role).order_by(Role.id))
        return res.scalars().all()

    async def create(self, **data) -> Role:
        obj = Role(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj
