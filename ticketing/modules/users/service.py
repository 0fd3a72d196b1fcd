import logging
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.errors import NotFoundError, ValidationError
from ticketing.core.security import hash_password
from ticketing.modules.users.repository import UserRepository, RoleRepository
from ticketing.modules.users.models import User, UserRole
from ticketing.modules.users.schemas import UserCreate, UserUpdate, UserRoleIn, UserOut
from ticketing.modules.departments.repository import DepartmentRepository
from ticketing.modules.teams.repository import TeamRepository

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = UserRepository(session)
        self.roles = RoleRepository(session)
        self.departments = DepartmentRepository(session)
        self.teams = TeamRepository(session)

    async def _get_active(self, user_id: int) -> User:
        user = await self.repo.get_with_roles(user_id)
        if not user or not user.is_active:
            logger.warning("User not found or inactive: %s", user_id)
            raise NotFoundError("User not found")
        return user

    async def _build_roles(self, roles_in: list[UserRoleIn]) -> list[UserRole]:
        built = []
        for r in roles_in:
            if not await self.roles.get(r.role_id):
                raise ValidationError(f"Invalid role ID: {r.role_id}")
            if r.department_id is not None:
                department = await self.departments.get(r.department_id)
                if not department or not department.is_active:
                    raise ValidationError(f"Invalid department ID: {r.department_id}")
            if r.team_id is not None:
                team = await self.teams.get(r.team_id)
                if not team or not team.is_active:
                    raise ValidationError(f"Invalid team ID: {r.team_id}")
                if r.department_id is not None and team.department_id != r.department_id:
                    raise ValidationError("Team does not belong to the specified department")
            built.append(UserRole(role_id=r.role_id, department_id=r.department_id, team_id=r.team_id))
        return built

    async def get_by_id(self, user_id: int) -> UserOut:
        return UserOut.from_entity(await self._get_active(user_id))

    async def get_by_email(self, email: str) -> UserOut:
        if not email or not email.strip():
            raise ValidationError("Email is required")
        user = await self.repo.get_by_email(email)
        if not user or not user.is_active:
            logger.warning("User not found or inactive for email lookup")
            raise NotFoundError("User not found")
        return UserOut.from_entity(user)

    async def get_all_active(self) -> list[UserOut]:
        return [UserOut.from_entity(u) for u in await self.repo.list_active()]

    async def get_by_department(self, department_id: int) -> list[UserOut]:
        return [UserOut.from_entity(u) for u in await self.repo.list_for_department(department_id)]

    async def get_by_team(self, team_id: int) -> list[UserOut]:
        return [UserOut.from_entity(u) for u in await self.repo.list_for_team(team_id)]

    async def create(self, payload: UserCreate) -> UserOut:
        email = str(payload.email).strip().lower()
        if not payload.password:
            raise ValidationError("Password is required")
        if await self.repo.email_exists(email):
            logger.warning("Email already exists: %s", email)
            raise ValidationError("Email already exists")
        user_roles = await self._build_roles(payload.user_roles)
        user = await self.repo.create(
            email=email,
            password_hash=hash_password(payload.password),
            first_name=payload.first_name.strip(),
            last_name=payload.last_name.strip(),
            is_active=True,
            user_roles=user_roles,
        )
        await self.session.commit()
        logger.info("Created user %s with %s roles", user.id, len(user_roles))
        return await self.get_by_id(user.id)

    async def update(self, user_id: int, payload: UserUpdate) -> UserOut:
        user = await self._get_active(user_id)
        user_roles = await self._build_roles(payload.user_roles)
        if user.is_active != payload.is_active:
            logger.info("User %s active flag %s -> %s", user_id, user.is_active, payload.is_active)
        user.first_name = payload.first_name.strip()
        user.last_name = payload.last_name.strip()
        user.is_active = payload.is_active
        user.user_roles = user_roles  # replaces; old rows are orphan-deleted
        await self.session.commit()
        logger.info("Updated user %s", user_id)
        refreshed = await self.repo.get_with_roles(user_id)
        return UserOut.from_entity(refreshed)

    async def deactivate(self, user_id: int) -> bool:
        user = await self.repo.get(user_id)
        if not user:
            raise NotFoundError("User not found")
        if not user.is_active:
            return False
        user.is_active = False
        await self.session.commit()
        logger.info("Deactivated user %s", user_id)
        return True
