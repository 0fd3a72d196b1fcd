import logging
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.base import utcnow
from ticketing.core.errors import AuthenticationError, NotFoundError, ValidationError
from ticketing.core.security import create_access_token, hash_password, verify_password
from ticketing.modules.auth.schemas import LoginRequest, LoginResponse, ChangePasswordRequest
from ticketing.modules.users.repository import UserRepository
from ticketing.modules.users.schemas import UserOut

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)

    async def login(self, payload: LoginRequest) -> LoginResponse:
        if not payload.email or not payload.email.strip():
            raise ValidationError("Email is required")
        if not payload.password:
            raise ValidationError("Password is required")

        user = await self.users.get_by_email(payload.email)
        # same message for unknown, disabled and wrong password
        if not user or not user.is_active or not verify_password(payload.password, user.password_hash):
            logger.warning("Failed login attempt")
            raise AuthenticationError("Invalid credentials")

        user.last_login = utcnow()
        await self.session.commit()
        token, expires_at = create_access_token(user)
        logger.info("User %s logged in", user.id)
        return LoginResponse(access_token=token, expires_at=expires_at, user=UserOut.from_entity(user))

    async def change_password(self, user_id: int, payload: ChangePasswordRequest) -> bool:
        if not payload.current_password:
            raise ValidationError("Current password is required")
        if not payload.new_password:
            raise ValidationError("New password is required")
        if payload.current_password == payload.new_password:
            raise ValidationError("New password must be different from current password")

        user = await self.users.get(user_id)
        if not user or not user.is_active:
            logger.warning("Password change for missing or inactive user %s", user_id)
            raise NotFoundError("User not found")
        if not verify_password(payload.current_password, user.password_hash):
            logger.warning("Password change with wrong current password for user %s", user_id)
            raise ValidationError("Current password is incorrect")

        user.password_hash = hash_password(payload.new_password)
        await self.session.commit()
        logger.info("Password changed for user %s", user_id)
        return True
