from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

class UserRoleIn(BaseModel):
    role_id: int
    department_id: int | None = None
    team_id: int | None = None

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)
    user_roles: list[UserRoleIn] = []

class UserUpdate(BaseModel):
    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)
    is_active: bool = True
    user_roles: list[UserRoleIn] = []

class UserRoleOut(BaseModel):
    role_id: int
    role_name: str
    department_id: int | None
    department_name: str | None
    team_id: int | None
    team_name: str | None
    assigned_at: datetime

class UserOut(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    is_active: bool
    created_at: datetime
    last_login: datetime | None
    user_roles: list[UserRoleOut]

    @classmethod
    def from_entity(cls, user) -> "UserOut":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            is_active=user.is_active,
            created_at=user.created_at,
            last_login=user.last_login,
            user_roles=[
                UserRoleOut(
                    role_id=ur.role_id,
                    role_name=ur.role.name,
                    department_id=ur.department_id,
                    department_name=ur.department.name if ur.department else None,
                    team_id=ur.team_id,
                    team_name=ur.team.name if ur.team else None,
                    assigned_at=ur.assigned_at,
                )
                for ur in user.user_roles
            ],
        )
