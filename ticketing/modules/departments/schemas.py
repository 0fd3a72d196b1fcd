from datetime import datetime
from pydantic import BaseModel, Field

class DepartmentCreate(BaseModel):
    name: str = Field(..., max_length=100)
    description: str | None = None

class DepartmentUpdate(BaseModel):
    name: str = Field(..., max_length=100)
    description: str | None = None
    is_active: bool = True

class DepartmentOut(BaseModel):
    id: int
    name: str
    description: str | None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True

class TeamSummary(BaseModel):
    id: int
    name: str
    description: str | None
    is_active: bool

    class Config:
        from_attributes = True

class MemberSummary(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    is_active: bool

    class Config:
        from_attributes = True

class DepartmentDetails(DepartmentOut):
    teams: list[TeamSummary]
    users: list[MemberSummary]
    active_tickets_count: int
