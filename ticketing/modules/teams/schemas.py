from datetime import datetime
from pydantic import BaseModel, Field
from ticketing.modules.departments.schemas import MemberSummary

class TeamCreate(BaseModel):
    department_id: int
    name: str = Field(..., max_length=100)
    description: str | None = None

class TeamUpdate(BaseModel):
    name: str = Field(..., max_length=100)
    description: str | None = None
    is_active: bool = True

class TeamOut(BaseModel):
    id: int
    department_id: int
    department_name: str
    name: str
    description: str | None
    is_active: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, team) -> "TeamOut":
        return cls(
            id=team.id,
            department_id=team.department_id,
            department_name=team.department.name,
            name=team.name,
            description=team.description,
            is_active=team.is_active,
            created_at=team.created_at,
        )

class TeamDetails(TeamOut):
    users: list[MemberSummary]
    active_tickets_count: int
