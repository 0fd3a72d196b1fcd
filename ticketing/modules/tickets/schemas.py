from datetime import datetime
from pydantic import BaseModel, Field

# ---- Tickets ----

class TicketCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    category_id: int
    priority_id: int
    department_id: int
    team_id: int | None = None
    assigned_to_id: int | None = None

class TicketUpdate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    category_id: int
    priority_id: int
    status_id: int
    team_id: int | None = None
    assigned_to_id: int | None = None

class TicketOut(BaseModel):
    id: int
    title: str
    description: str
    category_id: int
    category_name: str
    priority_id: int
    priority_name: str
    priority_color: str | None
    status_id: int
    status_name: str
    status_color: str | None
    department_id: int
    department_name: str
    team_id: int | None
    team_name: str | None
    assigned_to_id: int | None
    assigned_to_name: str | None
    created_by_id: int
    created_by_name: str
    created_at: datetime
    updated_at: datetime
    closed_at: datetime | None

    @classmethod
    def from_entity(cls, t) -> "TicketOut":
        return cls(
            id=t.id,
            title=t.title,
            description=t.description,
            category_id=t.category_id,
            category_name=t.category.name,
            priority_id=t.priority_id,
            priority_name=t.priority.name,
            priority_color=t.priority.color,
            status_id=t.status_id,
            status_name=t.status.name,
            status_color=t.status.color,
            department_id=t.department_id,
            department_name=t.department.name,
            team_id=t.team_id,
            team_name=t.team.name if t.team else None,
            assigned_to_id=t.assigned_to_id,
            assigned_to_name=t.assigned_to.full_name if t.assigned_to else None,
            created_by_id=t.created_by_id,
            created_by_name=t.created_by.full_name,
            created_at=t.created_at,
            updated_at=t.updated_at,
            closed_at=t.closed_at,
        )

class AssignRequest(BaseModel):
    assigned_to_id: int

class StatusChangeRequest(BaseModel):
    status_id: int

class PriorityChangeRequest(BaseModel):
    priority_id: int

# ---- Comments ----

class TicketCommentCreate(BaseModel):
    comment: str = Field(..., min_length=1)
    is_internal: bool = False

class TicketCommentOut(BaseModel):
    id: int
    ticket_id: int
    user_id: int
    user_name: str
    comment: str
    is_internal: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, c) -> "TicketCommentOut":
        return cls(
            id=c.id, ticket_id=c.ticket_id, user_id=c.user_id, user_name=c.user.full_name,
            comment=c.comment, is_internal=c.is_internal, created_at=c.created_at,
        )

# ---- Attachments ----

class TicketAttachmentCreate(BaseModel):
    file_name: str = Field(..., min_length=1, max_length=255)
    file_path: str = Field(..., min_length=1, max_length=512)

class TicketAttachmentOut(BaseModel):
    id: int
    ticket_id: int
    user_id: int
    user_name: str
    file_name: str
    file_path: str
    uploaded_at: datetime

    @classmethod
    def from_entity(cls, a) -> "TicketAttachmentOut":
        return cls(
            id=a.id, ticket_id=a.ticket_id, user_id=a.user_id, user_name=a.user.full_name,
            file_name=a.file_name, file_path=a.file_path, uploaded_at=a.uploaded_at,
        )

# ---- Feedback ----

class TicketFeedbackCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = None

class TicketFeedbackOut(BaseModel):
    id: int
    ticket_id: int
    user_id: int
    rating: int
    comment: str | None
    created_at: datetime

    class Config:
        from_attributes = True

class TicketCount(BaseModel):
    count: int
