from datetime import datetime
from pydantic import BaseModel, Field

class TicketCategoryCreate(BaseModel):
    name: str = Field(..., max_length=100)
    description: str | None = None

class TicketCategoryUpdate(BaseModel):
    name: str = Field(..., max_length=100)
    description: str | None = None
    is_active: bool = True

class TicketCategoryOut(BaseModel):
    id: int
    name: str
    description: str | None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
