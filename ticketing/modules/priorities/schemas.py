from pydantic import BaseModel, Field

class TicketPriorityCreate(BaseModel):
    name: str = Field(..., max_length=50)
    description: str | None = None
    level: int | None = None
    color: str | None = Field(default=None, max_length=16)

class TicketPriorityUpdate(TicketPriorityCreate):
    pass

class TicketPriorityOut(BaseModel):
    id: int
    name: str
    description: str | None
    level: int | None
    color: str | None

    class Config:
        from_attributes = True
