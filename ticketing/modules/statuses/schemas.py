from pydantic import BaseModel, Field

class TicketStatusCreate(BaseModel):
    name: str = Field(..., max_length=50)
    description: str | None = None
    color: str | None = Field(default=None, max_length=16)

class TicketStatusUpdate(TicketStatusCreate):
    pass

class TicketStatusOut(BaseModel):
    id: int
    name: str
    description: str | None
    color: str | None
    is_terminal: bool

    class Config:
        from_attributes = True
