from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text
from ticketing.core.base import Base, TimestampedMixin

class TicketCategory(Base, TimestampedMixin):
    name: Mapped[str] = mapped_column(String(100), unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True)
