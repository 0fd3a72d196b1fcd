from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text
from ticketing.core.base import Base, TimestampedMixin

class TicketPriority(Base, TimestampedMixin):
    name: Mapped[str] = mapped_column(String(50), unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    level: Mapped[int | None] = mapped_column(nullable=True)  # sort key, lower = more urgent
    color: Mapped[str | None] = mapped_column(String(16), nullable=True)  # presentation only
