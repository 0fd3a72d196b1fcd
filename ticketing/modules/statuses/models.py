from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text
from ticketing.core.base import Base, TimestampedMixin
from ticketing.modules.statuses.workflow import is_terminal

class TicketStatus(Base, TimestampedMixin):
    name: Mapped[str] = mapped_column(String(50), unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str | None] = mapped_column(String(16), nullable=True)  # presentation only

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self.name)
