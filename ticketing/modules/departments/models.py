from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text
from ticketing.core.base import Base, TimestampedMixin

class Department(Base, TimestampedMixin):
    name: Mapped[str] = mapped_column(String(100), unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True)

    teams: Mapped[list["Team"]] = relationship(back_populates="department", order_by="Team.name")
