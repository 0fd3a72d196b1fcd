from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, ForeignKey
from ticketing.core.base import Base, TimestampedMixin

class Team(Base, TimestampedMixin):
    # name is unique per department, enforced by TeamService
    department_id: Mapped[int] = mapped_column(ForeignKey("department.id"))
    name: Mapped[str] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True)

    department: Mapped["Department"] = relationship(back_populates="teams")
