from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, ForeignKey, TIMESTAMP
from ticketing.core.base import Base, TimestampedMixin, utcnow

class User(Base, TimestampedMixin):
    email: Mapped[str] = mapped_column(String(320), unique=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    is_active: Mapped[bool] = mapped_column(default=True)
    last_login: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    user_roles: Mapped[list["UserRole"]] = relationship(back_populates="user", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

class Role(Base, TimestampedMixin):
    name: Mapped[str] = mapped_column(String(50), unique=True)  # Admin, Agent, User
    description: Mapped[str | None] = mapped_column(String(200), nullable=True)

class UserRole(Base, TimestampedMixin):
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id"))
    role_id: Mapped[int] = mapped_column(ForeignKey("role.id"))
    department_id: Mapped[int | None] = mapped_column(ForeignKey("department.id"), nullable=True)
    team_id: Mapped[int | None] = mapped_column(ForeignKey("team.id"), nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=utcnow)

    user: Mapped["User"] = relationship(back_populates="user_roles")
    role: Mapped["Role"] = relationship()
    department: Mapped["Department"] = relationship()
    team: Mapped["Team"] = relationship()
