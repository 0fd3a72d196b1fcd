from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, ForeignKey, Integer, TIMESTAMP
from ticketing.core.base import Base, TimestampedMixin, utcnow

# ---- Tickets ----

class Ticket(Base, TimestampedMixin):
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text)

    # Reference data
    category_id: Mapped[int] = mapped_column(ForeignKey("ticketcategory.id"))
    priority_id: Mapped[int] = mapped_column(ForeignKey("ticketpriority.id"))
    status_id: Mapped[int] = mapped_column(ForeignKey("ticketstatus.id"))

    # Routing
    department_id: Mapped[int] = mapped_column(ForeignKey("department.id"))
    team_id: Mapped[int | None] = mapped_column(ForeignKey("team.id"), nullable=True)
    assigned_to_id: Mapped[int | None] = mapped_column(ForeignKey("user.id"), nullable=True)
    created_by_id: Mapped[int] = mapped_column(ForeignKey("user.id"))

    # set iff the current status is terminal
    closed_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    category: Mapped["TicketCategory"] = relationship()
    priority: Mapped["TicketPriority"] = relationship()
    status: Mapped["TicketStatus"] = relationship()
    department: Mapped["Department"] = relationship()
    team: Mapped["Team"] = relationship()
    assigned_to: Mapped["User"] = relationship(foreign_keys=[assigned_to_id])
    created_by: Mapped["User"] = relationship(foreign_keys=[created_by_id])

    comments: Mapped[list["TicketComment"]] = relationship(back_populates="ticket", cascade="all, delete-orphan")
    attachments: Mapped[list["TicketAttachment"]] = relationship(back_populates="ticket", cascade="all, delete-orphan")
    feedback: Mapped["TicketFeedback"] = relationship(back_populates="ticket", cascade="all, delete-orphan", uselist=False)

# ---- Comments, attachments, feedback ----

class TicketComment(Base, TimestampedMixin):
    ticket_id: Mapped[int] = mapped_column(ForeignKey("ticket.id"))
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id"))
    comment: Mapped[str] = mapped_column(Text)
    is_internal: Mapped[bool] = mapped_column(default=False)  # agents/admins only

    ticket: Mapped["Ticket"] = relationship(back_populates="comments")
    user: Mapped["User"] = relationship()

class TicketAttachment(Base, TimestampedMixin):
    # metadata only; bytes live in external storage under file_path
    ticket_id: Mapped[int] = mapped_column(ForeignKey("ticket.id"))
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id"))
    file_name: Mapped[str] = mapped_column(String(255))
    file_path: Mapped[str] = mapped_column(String(512))
    uploaded_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=utcnow)

    ticket: Mapped["Ticket"] = relationship(back_populates="attachments")
    user: Mapped["User"] = relationship()

class TicketFeedback(Base, TimestampedMixin):
    ticket_id: Mapped[int] = mapped_column(ForeignKey("ticket.id"), unique=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id"))
    rating: Mapped[int] = mapped_column(Integer)  # 1..5
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    ticket: Mapped["Ticket"] = relationship(back_populates="feedback")
    user: Mapped["User"] = relationship()
