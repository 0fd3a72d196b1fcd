from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, ForeignKey
from ticketing.core.base import Base, TimestampedMixin

class FAQCategory(Base, TimestampedMixin):
    name: Mapped[str] = mapped_column(String(100), unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True)

    items: Mapped[list["FAQItem"]] = relationship(back_populates="category", order_by="FAQItem.id")

class FAQItem(Base, TimestampedMixin):
    category_id: Mapped[int] = mapped_column(ForeignKey("faqcategory.id"))
    question: Mapped[str] = mapped_column(String(500))
    answer: Mapped[str] = mapped_column(Text)
    created_by_id: Mapped[int] = mapped_column(ForeignKey("user.id"))
    is_active: Mapped[bool] = mapped_column(default=True)

    category: Mapped["FAQCategory"] = relationship(back_populates="items")
    created_by: Mapped["User"] = relationship()
