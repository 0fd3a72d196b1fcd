from datetime import datetime
from pydantic import BaseModel, Field

class FAQCategoryCreate(BaseModel):
    name: str = Field(..., max_length=100)
    description: str | None = None

class FAQCategoryUpdate(FAQCategoryCreate):
    is_active: bool = True

class FAQItemCreate(BaseModel):
    category_id: int
    question: str = Field(..., max_length=500)
    answer: str

class FAQItemUpdate(BaseModel):
    question: str = Field(..., max_length=500)
    answer: str
    is_active: bool = True

class FAQItemOut(BaseModel):
    id: int
    category_id: int
    question: str
    answer: str
    created_by_id: int
    created_by_name: str
    created_at: datetime
    updated_at: datetime
    is_active: bool

    @classmethod
    def from_entity(cls, item) -> "FAQItemOut":
        return cls(
            id=item.id,
            category_id=item.category_id,
            question=item.question,
            answer=item.answer,
            created_by_id=item.created_by_id,
            created_by_name=item.created_by.full_name,
            created_at=item.created_at,
            updated_at=item.updated_at,
            is_active=item.is_active,
        )

class FAQCategoryOut(BaseModel):
    id: int
    name: str
    description: str | None
    is_active: bool

    class Config:
        from_attributes = True

class FAQCategoryWithItems(FAQCategoryOut):
    items: list[FAQItemOut]
