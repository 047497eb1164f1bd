# artify/schemas/category.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class CategoryCreate(BaseModel):
    name: str
    description: str


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CategoryMiniResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
