# artify/schemas/post.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from artify.db.models.post import PostStatus
from artify.schemas.category import CategoryMiniResponse
from artify.services.posts import BidDecision


# --- CREATE ---
class PostCreate(BaseModel):
    category_id: int
    title: str
    description: str
    budget: float = Field(..., gt=0, allow_inf_nan=False)
    duration: int = Field(..., gt=0)
    # defaults to now + duration days
    deadline: Optional[datetime] = None


class BidCreate(BaseModel):
    price: float = Field(..., gt=0, allow_inf_nan=False)
    comment: Optional[str] = None


class BidDecisionRequest(BaseModel):
    decision: BidDecision


# --- RESPONSE ---
class BidResponse(BaseModel):
    id: int
    post_id: int
    editor_id: int
    price: float
    comment: Optional[str]
    approved: bool
    declined: bool
    created_at: datetime

    class Config:
        from_attributes = True


class PostResponse(BaseModel):
    id: int
    customer_id: int
    category: CategoryMiniResponse
    title: str
    description: str
    budget: float
    duration: int
    deadline: datetime
    status: PostStatus
    created_at: datetime

    class Config:
        from_attributes = True


class PostDetailResponse(PostResponse):
    bids: List[BidResponse] = []
    project_id: Optional[int] = None


class BidDecisionResponse(BaseModel):
    bid: BidResponse
    project_id: Optional[int] = None
