# artify/schemas/feedback.py
from datetime import datetime

from pydantic import BaseModel, Field, conint


class FeedbackCreate(BaseModel):
    rating: conint(ge=1, le=5) = Field(..., description="Rating 1-5")
    comment: str


class FeedbackResponse(BaseModel):
    id: int
    project_id: int
    customer_id: int
    rating: int
    comment: str
    created_at: datetime

    class Config:
        from_attributes = True
