# artify/schemas/project.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from artify.db.models.project import PaymentMethod, ProjectStatus


class PaymentCreate(BaseModel):
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD

    # required for card methods; structural checks only
    card_holder_name: Optional[str] = None
    card_number: Optional[str] = None
    card_expiry: Optional[str] = Field(default=None, description="MM/YY")
    card_cvv: Optional[str] = None


class PaymentResponse(BaseModel):
    id: int
    project_id: int
    customer_id: int
    editor_id: int
    amount: float
    payment_method: PaymentMethod
    created_at: datetime

    class Config:
        from_attributes = True


class ProjectResponse(BaseModel):
    id: int
    post_id: int
    customer_id: int
    editor_id: int
    status: ProjectStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProjectDetailResponse(ProjectResponse):
    title: str
    agreed_price: Optional[float] = None
    payment: Optional[PaymentResponse] = None
    has_feedback: bool = False
