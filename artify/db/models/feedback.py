# artify/db/models/feedback.py
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from artify.db.base import Base, utcnow


class Feedback(Base):
    __tablename__ = "feedback"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_feedback_rating_range"),
        UniqueConstraint("customer_id", "project_id", name="uq_feedback_customer_project"),
    )

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False)

    rating = Column(Integer, nullable=False)   # 1..5
    comment = Column(String, nullable=False)

    created_at = Column(DateTime, default=utcnow)

    project = relationship("Project", back_populates="feedback")
    customer = relationship("Customer", foreign_keys=[customer_id])
