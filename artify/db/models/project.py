# artify/db/models/project.py
import enum

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, Float, ForeignKey, Integer
from sqlalchemy.orm import relationship

from artify.db.base import Base, utcnow


class ProjectStatus(str, enum.Enum):
    in_progress = "in_progress"
    payment_pending = "payment_pending"
    completed = "completed"


class PaymentMethod(str, enum.Enum):
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    WALLET = "WALLET"


CARD_METHODS = (PaymentMethod.CREDIT_CARD, PaymentMethod.DEBIT_CARD)


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)

    # one project per post
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, unique=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    editor_id = Column(Integer, ForeignKey("editors.id"), nullable=False, index=True)

    status = Column(
        Enum(ProjectStatus, native_enum=False, length=20),
        nullable=False,
        default=ProjectStatus.in_progress,
    )

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    post = relationship("Post", back_populates="project")
    customer = relationship("Customer", foreign_keys=[customer_id])
    editor = relationship("Editor", foreign_keys=[editor_id])
    payment = relationship("Payment", back_populates="project", uselist=False)
    documents = relationship("Document", back_populates="project", order_by="Document.created_at.desc()")
    feedback = relationship("Feedback", back_populates="project")


class Payment(Base):
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # one payment per project; the unique index is what serializes
    # two concurrent captures
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, unique=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    editor_id = Column(Integer, ForeignKey("editors.id"), nullable=False)

    amount = Column(Float, nullable=False)
    payment_method = Column(Enum(PaymentMethod, native_enum=False, length=20), nullable=False)

    created_at = Column(DateTime, default=utcnow)

    project = relationship("Project", back_populates="payment")
