# artify/db/models/post.py
import enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from artify.db.base import Base, utcnow


class PostStatus(str, enum.Enum):
    open = "open"
    in_progress = "in_progress"
    completed = "completed"
    closed = "closed"


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("budget > 0", name="ck_posts_budget_positive"),
        CheckConstraint("duration > 0", name="ck_posts_duration_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)

    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    budget = Column(Float, nullable=False)
    duration = Column(Integer, nullable=False)  # days
    deadline = Column(DateTime, nullable=False)

    status = Column(Enum(PostStatus, native_enum=False, length=20), nullable=False, default=PostStatus.open)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    customer = relationship("Customer", foreign_keys=[customer_id])
    category = relationship("Category", back_populates="posts")
    bids = relationship("Bid", back_populates="post", order_by="Bid.price")
    project = relationship("Project", back_populates="post", uselist=False)


class Bid(Base):
    __tablename__ = "bids"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_bids_price_positive"),
        CheckConstraint("NOT (approved AND declined)", name="ck_bids_decision_exclusive"),
        UniqueConstraint("post_id", "editor_id", name="uq_bids_post_editor"),
    )

    id = Column(Integer, primary_key=True, index=True)

    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    editor_id = Column(Integer, ForeignKey("editors.id"), nullable=False, index=True)

    price = Column(Float, nullable=False)
    comment = Column(String, nullable=True)

    approved = Column(Boolean, nullable=False, default=False)
    declined = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=utcnow)

    post = relationship("Post", back_populates="bids")
    editor = relationship("Editor", foreign_keys=[editor_id])


# at most one approved bid per post, enforced by the database
Index(
    "uq_bids_one_approved_per_post",
    Bid.post_id,
    unique=True,
    postgresql_where=Bid.approved.is_(True),
    sqlite_where=Bid.approved.is_(True),
)
