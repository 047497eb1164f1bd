# artify/db/models/category.py
from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from artify.db.base import Base, utcnow


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    posts = relationship("Post", back_populates="category")
