# artify/db/models/document.py
import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from artify.db.base import Base, utcnow


class DocumentType(str, enum.Enum):
    SOURCE = "SOURCE"  # supplied by the customer
    EDITED = "EDITED"  # supplied by the editor


class Document(Base):
    """Metadata for an object already stored in S3. The bytes never touch this table."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)

    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False)

    # exactly one of these is set, matching `type`
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True)
    editor_id = Column(Integer, ForeignKey("editors.id"), nullable=True)

    key = Column(String, nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    extension = Column(String, nullable=True)
    bucket = Column(String, nullable=False)
    region = Column(String, nullable=False)
    image_url = Column(String, nullable=False)

    type = Column(Enum(DocumentType, native_enum=False, length=10), nullable=False)

    created_at = Column(DateTime, default=utcnow)

    project = relationship("Project", back_populates="documents")

    @property
    def uploader_id(self) -> int:
        return self.customer_id if self.type == DocumentType.SOURCE else self.editor_id
