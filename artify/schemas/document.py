# artify/schemas/document.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from artify.db.models.document import DocumentType


class UploadReserveRequest(BaseModel):
    filename: str
    extension: Optional[str] = None


class UploadReservation(BaseModel):
    key: str
    upload_url: str
    bucket: str
    region: str


class DocumentCreate(BaseModel):
    post_id: int
    key: str
    bucket: str
    region: str
    name: str
    extension: Optional[str] = None
    description: Optional[str] = None


class DocumentResponse(BaseModel):
    id: int
    project_id: int
    post_id: int
    key: str
    name: str
    description: Optional[str]
    extension: Optional[str]
    bucket: str
    region: str
    image_url: str
    type: DocumentType
    uploader_id: int
    created_at: datetime

    class Config:
        from_attributes = True
