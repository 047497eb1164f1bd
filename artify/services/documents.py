# artify/services/documents.py
"""
Two-phase document upload.

1. `reserve_upload` hands the caller a fresh key and a presigned PUT url.
2. The client PUTs the bytes straight to S3.
3. `attach_document` checks the object really landed (HEAD) and only then
   records the metadata row.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from artify.core.errors import AuthorizationError, InvalidStateError, ValidationError
from artify.core.logger import kv
from artify.core.security import Principal
from artify.core.storage import ObjectStorage, public_url, unique_key
from artify.db.models.document import Document, DocumentType
from artify.services.guards import is_blank, raise_for
from artify.services.projects import load_project, ensure_participant

logger = logging.getLogger(__name__)


def _document_type(principal: Principal) -> DocumentType:
    if principal.is_customer:
        return DocumentType.SOURCE
    if principal.is_editor:
        return DocumentType.EDITED
    raise AuthorizationError()


def reserve_upload(
    db: Session,
    storage: ObjectStorage,
    principal: Principal,
    project_id: int,
    filename: str,
    extension: Optional[str] = None,
) -> Dict[str, str]:
    project = load_project(db, project_id)
    ensure_participant(project, principal, allow_admin=False)
    if is_blank(filename):
        raise ValidationError({"filename": "File name is required"})

    key = unique_key(filename, extension)
    url = storage.issue_upload_url(key)

    logger.info(kv("document.upload_reserved", project_id=project.id, key=key))
    return {
        "key": key,
        "upload_url": url,
        "bucket": storage.bucket,
        "region": storage.region,
    }


def attach_document(
    db: Session,
    storage: ObjectStorage,
    principal: Principal,
    project_id: int,
    post_id: int,
    key: str,
    bucket: str,
    region: str,
    name: str,
    extension: Optional[str] = None,
    description: Optional[str] = None,
) -> Document:
    doc_type = _document_type(principal)
    project = load_project(db, project_id)
    ensure_participant(project, principal, allow_admin=False)

    errors = {}
    for field, value in (("key", key), ("bucket", bucket), ("region", region), ("name", name)):
        if is_blank(value):
            errors[field] = f"{field.capitalize()} is required"
    if post_id != project.post_id:
        errors["post_id"] = "Post does not match this project"
    # only objects in our own bucket can be attached
    if "bucket" not in errors and bucket != storage.bucket:
        errors["bucket"] = "Unknown bucket"
    if "region" not in errors and region != storage.region:
        errors["region"] = "Unknown region"
    raise_for(errors)

    if not storage.object_exists(key, bucket):
        logger.warning(kv("document.object_missing", project_id=project.id, key=key, bucket=bucket))
        raise InvalidStateError("Upload not found in storage")

    document = Document(
        project_id=project.id,
        post_id=project.post_id,
        customer_id=principal.id if doc_type == DocumentType.SOURCE else None,
        editor_id=principal.id if doc_type == DocumentType.EDITED else None,
        key=key,
        name=name.strip(),
        description=description,
        extension=extension,
        bucket=bucket,
        region=region,
        image_url=public_url(key, bucket, region),
        type=doc_type,
    )
    db.add(document)
    db.commit()
    db.refresh(document)

    logger.info(kv("document.attached", document_id=document.id, project_id=project.id, type=doc_type.value))
    return document


def list_documents(
    db: Session,
    principal: Principal,
    project_id: int,
    doc_type: Optional[DocumentType] = None,
) -> List[Document]:
    project = load_project(db, project_id)
    ensure_participant(project, principal)

    q = db.query(Document).filter(Document.project_id == project.id)
    if doc_type:
        q = q.filter(Document.type == doc_type)
    return q.order_by(Document.created_at.desc(), Document.id.desc()).all()
