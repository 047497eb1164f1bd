# artify/api/routes/projects.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from artify.core.security import Principal, get_current_user, require_customer, require_editor
from artify.core.storage import ObjectStorage, get_storage
from artify.db.base import get_db
from artify.db.models.document import DocumentType
from artify.db.models.project import ProjectStatus
from artify.schemas.document import DocumentCreate, DocumentResponse, UploadReservation, UploadReserveRequest
from artify.schemas.feedback import FeedbackCreate, FeedbackResponse
from artify.schemas.project import PaymentCreate, PaymentResponse, ProjectDetailResponse, ProjectResponse
from artify.services import documents, feedback, posts, projects
from artify.services.projects import CardDetails

router = APIRouter(prefix="/projects", tags=["projects"])


def _detail(db: Session, project) -> ProjectDetailResponse:
    bid = posts.approved_bid(db, project.post_id)
    return ProjectDetailResponse(
        **ProjectResponse.model_validate(project).model_dump(),
        title=project.post.title,
        agreed_price=bid.price if bid else None,
        payment=PaymentResponse.model_validate(project.payment) if project.payment else None,
        has_feedback=any(f.customer_id == project.customer_id for f in project.feedback),
    )


# Projects of the current customer / editor (admins see all)

@router.get("", response_model=List[ProjectResponse])
def list_projects(
    status: Optional[ProjectStatus] = Query(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_user),
):
    return projects.list_projects(db, principal, status)


@router.get("/{project_id}", response_model=ProjectDetailResponse)
def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_user),
):
    project = projects.get_project(db, principal, project_id)
    return _detail(db, project)


# Editor marks the work done

@router.post("/{project_id}/complete", response_model=ProjectResponse)
def complete_project(
    project_id: int,
    db: Session = Depends(get_db),
    editor: Principal = Depends(require_editor),
):
    return projects.mark_complete(db, editor, project_id)


# Customer pays

@router.post("/{project_id}/payment", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def capture_payment(
    project_id: int,
    payload: PaymentCreate,
    db: Session = Depends(get_db),
    customer: Principal = Depends(require_customer),
):
    card = CardDetails(
        holder_name=payload.card_holder_name,
        number=payload.card_number,
        expiry=payload.card_expiry,
        cvv=payload.card_cvv,
    )
    return projects.capture_payment(db, customer, project_id, payload.amount, payload.payment_method, card)


# Documents: reserve a key + signed url, upload to S3, then attach

@router.post("/{project_id}/uploads", response_model=UploadReservation, status_code=status.HTTP_201_CREATED)
def reserve_upload(
    project_id: int,
    payload: UploadReserveRequest,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    principal: Principal = Depends(get_current_user),
):
    return documents.reserve_upload(db, storage, principal, project_id, payload.filename, payload.extension)


@router.post("/{project_id}/documents", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
def attach_document(
    project_id: int,
    payload: DocumentCreate,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    principal: Principal = Depends(get_current_user),
):
    return documents.attach_document(db, storage, principal, project_id, **payload.model_dump())


@router.get("/{project_id}/documents", response_model=List[DocumentResponse])
def list_documents(
    project_id: int,
    type: Optional[DocumentType] = Query(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_user),
):
    return documents.list_documents(db, principal, project_id, type)


# Feedback (customer, once per completed project)

@router.post("/{project_id}/feedback", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
def leave_feedback(
    project_id: int,
    payload: FeedbackCreate,
    db: Session = Depends(get_db),
    customer: Principal = Depends(require_customer),
):
    return feedback.leave_feedback(db, customer, project_id, payload.rating, payload.comment)


@router.get("/{project_id}/feedback", response_model=List[FeedbackResponse])
def list_feedback(
    project_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_user),
):
    return feedback.list_feedback(db, principal, project_id)
