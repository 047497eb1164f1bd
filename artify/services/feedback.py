# artify/services/feedback.py
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from artify.core.errors import AuthorizationError, ConflictError, InvalidStateError
from artify.core.logger import kv
from artify.core.security import Principal, Role
from artify.db.models.feedback import Feedback
from artify.db.models.project import ProjectStatus
from artify.services.guards import is_blank, is_unique_violation, is_whole, raise_for, require_role
from artify.services.projects import load_project, ensure_participant

logger = logging.getLogger(__name__)

ALREADY_SUBMITTED = "Feedback has already been submitted for this project"
_ONE_FEEDBACK = ("uq_feedback_customer_project", "feedback.customer_id, feedback.project_id")


def leave_feedback(db: Session, customer: Principal, project_id: int, rating: int, comment: str) -> Feedback:
    require_role(customer, Role.customer)
    project = load_project(db, project_id)
    if project.customer_id != customer.id:
        raise AuthorizationError("Unauthorized to leave feedback for this project")

    if project.status != ProjectStatus.completed or project.payment is None:
        raise InvalidStateError("Feedback can only be left on a completed, paid project")

    existing = db.query(Feedback).filter(
        Feedback.project_id == project.id,
        Feedback.customer_id == customer.id,
    ).first()
    if existing:
        raise ConflictError(ALREADY_SUBMITTED)

    errors = {}
    if not is_whole(rating) or not 1 <= rating <= 5:
        errors["rating"] = "Rating must be a whole number from 1 to 5"
    if is_blank(comment):
        errors["comment"] = "Comment is required"
    raise_for(errors)

    feedback = Feedback(
        project_id=project.id,
        customer_id=customer.id,
        rating=int(rating),
        comment=comment.strip(),
    )
    db.add(feedback)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not is_unique_violation(e, *_ONE_FEEDBACK):
            raise
        raise ConflictError(ALREADY_SUBMITTED)
    db.refresh(feedback)

    logger.info(kv("feedback.created", feedback_id=feedback.id, project_id=project.id, rating=feedback.rating))
    return feedback


def list_feedback(db: Session, principal: Principal, project_id: int) -> List[Feedback]:
    project = load_project(db, project_id)
    ensure_participant(project, principal)
    return db.query(Feedback).filter(Feedback.project_id == project.id).order_by(Feedback.created_at.desc()).all()
