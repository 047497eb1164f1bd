# artify/services/projects.py
"""
Project side of the engagement lifecycle.

    in_progress --(editor marks complete)--> payment_pending
    payment_pending --(customer pays)--> completed

Payment capture only checks the card structurally; no gateway is called
and a structurally valid card always succeeds.
"""
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from artify.core.errors import AuthorizationError, ConflictError, InvalidStateError, NotFoundError
from artify.core.logger import kv
from artify.core.security import Principal, Role
from artify.db.base import utcnow
from artify.db.models.post import PostStatus
from artify.db.models.project import CARD_METHODS, Payment, PaymentMethod, Project, ProjectStatus
from artify.services.guards import is_blank, is_positive, is_unique_violation, raise_for, require_role
from artify.services.posts import approved_bid

logger = logging.getLogger(__name__)

_card_number_re = re.compile(r"^\d{16}$")
_cvv_re = re.compile(r"^\d{3}$")
_expiry_re = re.compile(r"^(0[1-9]|1[0-2])/(\d{2})$")

PAYMENT_TAKEN = "Payment has already been captured for this project"

# unique constraint markers: PostgreSQL constraint name, SQLite column
_ONE_PAYMENT = ("payments_project_id_key", "payments.project_id")


@dataclass
class CardDetails:
    holder_name: Optional[str] = None
    number: Optional[str] = None
    expiry: Optional[str] = None  # MM/YY
    cvv: Optional[str] = None


def card_errors(card: Optional[CardDetails], today: Optional[date] = None) -> Dict[str, str]:
    """Structural checks only: 16 digits, 3-digit CVV, expiry month not past."""
    card = card or CardDetails()
    today = today or utcnow().date()
    errors = {}

    if is_blank(card.holder_name):
        errors["card_holder_name"] = "Card holder name is required"

    number = re.sub(r"[\s-]", "", card.number or "")
    if not _card_number_re.match(number):
        errors["card_number"] = "Card number must be 16 digits"

    if not _cvv_re.match((card.cvv or "").strip()):
        errors["card_cvv"] = "CVV must be 3 digits"

    m = _expiry_re.match((card.expiry or "").strip())
    if not m:
        errors["card_expiry"] = "Expiry must be in MM/YY format"
    else:
        month, year = int(m.group(1)), 2000 + int(m.group(2))
        if (year, month) < (today.year, today.month):
            errors["card_expiry"] = "Card has expired"

    return errors


def load_project(db: Session, project_id: int, lock: bool = False) -> Project:
    q = db.query(Project).filter(Project.id == project_id)
    if lock:
        q = q.with_for_update()
    project = q.first()
    if not project:
        raise NotFoundError("Project not found")
    return project


def existing_payment(db: Session, project_id: int) -> Optional[Payment]:
    return db.query(Payment).filter(Payment.project_id == project_id).first()


def ensure_participant(project: Project, principal: Principal, allow_admin: bool = True) -> None:
    if principal.is_admin and allow_admin:
        return
    if principal.is_customer and project.customer_id == principal.id:
        return
    if principal.is_editor and project.editor_id == principal.id:
        return
    raise AuthorizationError()


# -------------------------
# Editor: mark complete
# -------------------------
def mark_complete(db: Session, editor: Principal, project_id: int) -> Project:
    require_role(editor, Role.editor)
    project = load_project(db, project_id, lock=True)
    if project.editor_id != editor.id:
        raise AuthorizationError()
    if project.status != ProjectStatus.in_progress:
        raise InvalidStateError(f"Cannot complete project because it is {project.status.value}")

    project.status = ProjectStatus.payment_pending
    db.commit()
    db.refresh(project)

    logger.info(kv("project.payment_pending", project_id=project.id, editor_id=editor.id))
    return project


# -------------------------
# Customer: capture payment
# -------------------------
def capture_payment(
    db: Session,
    customer: Principal,
    project_id: int,
    amount: float,
    method: PaymentMethod,
    card: Optional[CardDetails] = None,
) -> Payment:
    require_role(customer, Role.customer)
    project = load_project(db, project_id, lock=True)
    if project.customer_id != customer.id:
        raise AuthorizationError()

    if existing_payment(db, project.id) is not None:
        raise ConflictError(PAYMENT_TAKEN)
    if project.status != ProjectStatus.payment_pending:
        raise InvalidStateError("Project is not awaiting payment")

    errors = {}
    try:
        method = PaymentMethod(method)
    except ValueError:
        errors["payment_method"] = "Unsupported payment method"

    bid = approved_bid(db, project.post_id)
    if not is_positive(amount):
        errors["amount"] = "Amount must be a positive number"
    elif bid is not None and abs(float(amount) - bid.price) > 0.005:
        errors["amount"] = f"Amount must equal the agreed price of {bid.price:.2f}"

    if "payment_method" not in errors and method in CARD_METHODS:
        errors.update(card_errors(card))
    raise_for(errors)

    payment = Payment(
        project_id=project.id,
        customer_id=project.customer_id,
        editor_id=project.editor_id,
        amount=float(amount),
        payment_method=method,
    )
    db.add(payment)
    project.status = ProjectStatus.completed
    project.post.status = PostStatus.completed
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not is_unique_violation(e, *_ONE_PAYMENT):
            raise
        raise ConflictError(PAYMENT_TAKEN)
    db.refresh(payment)

    logger.info(kv(
        "project.completed",
        project_id=project.id,
        payment_id=payment.id,
        amount=payment.amount,
        method=method.value,
    ))
    return payment


# -------------------------
# Reads
# -------------------------
def get_project(db: Session, principal: Principal, project_id: int) -> Project:
    project = load_project(db, project_id)
    ensure_participant(project, principal)
    return project


def list_projects(db: Session, principal: Principal, status: Optional[ProjectStatus] = None) -> List[Project]:
    q = db.query(Project)
    if principal.is_customer:
        q = q.filter(Project.customer_id == principal.id)
    elif principal.is_editor:
        q = q.filter(Project.editor_id == principal.id)
    elif not principal.is_admin:
        raise AuthorizationError()
    if status:
        q = q.filter(Project.status == status)
    return q.order_by(Project.created_at.desc()).all()
