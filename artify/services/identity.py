# artify/services/identity.py
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from artify.core.errors import ValidationError
from artify.core.logger import kv
from artify.core.security import ROLE_MODELS, Principal, Role, hash_password, verify_password
from artify.db.models.user import Customer, Editor
from artify.services.guards import is_blank, is_unique_violation, raise_for, require_role

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
EDITOR_PROFILE_FIELDS = ("skills", "experience", "portfolio", "awards")
EMAIL_TAKEN = "A user already exists with this email"


def find_by_email(db: Session, role: Role, email: str):
    model = ROLE_MODELS[role]
    return db.query(model).filter(model.email == email.strip().lower()).first()


def check_password(record, plaintext: str) -> bool:
    return record is not None and verify_password(plaintext, record.password_hash)


def _profile_errors(first_name, last_name, password) -> dict:
    errors = {}
    if is_blank(first_name):
        errors["first_name"] = "First Name is required"
    if is_blank(last_name):
        errors["last_name"] = "Last Name is required"
    if password is None or len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return errors


def _create(db: Session, role: Role, email: str, password: str, **fields):
    model = ROLE_MODELS[role]
    record = model(
        email=email.strip().lower(),
        password_hash=hash_password(password),
        **fields,
    )
    db.add(record)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # same email registered concurrently in this role table
        if not is_unique_violation(e, f"ix_{model.__tablename__}_email", f"{model.__tablename__}.email"):
            raise
        raise ValidationError({"email": EMAIL_TAKEN})
    db.refresh(record)
    logger.info(kv("identity.created", role=role.value, principal_id=record.id))
    return record


def register(
    db: Session,
    role: Role,
    email: str,
    password: str,
    confirm_password: str,
    first_name: str,
    last_name: str,
    dob: Optional[date] = None,
    phone_no: Optional[str] = None,
    address: Optional[str] = None,
    **editor_profile,
) -> Principal:
    """Self-service sign up. Admin accounts are never created here."""
    if role not in (Role.customer, Role.editor):
        raise ValidationError({"role": "Only customers and editors can register"})

    errors = _profile_errors(first_name, last_name, password)
    if password != confirm_password:
        errors.setdefault("confirm_password", "Passwords do not match")
    raise_for(errors)

    if find_by_email(db, role, email):
        raise ValidationError({"email": EMAIL_TAKEN})

    fields = dict(first_name=first_name.strip(), last_name=last_name.strip(), dob=dob, phone_no=phone_no, address=address)
    if role == Role.editor:
        fields.update({k: editor_profile.get(k) for k in EDITOR_PROFILE_FIELDS})

    record = _create(db, role, email, password, **fields)
    return Principal(id=record.id, role=role, record=record)


def authenticate(db: Session, role: Role, email: str, password: str) -> Principal:
    record = find_by_email(db, role, email)
    if not check_password(record, password):
        logger.info(kv("identity.login_failed", role=role.value))
        raise ValidationError({"password": "Invalid Email or Password"})
    return Principal(id=record.id, role=role, record=record)


def create_editor(
    db: Session,
    admin: Principal,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    dob: Optional[date] = None,
    phone_no: Optional[str] = None,
    address: Optional[str] = None,
    skills: Optional[str] = None,
    experience: Optional[str] = None,
    portfolio: Optional[str] = None,
    awards: Optional[str] = None,
) -> Editor:
    """Admin onboarding of an editor; every profile field is mandatory here."""
    require_role(admin, Role.admin)

    errors = _profile_errors(first_name, last_name, password)
    for name, value in (("phone_no", phone_no), ("address", address)):
        if is_blank(value):
            errors[name] = f"{name.replace('_', ' ').title()} is required"
    if dob is None:
        errors["dob"] = "Date of Birth is required"
    profile = dict(skills=skills, experience=experience, portfolio=portfolio, awards=awards)
    for name, value in profile.items():
        if is_blank(value):
            errors[name] = f"{name.capitalize()} is required"
    raise_for(errors)

    if find_by_email(db, Role.editor, email):
        raise ValidationError({"email": EMAIL_TAKEN})

    return _create(
        db,
        Role.editor,
        email,
        password,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        dob=dob,
        phone_no=phone_no,
        address=address,
        **profile,
    )


def list_customers(db: Session, admin: Principal) -> List[Customer]:
    require_role(admin, Role.admin)
    return db.query(Customer).order_by(Customer.id).all()


def list_editors(db: Session, admin: Principal) -> List[Editor]:
    require_role(admin, Role.admin)
    return db.query(Editor).order_by(Editor.id).all()
