# artify/core/security.py
"""
Password hashing, the session cookie adapter and the FastAPI dependencies
that turn a session into an authenticated `Principal`.

The cookie itself is signed by Starlette's SessionMiddleware (see
`artify.main`); this module only decides what goes into it.
"""
import enum
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import bcrypt
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from artify.core.config import settings
from artify.core.logger import kv
from artify.db.base import get_db
from artify.db.models.user import Admin, Customer, Editor

logger = logging.getLogger(__name__)

SESSION_PRINCIPAL_KEY = "principal_id"
SESSION_ROLE_KEY = "role"
SESSION_EXPIRES_KEY = "expires_at"

DAY_SECONDS = 60 * 60 * 24


class Role(str, enum.Enum):
    admin = "admin"
    customer = "customer"
    editor = "editor"


ROLE_MODELS = {
    Role.admin: Admin,
    Role.customer: Customer,
    Role.editor: Editor,
}


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, passed explicitly into every service call."""

    id: int
    role: Role
    record: Any = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.admin

    @property
    def is_customer(self) -> bool:
        return self.role == Role.customer

    @property
    def is_editor(self) -> bool:
        return self.role == Role.editor


# -------------------------
# Passwords
# -------------------------
def hash_password(plaintext: str) -> str:
    return bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(plaintext: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(plaintext.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


# -------------------------
# Session cookie
# -------------------------
def create_session(request: Request, principal: Principal, remember: bool = False) -> None:
    days = settings.session_remember_days if remember else settings.session_default_days
    request.session.clear()
    request.session[SESSION_PRINCIPAL_KEY] = principal.id
    request.session[SESSION_ROLE_KEY] = principal.role.value
    request.session[SESSION_EXPIRES_KEY] = int(time.time()) + days * DAY_SECONDS
    logger.info(kv("session.created", principal_id=principal.id, role=principal.role.value, days=days))


def read_session(request: Request) -> Optional[Tuple[int, Role]]:
    data = request.session
    principal_id = data.get(SESSION_PRINCIPAL_KEY)
    role = data.get(SESSION_ROLE_KEY)
    expires_at = data.get(SESSION_EXPIRES_KEY)
    if principal_id is None or role is None:
        return None

    try:
        principal_id = int(principal_id)
        role = Role(role)
        expires_at = int(expires_at)
    except (TypeError, ValueError):
        request.session.clear()
        return None

    if expires_at <= time.time():
        request.session.clear()
        return None

    return principal_id, role


def end_session(request: Request) -> None:
    request.session.clear()


# -------------------------
# Dependencies
# -------------------------
def get_optional_principal(request: Request, db: Session = Depends(get_db)) -> Optional[Principal]:
    found = read_session(request)
    if found is None:
        return None

    principal_id, role = found
    record = db.get(ROLE_MODELS[role], principal_id)
    if record is None:
        # the row behind the session is gone
        request.session.clear()
        return None
    return Principal(id=record.id, role=role, record=record)


def get_current_user(principal: Optional[Principal] = Depends(get_optional_principal)) -> Principal:
    if principal is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return principal


def _require(role: Role):
    def dependency(principal: Principal = Depends(get_current_user)) -> Principal:
        if principal.role != role:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"{role.value.capitalize()}s only")
        return principal

    dependency.__name__ = f"require_{role.value}"
    return dependency


require_admin = _require(Role.admin)
require_customer = _require(Role.customer)
require_editor = _require(Role.editor)
