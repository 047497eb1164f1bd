import math
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError

from artify.core.errors import AuthorizationError, ValidationError
from artify.core.security import Principal, Role


def require_role(principal: Optional[Principal], *roles: Role) -> Principal:
    if principal is None or principal.role not in roles:
        raise AuthorizationError()
    return principal


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def is_positive(value) -> bool:
    """Finite number above zero. NaN, infinities and bools are rejected."""
    if value is None or isinstance(value, bool):
        return False
    try:
        value = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value > 0


def is_whole(value) -> bool:
    return is_positive(value) and float(value).is_integer()


def is_unique_violation(exc: IntegrityError, *markers: str) -> bool:
    """
    True when `exc` was raised by one of the given unique constraints.

    SQLite names the offending columns ("UNIQUE constraint failed:
    bids.post_id, bids.editor_id") while PostgreSQL names the constraint,
    so callers pass a marker for each.
    """
    message = str(exc.orig)
    if "UNIQUE" not in message.upper():
        return False
    return any(marker in message for marker in markers)


def raise_for(errors: Dict[str, str]) -> None:
    if errors:
        raise ValidationError(errors)
