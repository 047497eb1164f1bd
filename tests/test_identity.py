from datetime import date
from types import SimpleNamespace

import pytest

from artify.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from artify.core.security import (
    DAY_SECONDS,
    Principal,
    Role,
    create_session,
    hash_password,
    read_session,
    verify_password,
)
from artify.services import catalog, identity
from conftest import PASSWORD


def _register(db, role=Role.customer, **overrides):
    fields = dict(
        email="New.User@Example.com",
        password="longenough",
        confirm_password="longenough",
        first_name="New",
        last_name="User",
    )
    fields.update(overrides)
    return identity.register(db, role, **fields)


def test_password_hashing():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret-pass", "not-a-bcrypt-hash")


def test_register_customer_normalises_email(db):
    principal = _register(db)
    assert principal.role == Role.customer
    assert principal.record.email == "new.user@example.com"
    assert identity.authenticate(db, Role.customer, "NEW.user@example.com", "longenough").id == principal.id


def test_register_editor_keeps_profile(db):
    principal = _register(db, Role.editor, skills="Proofreading", awards="None yet")
    assert principal.record.skills == "Proofreading"
    assert principal.record.awards == "None yet"


def test_register_field_errors(db):
    with pytest.raises(ValidationError) as exc:
        _register(db, first_name=" ", last_name="", password="short", confirm_password="other")
    assert exc.value.field_errors == {
        "first_name": "First Name is required",
        "last_name": "Last Name is required",
        "password": "Password must be at least 8 characters",
        "confirm_password": "Passwords do not match",
    }


def test_register_duplicate_email(db):
    _register(db)
    with pytest.raises(ValidationError) as exc:
        _register(db, email="new.user@example.com")
    assert exc.value.field_errors == {"email": "A user already exists with this email"}


def test_same_email_in_different_role_tables(db):
    _register(db, Role.customer)
    assert _register(db, Role.editor).role == Role.editor


def test_admins_cannot_self_register(db):
    with pytest.raises(ValidationError):
        _register(db, Role.admin)


def test_authenticate_wrong_password(db, customer):
    with pytest.raises(ValidationError) as exc:
        identity.authenticate(db, Role.customer, "customer@example.com", "nope")
    assert exc.value.field_errors == {"password": "Invalid Email or Password"}


def test_authenticate_wrong_role_table(db, customer):
    with pytest.raises(ValidationError):
        identity.authenticate(db, Role.editor, "customer@example.com", "password123")


def test_create_editor_requires_admin(db, customer):
    with pytest.raises(AuthorizationError):
        identity.create_editor(db, customer, "e@example.com", "password123", "E", "D")


def test_create_editor_requires_full_profile(db, admin):
    with pytest.raises(ValidationError) as exc:
        identity.create_editor(db, admin, "e@example.com", "password123", "E", "D")
    assert {"dob", "phone_no", "address", "skills", "experience", "portfolio", "awards"} <= set(exc.value.field_errors)


def test_create_editor(db, admin):
    editor = identity.create_editor(
        db, admin, "E@example.com", "password123", "Eve", "Dit",
        dob=date(1990, 1, 1), phone_no="0700000000", address="1 Road",
        skills="Copy", experience="3 years", portfolio="https://example.com", awards="-",
    )
    assert editor.email == "e@example.com"
    assert [e.id for e in identity.list_editors(db, admin)] == [editor.id]
    with pytest.raises(AuthorizationError):
        identity.list_customers(db, Principal(id=editor.id, role=Role.editor))


def test_categories(db, admin, customer):
    created = catalog.create_category(db, admin, "Proofreading", "Final pass")
    assert catalog.get_category(db, created.id).name == "Proofreading"
    assert [c.name for c in catalog.list_categories(db)] == ["Proofreading"]

    with pytest.raises(ConflictError):
        catalog.create_category(db, admin, " Proofreading ", "Again")
    with pytest.raises(ValidationError):
        catalog.create_category(db, admin, "", "")
    with pytest.raises(AuthorizationError):
        catalog.create_category(db, customer, "Other", "Nope")
    with pytest.raises(NotFoundError):
        catalog.get_category(db, 999)


# -------------------------
# session cookie contents
# -------------------------
def _request(session=None):
    return SimpleNamespace(session=dict(session or {}))


def test_session_lifetime_depends_on_remember(monkeypatch):
    monkeypatch.setattr("artify.core.security.time.time", lambda: 1_000_000)
    principal = Principal(id=7, role=Role.editor)

    short = _request()
    create_session(short, principal, remember=False)
    long = _request()
    create_session(long, principal, remember=True)

    assert short.session["expires_at"] == 1_000_000 + 7 * DAY_SECONDS
    assert long.session["expires_at"] == 1_000_000 + 30 * DAY_SECONDS
    assert read_session(short) == (7, Role.editor)


def test_expired_session_is_cleared():
    request = _request({"principal_id": 1, "role": "customer", "expires_at": 10})
    assert read_session(request) is None
    assert request.session == {}


def test_tampered_session_is_cleared():
    request = _request({"principal_id": 1, "role": "superuser", "expires_at": 2 ** 40})
    assert read_session(request) is None
    assert request.session == {}


def test_concurrent_registration_with_same_email(db, monkeypatch):
    _register(db)
    # the second request checked before the first one committed
    monkeypatch.setattr(identity, "find_by_email", lambda db, role, email: None)

    with pytest.raises(ValidationError) as exc:
        _register(db)
    assert exc.value.field_errors == {"email": "A user already exists with this email"}
    assert len(identity.list_customers(db, Principal(id=0, role=Role.admin))) == 1


def test_check_password(db, customer):
    record = identity.find_by_email(db, Role.customer, "customer@example.com")
    assert identity.check_password(record, PASSWORD)
    assert not identity.check_password(record, "wrong-password")
    assert not identity.check_password(None, PASSWORD)
