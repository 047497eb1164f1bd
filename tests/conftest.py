import os

# must be set before anything from artify is imported
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SESSION_SECRET", "test-secret")
os.environ.setdefault("AWS_BUCKET", "test-bucket")
os.environ.setdefault("AWS_REGION", "us-west-2")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from artify.core.security import Principal, Role, hash_password
from artify.core.storage import ObjectStorage, get_storage
from artify.db.base import Base, get_db
from artify.db.models import registry  # noqa: F401
from artify.db.models.category import Category
from artify.db.models.user import Admin, Customer, Editor
from artify.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False)

PASSWORD = "password123"
_HASHED = hash_password(PASSWORD)


class FakeStorage(ObjectStorage):
    """In-memory stand-in for S3: `put` simulates the client's direct upload."""

    def __init__(self):
        super().__init__(bucket="test-bucket", region="us-west-2")
        self.objects = set()

    def issue_upload_url(self, key, bucket=None, expires_in=None):
        return f"https://{bucket or self.bucket}.s3.{self.region}.amazonaws.com/{key}?X-Amz-Signature=fake"

    def object_exists(self, key, bucket=None):
        return (bucket or self.bucket, key) in self.objects

    def put(self, key, bucket=None):
        self.objects.add((bucket or self.bucket, key))


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def storage():
    return FakeStorage()


def _principal(db, model, role, email, **extra):
    record = model(
        first_name=role.value.capitalize(),
        last_name="Test",
        email=email,
        password_hash=_HASHED,
        **extra,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return Principal(id=record.id, role=role, record=record)


@pytest.fixture()
def make_principal(db):
    models = {Role.admin: Admin, Role.customer: Customer, Role.editor: Editor}

    def factory(role, email=None):
        email = email or f"{role.value}-{os.urandom(3).hex()}@example.com"
        return _principal(db, models[role], role, email)

    return factory


@pytest.fixture()
def admin(make_principal):
    return make_principal(Role.admin, "admin@example.com")


@pytest.fixture()
def customer(make_principal):
    return make_principal(Role.customer, "customer@example.com")


@pytest.fixture()
def editor(make_principal):
    return make_principal(Role.editor, "editor@example.com")


@pytest.fixture()
def category(db):
    cat = Category(name="Fiction Editing", description="Novels and short stories")
    db.add(cat)
    db.commit()
    db.refresh(cat)
    return cat


@pytest.fixture()
def make_client(db, storage):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    def factory():
        return TestClient(app)

    yield factory
    app.dependency_overrides.clear()


def login(client, role, email, password=PASSWORD, remember=False):
    resp = client.post(
        "/api/auth/login",
        json={"role": role.value, "email": email, "password": password, "remember": remember},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()
