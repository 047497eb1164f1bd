# artify/db/base.py
from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from artify.core.config import settings

connect_args = {}
if settings.database_url.startswith("sqlite"):
    # FastAPI may hand the same connection to a different worker thread
    connect_args["check_same_thread"] = False

engine = create_engine(settings.database_url, echo=settings.sql_echo, connect_args=connect_args)

SessionLocal = sessionmaker(bind=engine, autoflush=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def utcnow() -> datetime:
    """Naive UTC timestamp; every DateTime column stores naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
