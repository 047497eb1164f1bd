# artify/db/seed.py
"""
Reset lifecycle data and load a small demo dataset.

    python -m artify.db.seed

Every seeded account uses the password "password".
"""
import logging
from datetime import date, timedelta

from sqlalchemy.orm import Session

from artify.core.config import settings
from artify.core.logger import configure_logging, kv
from artify.core.security import hash_password
from artify.db.base import Base, SessionLocal, engine, utcnow
from artify.db.models.category import Category
from artify.db.models.document import Document
from artify.db.models.feedback import Feedback
from artify.db.models.post import Bid, Post, PostStatus
from artify.db.models.project import Payment, Project
from artify.db.models.user import Admin, Customer, Editor

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "password"

CATEGORIES = [
    ("General Editing", "Comprehensive editing services for various types of content"),
    ("Academic Editing", "Specialized editing for academic papers, theses, and dissertations"),
    ("Fiction Editing", "Editing services tailored for novels, short stories, and creative writing"),
    ("Technical Writing", "Editing for technical documents, manuals, and scientific papers"),
    ("Business Writing", "Editing services for business reports, proposals, and corporate communications"),
    ("ESL Editing", "Specialized editing for non-native English speakers"),
    ("Proofreading", "Final review for grammar, spelling, and punctuation errors"),
    ("Content Writing", "Editing and refinement of web content, blogs, and articles"),
    ("Legal Document Editing", "Specialized editing for legal documents and contracts"),
    ("Manuscript Evaluation", "In-depth analysis and feedback on manuscript structure and content"),
]


def reset(db: Session) -> None:
    # children first
    for model in (Feedback, Document, Payment, Project, Bid, Post, Category, Editor, Customer, Admin):
        db.query(model).delete()
    db.commit()


def seed(db: Session) -> dict:
    reset(db)
    hashed = hash_password(DEFAULT_PASSWORD)

    admin = Admin(
        first_name="Ada", last_name="Admin", email="admin@app.com", password_hash=hashed,
        dob=date(1985, 4, 2), phone_no="0987654213", address="1 Admin Way",
    )
    customer = Customer(
        first_name="Carla", last_name="Customer", email="customer@app.com", password_hash=hashed,
        dob=date(1990, 7, 14), phone_no="0712345678", address="22 Market Street",
    )
    editor = Editor(
        first_name="Eddie", last_name="Editor", email="editor@app.com", password_hash=hashed,
        dob=date(1988, 1, 30), phone_no="0987612345", address="5 Quill Lane",
        skills="Editing, Proofreading", experience="5 years",
        portfolio="https://example.com/portfolio", awards="Best Editor 2022",
    )
    db.add_all([admin, customer, editor])

    categories = [Category(name=name, description=description) for name, description in CATEGORIES]
    db.add_all(categories)
    db.flush()

    now = utcnow()
    post = Post(
        title="Need editing for my novel",
        description="Looking for an experienced editor for my 80,000-word novel",
        budget=500,
        duration=30,
        deadline=now + timedelta(days=30),
        status=PostStatus.open,
        category_id=categories[2].id,
        customer_id=customer.id,
        created_at=now,
    )
    db.add(post)
    db.flush()

    db.add(Bid(
        post_id=post.id,
        editor_id=editor.id,
        price=450,
        comment="I'd love to work on your novel. I have experience with fiction editing.",
    ))
    db.commit()

    return {"admin": admin.id, "customer": customer.id, "editor": editor.id, "post": post.id}


if __name__ == "__main__":
    configure_logging(settings.log_level)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ids = seed(db)
    finally:
        db.close()
    logger.info(kv("seed.done", **ids))
