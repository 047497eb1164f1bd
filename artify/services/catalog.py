# artify/services/catalog.py
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from artify.core.errors import ConflictError, NotFoundError
from artify.core.logger import kv
from artify.core.security import Principal, Role
from artify.db.models.category import Category
from artify.services.guards import is_blank, is_unique_violation, raise_for, require_role

logger = logging.getLogger(__name__)


def create_category(db: Session, admin: Principal, name: str, description: str) -> Category:
    require_role(admin, Role.admin)

    errors = {}
    if is_blank(name):
        errors["name"] = "Name is required"
    if is_blank(description):
        errors["description"] = "Description is required"
    raise_for(errors)

    name = name.strip()
    if db.query(Category).filter(Category.name == name).first():
        raise ConflictError("A category with this name already exists")

    category = Category(name=name, description=description.strip())
    db.add(category)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not is_unique_violation(e, "categories_name_key", "categories.name"):
            raise
        raise ConflictError("A category with this name already exists")
    db.refresh(category)

    logger.info(kv("catalog.category_created", category_id=category.id, name=name))
    return category


def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name).all()


def get_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise NotFoundError("Category not found")
    return category
