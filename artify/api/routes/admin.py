# artify/api/routes/admin.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from artify.core.security import Principal, require_admin
from artify.db.base import get_db
from artify.db.models.post import PostStatus
from artify.schemas.category import CategoryCreate, CategoryResponse
from artify.schemas.post import PostResponse
from artify.schemas.user import EditorCreate, EditorResponse, UserResponse
from artify.services import catalog, identity, posts

router = APIRouter(prefix="/admin", tags=["admin"])


# -------------------------
# 1. Service categories
# -------------------------
@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return catalog.create_category(db, admin, payload.name, payload.description)


# -------------------------
# 2. Editors
# -------------------------
@router.get("/editors", response_model=List[EditorResponse])
def list_editors(db: Session = Depends(get_db), admin: Principal = Depends(require_admin)):
    return identity.list_editors(db, admin)


@router.post("/editors", response_model=EditorResponse, status_code=status.HTTP_201_CREATED)
def create_editor(
    payload: EditorCreate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return identity.create_editor(db, admin, **payload.model_dump())


# -------------------------
# 3. Customers and posts
# -------------------------
@router.get("/customers", response_model=List[UserResponse])
def list_customers(db: Session = Depends(get_db), admin: Principal = Depends(require_admin)):
    return identity.list_customers(db, admin)


@router.get("/posts", response_model=List[PostResponse])
def list_posts(
    status: Optional[PostStatus] = Query(None),
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return posts.list_posts(db, admin, status)
