# artify/api/routes/categories.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from artify.db.base import get_db
from artify.schemas.category import CategoryResponse
from artify.services import catalog

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    return catalog.list_categories(db)


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return catalog.get_category(db, category_id)
