# controllers/categories.py
"""Category API endpoints."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..dependencies import get_db
from ..models import CategoryType
from ..schemas import finance as schemas
from ..services import categories as service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=schemas.Category, status_code=201, summary="Create a new category")
def create_category(
    category: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    """Create an income or expense category, optionally under a parent of the same type."""
    return service.create_category(db, current_user, category)


@router.get("/", response_model=List[schemas.Category], summary="List categories")
def read_categories(
    type: Optional[CategoryType] = None,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    """List the user's categories, newest first, with transaction and budget counts."""
    logger.debug(f"Fetching categories (type={type})")
    return service.list_categories(db, current_user, type)


@router.get("/{category_id}", response_model=Dict[str, Any], summary="Get a category")
def read_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    """Category with its latest transactions, budgets and total spent."""
    return service.get_category(db, current_user, category_id)


@router.patch("/{category_id}", response_model=schemas.Category, summary="Update a category")
def update_category(
    category_id: int,
    data: schemas.CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    return service.update_category(db, current_user, category_id, data)


@router.delete("/{category_id}", summary="Delete a category")
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    """Delete a category that has no subcategories, transactions or budgets."""
    return service.delete_category(db, current_user, category_id)
