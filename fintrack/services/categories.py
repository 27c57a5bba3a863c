# services/categories.py
"""Category CRUD with parent/type consistency and deletion guards."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from .. import models
from ..errors import Conflict, InvalidArgument
from ..schemas import finance as schemas
from .reports import RECENT_TRANSACTIONS
from .store import FinanceStore, TransactionFilter

logger = logging.getLogger(__name__)


def _check_parent(store: FinanceStore, user_id: str, parent_id: int, type_: models.CategoryType) -> models.Category:
    parent = store.get_category(user_id, parent_id, detail="Parent category not found")
    if parent.type != type_:
        raise InvalidArgument("Category type must match parent type")
    # Only one level of nesting
    if parent.parent_id is not None:
        raise InvalidArgument("Parent category cannot itself be a subcategory")
    return parent


def _with_counts(store: FinanceStore, category: models.Category) -> dict:
    data = schemas.Category.model_validate(category).model_dump()
    data["transaction_count"] = store.count_for_category(models.Transaction, category.id)
    data["budget_count"] = store.count_for_category(models.Budget, category.id)
    return data


def create_category(db: Session, user_id: str, data: schemas.CategoryCreate) -> dict:
    store = FinanceStore(db)
    if data.parent_id is not None:
        _check_parent(store, user_id, data.parent_id, data.type)

    logger.info(f"Creating category: {data.name} ({data.type.value}) for {user_id}")
    category = models.Category(user_id=user_id, **data.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    return _with_counts(store, category)


def list_categories(db: Session, user_id: str, type_: Optional[models.CategoryType] = None) -> List[dict]:
    store = FinanceStore(db)
    return [_with_counts(store, c) for c in store.list_categories(user_id, type_)]


def get_category(db: Session, user_id: str, category_id: int) -> dict:
    """Category with its latest transactions, budgets and all-time expense total."""
    store = FinanceStore(db)
    category = store.get_category(user_id, category_id)

    data = _with_counts(store, category)
    recent = store.list_transactions(
        user_id, TransactionFilter(category_id=category_id), limit=RECENT_TRANSACTIONS
    )
    data["transactions"] = [schemas.Transaction.model_validate(t).model_dump() for t in recent]
    data["budgets"] = [schemas.Budget.model_validate(b).model_dump() for b in store.list_budgets(user_id, category_id)]
    data["total_spent"] = store.sum_amount(
        user_id, TransactionFilter(category_id=category_id, type=models.TransactionType.EXPENSE)
    )
    return data


def update_category(db: Session, user_id: str, category_id: int, data: schemas.CategoryUpdate) -> dict:
    store = FinanceStore(db)
    category = store.get_category(user_id, category_id)
    # An explicit null parent_id detaches; nulls elsewhere mean "leave as is"
    changes = {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k == "parent_id"
    }
    detaching = "parent_id" in changes and changes["parent_id"] is None

    if data.parent_id is not None:
        if data.parent_id == category_id:
            raise InvalidArgument("Category cannot be its own parent")
        _check_parent(store, user_id, data.parent_id, data.type or category.type)
        if category.children:
            raise InvalidArgument("Category with subcategories cannot become a subcategory")
    elif (data.type is not None and not detaching
          and category.parent is not None and category.parent.type != data.type):
        raise InvalidArgument("Category type must match parent type")

    if data.type is not None and any(child.type != data.type for child in category.children):
        raise InvalidArgument("Category type must match its subcategories")

    logger.info(f"Updating category {category_id}")
    for key, value in changes.items():
        setattr(category, key, value)

    db.commit()
    db.refresh(category)
    return _with_counts(store, category)


def delete_category(db: Session, user_id: str, category_id: int) -> dict:
    store = FinanceStore(db)
    category = store.get_category(user_id, category_id)

    if category.children:
        raise Conflict("Cannot delete category with subcategories")
    if store.count_for_category(models.Transaction, category_id):
        raise Conflict("Cannot delete category with transactions")
    if store.count_for_category(models.Budget, category_id):
        raise Conflict("Cannot delete category with budgets")

    logger.info(f"Deleting category: {category_id}")
    db.delete(category)
    db.commit()
    return {"status": "success"}
