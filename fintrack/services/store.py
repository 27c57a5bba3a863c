# services/store.py
"""Query accessor over the finance tables.

Every method takes the owning ``user_id`` and filters on it, so a record
belonging to another user is indistinguishable from a missing one.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from .. import models
from ..errors import NotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionFilter:
    """Optional constraints on a transaction query; bounds are inclusive."""
    category_id: Optional[int] = None
    type: Optional[models.TransactionType] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None

    def with_type(self, type_: models.TransactionType) -> "TransactionFilter":
        return replace(self, type=type_)


class FinanceStore:
    """Thin query layer bound to one database session."""

    def __init__(self, db: Session):
        self.db = db

    def _transaction_criteria(self, user_id: str, filters: TransactionFilter):
        criteria = [models.Transaction.user_id == user_id]
        if filters.category_id is not None:
            criteria.append(models.Transaction.category_id == filters.category_id)
        if filters.type is not None:
            criteria.append(models.Transaction.type == filters.type)
        if filters.date_from is not None:
            criteria.append(models.Transaction.date >= filters.date_from)
        if filters.date_to is not None:
            criteria.append(models.Transaction.date <= filters.date_to)
        return criteria

    def sum_amount(self, user_id: str, filters: TransactionFilter) -> float:
        total = (
            self.db.query(func.coalesce(func.sum(models.Transaction.amount), 0.0))
            .filter(*self._transaction_criteria(user_id, filters))
            .scalar()
        )
        return float(total or 0.0)

    def count_transactions(self, user_id: str, filters: TransactionFilter) -> int:
        count = (
            self.db.query(func.count(models.Transaction.id))
            .filter(*self._transaction_criteria(user_id, filters))
            .scalar()
        )
        return int(count or 0)

    def list_transactions(
        self,
        user_id: str,
        filters: TransactionFilter,
        limit: Optional[int] = None,
    ) -> List[models.Transaction]:
        query = (
            self.db.query(models.Transaction)
            .options(joinedload(models.Transaction.category))
            .filter(*self._transaction_criteria(user_id, filters))
            .order_by(models.Transaction.date.desc(), models.Transaction.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def list_budgets(self, user_id: str, category_id: Optional[int] = None) -> List[models.Budget]:
        query = (
            self.db.query(models.Budget)
            .options(joinedload(models.Budget.category))
            .filter(models.Budget.user_id == user_id)
        )
        if category_id is not None:
            query = query.filter(models.Budget.category_id == category_id)
        return query.order_by(models.Budget.created_at.desc(), models.Budget.id.desc()).all()

    def list_categories(
        self,
        user_id: str,
        type_: Optional[models.CategoryType] = None,
    ) -> List[models.Category]:
        query = self.db.query(models.Category).filter(models.Category.user_id == user_id)
        if type_ is not None:
            query = query.filter(models.Category.type == type_)
        return query.order_by(models.Category.created_at.desc(), models.Category.id.desc()).all()

    def get_category(self, user_id: str, category_id: int, detail: str = "Category not found") -> models.Category:
        category = self.db.query(models.Category).filter(
            models.Category.id == category_id,
            models.Category.user_id == user_id
        ).first()
        if not category:
            raise NotFound(detail)
        return category

    def get_budget(self, user_id: str, budget_id: int) -> models.Budget:
        budget = self.db.query(models.Budget).filter(
            models.Budget.id == budget_id,
            models.Budget.user_id == user_id
        ).first()
        if not budget:
            raise NotFound("Budget not found")
        return budget

    def get_transaction(self, user_id: str, transaction_id: int) -> models.Transaction:
        transaction = self.db.query(models.Transaction).filter(
            models.Transaction.id == transaction_id,
            models.Transaction.user_id == user_id
        ).first()
        if not transaction:
            raise NotFound("Transaction not found")
        return transaction

    def count_for_category(self, model, category_id: int) -> int:
        """Count rows of ``model`` (Transaction or Budget) referencing a category."""
        return int(
            self.db.query(func.count(model.id))
            .filter(model.category_id == category_id)
            .scalar() or 0
        )

    def update_budget_spent(self, budget: models.Budget, spent: float) -> None:
        """Overwrite the cached spend; the caller owns the commit."""
        logger.debug(f"Budget {budget.id} spent {budget.spent} -> {spent}")
        budget.spent = spent
