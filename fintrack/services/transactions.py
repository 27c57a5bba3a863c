# services/transactions.py
"""Transaction CRUD; expense writes refresh the cached spend of affected budgets."""

import logging
from datetime import date
from typing import Iterable, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from .. import models
from ..schemas import finance as schemas
from .reports import ReportEngine, date_filter
from .store import FinanceStore

logger = logging.getLogger(__name__)


def _touch(transaction: models.Transaction) -> Tuple[int, date]:
    return transaction.category_id, transaction.date.date()


def refresh_budgets(db: Session, user_id: str, touched: Iterable[Tuple[int, date]]) -> List[models.Budget]:
    """Recompute ``spent`` for each budget whose category and window cover a touched (category, day).

    Read-then-write without a lock: two concurrent writers can leave a stale
    value until the next write to the same category.
    """
    store = FinanceStore(db)
    engine = ReportEngine(store)
    refreshed: List[models.Budget] = []
    seen: Set[int] = set()

    for category_id, day in touched:
        for budget in store.list_budgets(user_id, category_id):
            if budget.id in seen or not budget.start_date <= day <= budget.end_date:
                continue
            seen.add(budget.id)
            logger.info(f"Recomputing spent for budget {budget.id}")
            engine.refresh_spent(budget)
            refreshed.append(budget)
    return refreshed


def create_transaction(db: Session, user_id: str, data: schemas.TransactionCreate) -> models.Transaction:
    store = FinanceStore(db)
    store.get_category(user_id, data.category_id)

    logger.info(f"Creating transaction: {data.type.value} {data.amount} in category {data.category_id}")
    transaction = models.Transaction(user_id=user_id, **data.model_dump())
    db.add(transaction)
    db.flush()

    if transaction.type == models.TransactionType.EXPENSE:
        refresh_budgets(db, user_id, [_touch(transaction)])

    db.commit()
    db.refresh(transaction)
    return transaction


def list_transactions(
    db: Session,
    user_id: str,
    type_: Optional[models.TransactionType] = None,
    category_id: Optional[int] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[models.Transaction]:
    filters = date_filter(start, end, category_id=category_id, type=type_)
    return FinanceStore(db).list_transactions(user_id, filters)


def get_transaction(db: Session, user_id: str, transaction_id: int) -> models.Transaction:
    return FinanceStore(db).get_transaction(user_id, transaction_id)


def update_transaction(
    db: Session,
    user_id: str,
    transaction_id: int,
    data: schemas.TransactionUpdate,
) -> models.Transaction:
    store = FinanceStore(db)
    transaction = store.get_transaction(user_id, transaction_id)
    if data.category_id is not None:
        store.get_category(user_id, data.category_id)

    was_expense = transaction.type == models.TransactionType.EXPENSE
    before = _touch(transaction)

    logger.info(f"Updating transaction {transaction_id}")
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(transaction, key, value)
    db.flush()

    if was_expense or transaction.type == models.TransactionType.EXPENSE:
        refresh_budgets(db, user_id, [before, _touch(transaction)])

    db.commit()
    db.refresh(transaction)
    return transaction


def delete_transaction(db: Session, user_id: str, transaction_id: int) -> dict:
    store = FinanceStore(db)
    transaction = store.get_transaction(user_id, transaction_id)
    was_expense = transaction.type == models.TransactionType.EXPENSE
    touched = _touch(transaction)

    logger.info(f"Deleting transaction: {transaction_id}")
    db.delete(transaction)
    db.flush()

    if was_expense:
        refresh_budgets(db, user_id, [touched])

    db.commit()
    return {"message": "Transaction deleted successfully"}


def transaction_stats(db: Session, user_id: str, start: Optional[date] = None, end: Optional[date] = None) -> dict:
    return ReportEngine(FinanceStore(db)).transaction_stats(user_id, start, end)
