# services/export.py
"""JSON and CSV exports of a user's data."""

import csv
import io
import logging
from datetime import date
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from .. import models
from ..schemas import finance as schemas
from . import users
from .reports import ReportEngine, date_filter
from .store import FinanceStore

logger = logging.getLogger(__name__)

TRANSACTION_HEADERS = ["ID", "Date", "Type", "Category", "Amount", "Description", "Created At"]
BUDGET_HEADERS = ["ID", "Name", "Category", "Amount", "Spent", "Remaining", "Period", "Start Date", "End Date"]
CATEGORY_HEADERS = ["ID", "Name", "Type", "Parent", "Icon", "Color", "Transaction Count", "Budget Count"]


def to_csv(headers: Sequence[str], rows: Iterable[Sequence]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


def _payload(fmt: str, data: List[dict], csv_text) -> dict:
    if fmt == "csv":
        return {"format": "csv", "data": csv_text(), "count": len(data)}
    return {"format": "json", "data": data, "count": len(data)}


def _iso(value) -> str:
    return value.isoformat() if value is not None else ""


def export_transactions(
    db: Session,
    user_id: str,
    fmt: str = "json",
    type_: Optional[models.TransactionType] = None,
    category_id: Optional[int] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> dict:
    filters = date_filter(start, end, category_id=category_id, type=type_)
    transactions = FinanceStore(db).list_transactions(user_id, filters)
    logger.info(f"Exporting {len(transactions)} transactions for {user_id} as {fmt}")

    data = [schemas.Transaction.model_validate(t).model_dump(mode="json") for t in transactions]
    return _payload(fmt, data, lambda: to_csv(TRANSACTION_HEADERS, (
        [
            t.id,
            t.date.date().isoformat(),
            t.type.value,
            t.category.name,
            t.amount,
            t.description or "",
            _iso(t.created_at),
        ]
        for t in transactions
    )))


def export_budgets(db: Session, user_id: str, fmt: str = "json") -> dict:
    store = FinanceStore(db)
    engine = ReportEngine(store)
    budgets = store.list_budgets(user_id)
    logger.info(f"Exporting {len(budgets)} budgets for {user_id} as {fmt}")

    views = [engine.budget_view(b) for b in budgets]
    data = [schemas.BudgetView.model_validate(v).model_dump(mode="json") for v in views]
    return _payload(fmt, data, lambda: to_csv(BUDGET_HEADERS, (
        [
            b.id,
            b.name,
            b.category.name,
            b.amount,
            view["spent"],
            view["remaining"],
            b.period.value,
            b.start_date.isoformat(),
            b.end_date.isoformat(),
        ]
        for b, view in zip(budgets, views)
    )))


def export_categories(db: Session, user_id: str, fmt: str = "json") -> dict:
    store = FinanceStore(db)
    categories = store.list_categories(user_id)
    logger.info(f"Exporting {len(categories)} categories for {user_id} as {fmt}")

    data = []
    for c in categories:
        item = schemas.Category.model_validate(c).model_dump(mode="json")
        item["transaction_count"] = store.count_for_category(models.Transaction, c.id)
        item["budget_count"] = store.count_for_category(models.Budget, c.id)
        data.append(item)

    return _payload(fmt, data, lambda: to_csv(CATEGORY_HEADERS, (
        [
            c.id,
            c.name,
            c.type.value,
            c.parent.name if c.parent else "",
            c.icon or "",
            c.color or "",
            item["transaction_count"],
            item["budget_count"],
        ]
        for c, item in zip(categories, data)
    )))


def export_full(db: Session, user_id: str, email: Optional[str] = None) -> dict:
    """Everything the user owns, as one JSON document."""
    store = FinanceStore(db)
    profile = users.get_or_create_profile(db, user_id, email)

    transactions = store.list_transactions(user_id, date_filter(None, None))
    budgets = store.list_budgets(user_id)
    categories = store.list_categories(user_id)
    logger.info(f"Full export for {user_id}")

    return {
        "export_date": models.utc_now().isoformat(),
        "user": schemas.UserProfile.model_validate(profile).model_dump(mode="json"),
        "data": {
            "transactions": [schemas.Transaction.model_validate(t).model_dump(mode="json") for t in transactions],
            "budgets": [schemas.Budget.model_validate(b).model_dump(mode="json") for b in budgets],
            "categories": [schemas.CategorySummary.model_validate(c).model_dump(mode="json") for c in categories],
        },
        "stats": {
            "transaction_count": len(transactions),
            "budget_count": len(budgets),
            "category_count": len(categories),
        },
    }
