# services/budgets.py
"""Budget CRUD. Reads return live spend; writes refresh the cached ``spent``."""

import logging
from typing import List

from sqlalchemy.orm import Session

from .. import models
from ..errors import InvalidArgument
from ..schemas import finance as schemas
from .reports import ReportEngine
from .store import FinanceStore

logger = logging.getLogger(__name__)


def create_budget(db: Session, user_id: str, data: schemas.BudgetCreate) -> dict:
    store = FinanceStore(db)
    store.get_category(user_id, data.category_id)

    logger.info(f"Creating budget: {data.name} ({data.amount}) for category {data.category_id}")
    budget = models.Budget(user_id=user_id, **data.model_dump())
    db.add(budget)
    db.flush()

    engine = ReportEngine(store)
    engine.refresh_spent(budget)
    db.commit()
    db.refresh(budget)
    return engine.budget_view(budget)


def list_budgets(db: Session, user_id: str) -> List[dict]:
    """All budgets, newest first, with spent/remaining/percentage."""
    return ReportEngine(FinanceStore(db)).budget_views(user_id)


def get_budget(db: Session, user_id: str, budget_id: int) -> dict:
    store = FinanceStore(db)
    return ReportEngine(store).budget_view(store.get_budget(user_id, budget_id))


def update_budget(db: Session, user_id: str, budget_id: int, data: schemas.BudgetUpdate) -> dict:
    store = FinanceStore(db)
    budget = store.get_budget(user_id, budget_id)
    if data.category_id is not None:
        store.get_category(user_id, data.category_id)

    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    start = changes.get("start_date", budget.start_date)
    end = changes.get("end_date", budget.end_date)
    if start > end:
        raise InvalidArgument("start_date must be on or before end_date")

    logger.info(f"Updating budget {budget_id}")
    for key, value in changes.items():
        setattr(budget, key, value)
    db.flush()

    engine = ReportEngine(store)
    engine.refresh_spent(budget)
    db.commit()
    db.refresh(budget)
    return engine.budget_view(budget)


def delete_budget(db: Session, user_id: str, budget_id: int) -> dict:
    budget = FinanceStore(db).get_budget(user_id, budget_id)
    logger.info(f"Deleting budget: {budget_id}")
    db.delete(budget)
    db.commit()
    return {"message": f"Budget '{budget.name}' deleted successfully"}
