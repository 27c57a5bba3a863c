# controllers/reports.py
"""Report endpoints: monthly summary, trend, budget status, per-category."""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..dependencies import get_db
from ..schemas import report as schemas
from ..services.reports import DEFAULT_TREND_MONTHS, ReportEngine
from ..services.store import FinanceStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_engine(db: Session = Depends(get_db)) -> ReportEngine:
    return ReportEngine(FinanceStore(db))


@router.get("/monthly", response_model=schemas.MonthlyReport, summary="Monthly summary")
def monthly_report(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    engine: ReportEngine = Depends(get_engine),
    current_user: str = Depends(get_current_user)
):
    """Totals, category breakdown and transactions for a calendar month (default: current)."""
    today = date.today()
    return engine.monthly_report(
        current_user,
        year if year is not None else today.year,
        month if month is not None else today.month,
    )


@router.get("/trend", response_model=List[schemas.TrendPoint], summary="Monthly trend")
def trend_report(
    months: int = Query(DEFAULT_TREND_MONTHS, ge=1, le=120),
    engine: ReportEngine = Depends(get_engine),
    current_user: str = Depends(get_current_user)
):
    """Income, expense and balance per month for the last N months, oldest first."""
    return engine.trend_report(current_user, months)


@router.get("/budget", response_model=List[schemas.BudgetStatus], summary="Budget vs actual")
def budget_report(
    engine: ReportEngine = Depends(get_engine),
    current_user: str = Depends(get_current_user)
):
    return engine.budget_report(current_user)


@router.get("/category/{category_id}", response_model=schemas.CategoryReport, summary="Category report")
def category_report(
    category_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    engine: ReportEngine = Depends(get_engine),
    current_user: str = Depends(get_current_user)
):
    logger.debug(f"Category report {category_id} ({start_date}..{end_date})")
    return engine.category_report(current_user, category_id, start_date, end_date)
