# services/reports.py
"""Budget aggregation and reporting.

All figures are recomputed from transactions on every call. The only write
here is ``refresh_spent``, which stores a recomputed total in the budget's
cached ``spent`` column; readers that need authoritative spend should call
``ReportEngine.spent`` instead of trusting that column.
"""

import calendar
import logging
from datetime import MAXYEAR, MINYEAR, date, datetime, time
from typing import Iterable, List, Optional, Tuple

from .. import models
from ..errors import InvalidArgument
from ..schemas import finance as schemas
from ..schemas import report as report_schemas
from .store import FinanceStore, TransactionFilter

logger = logging.getLogger(__name__)

DEFAULT_ALERT_THRESHOLD = 80.0
DEFAULT_TREND_MONTHS = 6
RECENT_TRANSACTIONS = 10


def day_start(d: date) -> datetime:
    return datetime.combine(d, time.min)


def day_end(d: date) -> datetime:
    return datetime.combine(d, time.max)


def month_window(year: int, month: int) -> Tuple[datetime, datetime]:
    """First and last instant of a calendar month."""
    if not 1 <= month <= 12:
        raise InvalidArgument(f"Invalid month: {month}")
    if not MINYEAR <= year <= MAXYEAR:
        raise InvalidArgument(f"Invalid year: {year}")
    last_day = calendar.monthrange(year, month)[1]
    return day_start(date(year, month, 1)), day_end(date(year, month, last_day))


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move ``delta`` calendar months from (year, month), borrowing across years."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def spend_percentage(spent: float, amount: float) -> Optional[float]:
    """Share of the limit consumed; None when a zero limit has any spend."""
    if amount:
        return spent / amount * 100
    return 0.0 if spent == 0 else None


def budget_status(percentage: Optional[float], alert_threshold: Optional[float]) -> str:
    threshold = DEFAULT_ALERT_THRESHOLD if alert_threshold is None else alert_threshold
    if percentage is None or percentage >= 100:
        return "exceeded"
    if percentage >= threshold:
        return "warning"
    return "good"


def _dump_transactions(transactions: Iterable[models.Transaction]) -> List[dict]:
    return [schemas.Transaction.model_validate(t).model_dump() for t in transactions]


def date_filter(start: Optional[date], end: Optional[date], **kwargs) -> TransactionFilter:
    if start is not None and end is not None and start > end:
        raise InvalidArgument("start_date must be on or before end_date")
    return TransactionFilter(
        date_from=day_start(start) if start is not None else None,
        date_to=day_end(end) if end is not None else None,
        **kwargs,
    )


class ReportEngine:
    """Read-side computations over one user's transactions, budgets and categories."""

    def __init__(self, store: FinanceStore):
        self.store = store

    # ---------- spend aggregation ----------

    def spent(self, user_id: str, category_id: int, start: date, end: date) -> float:
        """Total EXPENSE amount for a category over an inclusive date window."""
        filters = date_filter(start, end, category_id=category_id, type=models.TransactionType.EXPENSE)
        return self.store.sum_amount(user_id, filters)

    def _income_and_expense(self, user_id: str, filters: TransactionFilter) -> Tuple[float, float]:
        income = self.store.sum_amount(user_id, filters.with_type(models.TransactionType.INCOME))
        expense = self.store.sum_amount(user_id, filters.with_type(models.TransactionType.EXPENSE))
        return income, expense

    def refresh_spent(self, budget: models.Budget) -> float:
        """Recompute a budget's spend and overwrite its cached value."""
        spent = self.spent(budget.user_id, budget.category_id, budget.start_date, budget.end_date)
        self.store.update_budget_spent(budget, spent)
        return spent

    # ---------- budget views ----------

    def budget_view(self, budget: models.Budget) -> dict:
        spent = self.spent(budget.user_id, budget.category_id, budget.start_date, budget.end_date)
        view = schemas.Budget.model_validate(budget).model_dump()
        view.update(
            spent=spent,
            remaining=budget.amount - spent,
            percentage=spend_percentage(spent, budget.amount),
        )
        return view

    def budget_views(self, user_id: str) -> List[dict]:
        return [self.budget_view(b) for b in self.store.list_budgets(user_id)]

    def budget_report(self, user_id: str) -> List[dict]:
        """Every budget with its spend classified as good, warning or exceeded."""
        logger.debug(f"Building budget report for {user_id}")
        report = []
        for budget in self.store.list_budgets(user_id):
            spent = self.spent(user_id, budget.category_id, budget.start_date, budget.end_date)
            percentage = spend_percentage(spent, budget.amount)
            report.append({
                "budget": schemas.Budget.model_validate(budget).model_dump(),
                "spent": spent,
                "remaining": budget.amount - spent,
                "percentage": percentage,
                "status": budget_status(percentage, budget.alert_threshold),
            })
        return report

    # ---------- period reports ----------

    def monthly_report(self, user_id: str, year: int, month: int) -> dict:
        start, end = month_window(year, month)
        logger.debug(f"Building monthly report for {user_id} ({year}-{month:02d})")
        window = TransactionFilter(date_from=start, date_to=end)

        income, expense = self._income_and_expense(user_id, window)
        transactions = self.store.list_transactions(user_id, window)
        breakdown = self.category_breakdown(user_id, start, end)

        return {
            "period": {"year": year, "month": month, "start_date": start, "end_date": end},
            "summary": {
                "total_income": income,
                "total_expense": expense,
                "balance": income - expense,
                "transaction_count": len(transactions),
            },
            "category_breakdown": breakdown,
            "transactions": _dump_transactions(transactions),
        }

    def category_breakdown(self, user_id: str, start: datetime, end: datetime) -> List[dict]:
        """Per-category totals for a window; categories without activity are left out."""
        breakdown = []
        for category in self.store.list_categories(user_id):
            window = TransactionFilter(category_id=category.id, date_from=start, date_to=end)
            count = self.store.count_transactions(user_id, window)
            if count == 0:
                continue
            income, expense = self._income_and_expense(user_id, window)
            breakdown.append({
                "category": schemas.CategorySummary.model_validate(category).model_dump(),
                "income": income,
                "expense": expense,
                "transaction_count": count,
            })
        return breakdown

    def trend_report(
        self,
        user_id: str,
        months: int = DEFAULT_TREND_MONTHS,
        today: Optional[date] = None,
    ) -> List[dict]:
        """Income, expense and balance for the last ``months`` months, oldest first."""
        if months < 1:
            raise InvalidArgument("months must be at least 1")
        today = today or date.today()
        trend = []
        for offset in range(months - 1, -1, -1):
            year, month = shift_month(today.year, today.month, -offset)
            start, end = month_window(year, month)
            income, expense = self._income_and_expense(
                user_id, TransactionFilter(date_from=start, date_to=end)
            )
            trend.append({
                "year": year,
                "month": month,
                "income": income,
                "expense": expense,
                "balance": income - expense,
            })
        return trend

    def category_report(
        self,
        user_id: str,
        category_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> dict:
        category = self.store.get_category(user_id, category_id)
        filters = date_filter(start, end, category_id=category_id)

        transactions = self.store.list_transactions(user_id, filters)
        income, expense = self._income_and_expense(user_id, filters)

        return {
            "category": report_schemas.CategoryWithBudgets.model_validate(category).model_dump(),
            "summary": {
                "total_income": income,
                "total_expense": expense,
                "transaction_count": len(transactions),
            },
            "transactions": _dump_transactions(transactions),
        }

    def transaction_stats(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> dict:
        filters = date_filter(start, end)
        income, expense = self._income_and_expense(user_id, filters)
        recent = self.store.list_transactions(user_id, filters, limit=RECENT_TRANSACTIONS)
        return {
            "total_income": income,
            "total_expense": expense,
            "balance": income - expense,
            "recent_transactions": _dump_transactions(recent),
        }
