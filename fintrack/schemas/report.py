from pydantic import BaseModel
from datetime import datetime
from typing import Any, List, Literal, Optional

from .finance import Budget, CategorySummary, Transaction


class Period(BaseModel):
    year: int
    month: int
    start_date: datetime
    end_date: datetime


class MonthlySummary(BaseModel):
    total_income: float
    total_expense: float
    balance: float
    transaction_count: int


class CategoryBreakdownItem(BaseModel):
    category: CategorySummary
    income: float
    expense: float
    transaction_count: int


class MonthlyReport(BaseModel):
    period: Period
    summary: MonthlySummary
    category_breakdown: List[CategoryBreakdownItem]
    transactions: List[Transaction]


class BudgetStatus(BaseModel):
    budget: Budget
    spent: float
    remaining: float
    percentage: Optional[float] = None
    status: Literal["good", "warning", "exceeded"]


class TrendPoint(BaseModel):
    year: int
    month: int
    income: float
    expense: float
    balance: float


class CategoryWithBudgets(CategorySummary):
    budgets: List[Budget] = []


class CategorySummaryTotals(BaseModel):
    total_income: float
    total_expense: float
    transaction_count: int


class CategoryReport(BaseModel):
    category: CategoryWithBudgets
    summary: CategorySummaryTotals
    transactions: List[Transaction]


class TransactionStats(BaseModel):
    total_income: float
    total_expense: float
    balance: float
    recent_transactions: List[Transaction]


class ExportPayload(BaseModel):
    format: Literal["json", "csv"]
    data: Any
    count: int
