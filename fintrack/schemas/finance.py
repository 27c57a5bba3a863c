from pydantic import BaseModel, ConfigDict, EmailStr, field_validator, model_validator
from datetime import date, datetime, timezone
from typing import List, Optional

from ..models import BudgetPeriod, CategoryType, TransactionType


def _non_negative(v: Optional[float], label: str) -> Optional[float]:
    if v is not None and v < 0:
        raise ValueError(f'{label} must be non-negative')
    return v


def _naive_utc(v: Optional[datetime]) -> Optional[datetime]:
    # Transaction dates are stored as naive UTC
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


# ============= CATEGORIES =============

class CategoryBase(BaseModel):
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None
    type: CategoryType


class CategoryCreate(CategoryBase):
    parent_id: Optional[int] = None


class CategoryUpdate(BaseModel):
    """Schema for updating an existing category."""
    name: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    type: Optional[CategoryType] = None
    parent_id: Optional[int] = None


class CategorySummary(CategoryBase):
    id: int
    parent_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Category(CategorySummary):
    parent: Optional[CategorySummary] = None
    children: List[CategorySummary] = []
    transaction_count: int = 0
    budget_count: int = 0


# ============= TRANSACTIONS =============

class TransactionBase(BaseModel):
    amount: float
    type: TransactionType
    date: datetime
    description: Optional[str] = None

    @field_validator('amount')
    @classmethod
    def amount_must_be_positive(cls, v: float) -> float:
        return _non_negative(v, 'Amount')

    @field_validator('date')
    @classmethod
    def date_to_naive_utc(cls, v: datetime) -> datetime:
        return _naive_utc(v)


class TransactionCreate(TransactionBase):
    category_id: int


class TransactionUpdate(BaseModel):
    amount: Optional[float] = None
    type: Optional[TransactionType] = None
    date: Optional[datetime] = None
    description: Optional[str] = None
    category_id: Optional[int] = None

    @field_validator('amount')
    @classmethod
    def amount_must_be_positive(cls, v: Optional[float]) -> Optional[float]:
        return _non_negative(v, 'Amount')

    @field_validator('date')
    @classmethod
    def date_to_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _naive_utc(v)


class Transaction(TransactionBase):
    id: int
    category_id: int
    created_at: Optional[datetime] = None
    category: Optional[CategorySummary] = None

    model_config = ConfigDict(from_attributes=True)


# ============= BUDGETS =============

class BudgetBase(BaseModel):
    name: str
    amount: float
    period: BudgetPeriod = BudgetPeriod.MONTH
    start_date: date
    end_date: date
    alert_threshold: Optional[float] = 80.0

    @field_validator('amount', 'alert_threshold')
    @classmethod
    def must_be_positive(cls, v: Optional[float]) -> Optional[float]:
        return _non_negative(v, 'Value')

    @model_validator(mode='after')
    def window_must_be_ordered(self):
        if self.start_date > self.end_date:
            raise ValueError('start_date must be on or before end_date')
        return self


class BudgetCreate(BudgetBase):
    category_id: int


class BudgetUpdate(BaseModel):
    name: Optional[str] = None
    amount: Optional[float] = None
    period: Optional[BudgetPeriod] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    alert_threshold: Optional[float] = None
    category_id: Optional[int] = None

    @field_validator('amount', 'alert_threshold')
    @classmethod
    def must_be_positive(cls, v: Optional[float]) -> Optional[float]:
        return _non_negative(v, 'Value')


class Budget(BaseModel):
    id: int
    name: str
    amount: float
    period: BudgetPeriod
    start_date: date
    end_date: date
    alert_threshold: Optional[float] = None
    spent: float = 0.0
    category_id: int
    created_at: Optional[datetime] = None
    category: Optional[CategorySummary] = None

    model_config = ConfigDict(from_attributes=True)


class BudgetView(Budget):
    """Budget with spend recomputed from transactions at read time."""
    remaining: float
    # None when amount is 0 and something was spent
    percentage: Optional[float] = None


# ============= USERS =============

class UserProfile(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    is_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None


class UserStats(BaseModel):
    transaction_count: int
    category_count: int
    budget_count: int
