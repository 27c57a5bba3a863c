# models/finance.py
"""SQLAlchemy models for personal finance tracking."""

import enum
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, Date, Boolean, Enum
from sqlalchemy.orm import relationship
from ..database import Base


def utc_now():
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


class CategoryType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


# Transactions share the category vocabulary but are not tied to their category's type
TransactionType = CategoryType


class BudgetPeriod(str, enum.Enum):
    WEEK = "WEEK"
    MONTH = "MONTH"
    YEAR = "YEAR"


class User(Base):
    """Profile of an authenticated user; the id is the token subject."""
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=True, index=True)
    name = Column(String, nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)


class Category(Base):
    """Income or expense category (e.g., 'Groceries', 'Salary'), optionally nested once."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    icon = Column(String, nullable=True)
    color = Column(String, nullable=True)
    type = Column(Enum(CategoryType, name="category_type"), nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    parent = relationship("Category", remote_side=[id], back_populates="children")
    children = relationship("Category", back_populates="parent")
    transactions = relationship("Transaction", back_populates="category")
    budgets = relationship("Budget", back_populates="category")


class Transaction(Base):
    """Individual income or expense entry."""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    type = Column(Enum(TransactionType, name="transaction_type"), nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    description = Column(String, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    category = relationship("Category", back_populates="transactions")


class Budget(Base):
    """Spending limit for one category over an inclusive date window."""
    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    period = Column(Enum(BudgetPeriod, name="budget_period"), nullable=False, default=BudgetPeriod.MONTH)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    alert_threshold = Column(Float, nullable=True, default=80.0)
    # Cached sum of matching expenses; refreshed after transaction writes, may lag under concurrent writes
    spent = Column(Float, nullable=False, default=0.0)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    category = relationship("Category", back_populates="budgets")
