import os

# Must be set before fintrack.database is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker

from fintrack import models
from fintrack.auth import get_current_user, get_token_claims
from fintrack.database import Base
from fintrack.dependencies import get_db
from fintrack.main import app
from fintrack.services.reports import ReportEngine
from fintrack.services.store import FinanceStore

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture(scope="module")
def engine():
    """
    In-memory SQLite engine shared by the TestClient threads.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture(scope="function")
def session(engine):
    """
    Opens a transaction before each test and rolls it back afterwards.
    """
    connection = engine.connect()
    trans = connection.begin()
    Session = sessionmaker(bind=connection, autoflush=False)
    session = Session()
    yield session
    session.close()
    trans.rollback()
    connection.close()


@pytest.fixture
def reports(session):
    return ReportEngine(FinanceStore(session))


@pytest.fixture
def client(session):
    claims = {"sub": USER_ID, "email": "Alice@Example.com", "name": "Alice"}
    app.dependency_overrides[get_db] = lambda: session
    app.dependency_overrides[get_token_claims] = lambda: claims
    app.dependency_overrides[get_current_user] = lambda: USER_ID
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_category(session):
    def make(name="Food", type_=models.CategoryType.EXPENSE, user_id=USER_ID, parent=None):
        category = models.Category(
            name=name,
            type=type_,
            user_id=user_id,
            parent_id=parent.id if parent else None,
        )
        session.add(category)
        session.flush()
        return category
    return make


@pytest.fixture
def make_transaction(session):
    def make(category, amount, when, type_=models.TransactionType.EXPENSE, user_id=None, description=None):
        if isinstance(when, datetime.date) and not isinstance(when, datetime.datetime):
            when = datetime.datetime.combine(when, datetime.time(12, 0))
        transaction = models.Transaction(
            amount=amount,
            type=type_,
            date=when,
            description=description,
            category_id=category.id,
            user_id=user_id or category.user_id,
        )
        session.add(transaction)
        session.flush()
        return transaction
    return make


@pytest.fixture
def make_budget(session):
    def make(category, amount=1000.0, start=datetime.date(2024, 1, 1), end=datetime.date(2024, 1, 31),
             alert_threshold=80.0, name="Monthly"):
        budget = models.Budget(
            name=name,
            amount=amount,
            period=models.BudgetPeriod.MONTH,
            start_date=start,
            end_date=end,
            alert_threshold=alert_threshold,
            category_id=category.id,
            user_id=category.user_id,
        )
        session.add(budget)
        session.flush()
        return budget
    return make
