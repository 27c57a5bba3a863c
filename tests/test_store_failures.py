import datetime

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from fintrack import models
from fintrack.database import Base
from fintrack.schemas import finance as schemas
from fintrack.services import transactions
from fintrack.services.store import FinanceStore

from .conftest import USER_ID


def _failing_sum(self, user_id, filters):
    raise OperationalError("SELECT sum(amount)", {}, Exception("database is locked"))


@pytest.fixture
def session_factory():
    """
    Private engine whose sessions commit for real, like a request's session.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False)
    engine.dispose()


def test_failing_aggregate_aborts_monthly_report(reports, make_category, make_transaction, monkeypatch):
    food = make_category()
    make_transaction(food, 10.0, datetime.date(2024, 3, 5))
    monkeypatch.setattr(FinanceStore, "sum_amount", _failing_sum)

    with pytest.raises(OperationalError):
        reports.monthly_report(USER_ID, 2024, 3)


def test_failing_recompute_commits_nothing(session_factory, monkeypatch):
    db = session_factory()
    food = models.Category(user_id=USER_ID, name="Food", type=models.CategoryType.EXPENSE)
    db.add(food)
    db.flush()
    budget = models.Budget(
        user_id=USER_ID,
        name="Food",
        amount=100.0,
        start_date=datetime.date(2024, 1, 1),
        end_date=datetime.date(2024, 1, 31),
        spent=12.0,
        category_id=food.id,
    )
    db.add(budget)
    db.commit()
    food_id, budget_id = food.id, budget.id

    monkeypatch.setattr(FinanceStore, "sum_amount", _failing_sum)
    data = schemas.TransactionCreate(
        amount=50.0,
        type=models.TransactionType.EXPENSE,
        date=datetime.datetime(2024, 1, 10),
        category_id=food_id,
    )
    with pytest.raises(OperationalError):
        transactions.create_transaction(db, USER_ID, data)
    # get_db closes the session after a failed request
    db.close()

    check = session_factory()
    assert check.query(models.Transaction).count() == 0
    assert check.get(models.Budget, budget_id).spent == pytest.approx(12.0)
    check.close()
