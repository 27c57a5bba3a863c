import datetime

import pytest

from fintrack import models
from fintrack.errors import InvalidArgument, NotFound
from fintrack.schemas import finance as schemas
from fintrack.services import transactions as service

from .conftest import OTHER_USER_ID, USER_ID

INCOME = models.TransactionType.INCOME
EXPENSE = models.TransactionType.EXPENSE


def _create(session, category, amount, when, type_=EXPENSE):
    return service.create_transaction(
        session,
        USER_ID,
        schemas.TransactionCreate(amount=amount, type=type_, date=when, category_id=category.id),
    )


def test_create_refreshes_budget_spent(session, make_category, make_budget):
    food = make_category()
    january = make_budget(food, name="January")
    february = make_budget(food, start=datetime.date(2024, 2, 1), end=datetime.date(2024, 2, 29), name="February")

    _create(session, food, 40.0, datetime.datetime(2024, 1, 10, 9, 0))
    _create(session, food, 60.0, datetime.datetime(2024, 1, 31, 22, 0))

    session.refresh(january)
    session.refresh(february)
    assert january.spent == pytest.approx(100.0)
    assert february.spent == 0


def test_income_leaves_budget_spent_alone(session, make_category, make_budget):
    food = make_category()
    budget = make_budget(food)
    _create(session, food, 500.0, datetime.datetime(2024, 1, 10), type_=INCOME)
    session.refresh(budget)
    assert budget.spent == 0


def test_update_moves_spend_between_budgets(session, make_category, make_budget):
    food = make_category("Food")
    rent = make_category("Rent")
    food_budget = make_budget(food, name="Food")
    rent_budget = make_budget(rent, name="Rent")

    tx = _create(session, food, 80.0, datetime.datetime(2024, 1, 10))
    service.update_transaction(session, USER_ID, tx.id, schemas.TransactionUpdate(category_id=rent.id, amount=90.0))

    session.refresh(food_budget)
    session.refresh(rent_budget)
    assert food_budget.spent == 0
    assert rent_budget.spent == pytest.approx(90.0)


def test_update_out_of_window_and_to_income(session, make_category, make_budget):
    food = make_category()
    budget = make_budget(food)
    tx = _create(session, food, 30.0, datetime.datetime(2024, 1, 10))

    service.update_transaction(session, USER_ID, tx.id, schemas.TransactionUpdate(date=datetime.datetime(2024, 3, 1)))
    session.refresh(budget)
    assert budget.spent == 0

    service.update_transaction(session, USER_ID, tx.id, schemas.TransactionUpdate(date=datetime.datetime(2024, 1, 2)))
    session.refresh(budget)
    assert budget.spent == pytest.approx(30.0)

    service.update_transaction(session, USER_ID, tx.id, schemas.TransactionUpdate(type=INCOME))
    session.refresh(budget)
    assert budget.spent == 0


def test_delete_refreshes_budget_spent(session, make_category, make_budget):
    food = make_category()
    budget = make_budget(food)
    keep = _create(session, food, 20.0, datetime.datetime(2024, 1, 5))
    drop = _create(session, food, 35.0, datetime.datetime(2024, 1, 6))

    result = service.delete_transaction(session, USER_ID, drop.id)

    assert result == {"message": "Transaction deleted successfully"}
    session.refresh(budget)
    assert budget.spent == pytest.approx(20.0)
    assert service.get_transaction(session, USER_ID, keep.id).amount == pytest.approx(20.0)
    with pytest.raises(NotFound):
        service.get_transaction(session, USER_ID, drop.id)


def test_create_in_foreign_category_is_not_found(session, make_category):
    theirs = make_category(user_id=OTHER_USER_ID)
    with pytest.raises(NotFound):
        _create(session, theirs, 10.0, datetime.datetime(2024, 1, 1))
    assert session.query(models.Transaction).count() == 0


def test_transaction_type_may_differ_from_category_type(session, make_category):
    salary = make_category("Salary", type_=models.CategoryType.INCOME)
    tx = _create(session, salary, 15.0, datetime.datetime(2024, 1, 1), type_=EXPENSE)
    assert tx.type == EXPENSE
    assert tx.category_id == salary.id


def test_aware_dates_are_stored_as_utc():
    offset = datetime.timezone(datetime.timedelta(hours=2))
    data = schemas.TransactionCreate(
        amount=1.0, type=EXPENSE, date=datetime.datetime(2024, 1, 1, 1, 0, tzinfo=offset), category_id=1
    )
    assert data.date == datetime.datetime(2023, 12, 31, 23, 0)


def test_negative_amount_is_rejected():
    with pytest.raises(ValueError):
        schemas.TransactionCreate(amount=-1.0, type=EXPENSE, date=datetime.datetime(2024, 1, 1), category_id=1)


def test_list_filters(session, make_category, make_transaction):
    food = make_category("Food")
    rent = make_category("Rent")
    make_transaction(food, 1.0, datetime.date(2024, 1, 1))
    make_transaction(food, 2.0, datetime.date(2024, 1, 15), type_=INCOME)
    make_transaction(rent, 3.0, datetime.date(2024, 2, 1))
    make_transaction(rent, 4.0, datetime.date(2024, 1, 20), user_id=OTHER_USER_ID)

    def amounts(transactions):
        return [t.amount for t in transactions]

    assert amounts(service.list_transactions(session, USER_ID)) == [3.0, 2.0, 1.0]
    assert amounts(service.list_transactions(session, USER_ID, type_=INCOME)) == [2.0]
    assert amounts(service.list_transactions(session, USER_ID, category_id=rent.id)) == [3.0]
    assert amounts(service.list_transactions(
        session, USER_ID, start=datetime.date(2024, 1, 15), end=datetime.date(2024, 1, 31)
    )) == [2.0]

    with pytest.raises(InvalidArgument):
        service.list_transactions(session, USER_ID, start=datetime.date(2024, 2, 1), end=datetime.date(2024, 1, 1))
