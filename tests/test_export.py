import csv
import datetime
import io

import pytest

from fintrack.services import export

from .conftest import OTHER_USER_ID, USER_ID


def _rows(text):
    return list(csv.reader(io.StringIO(text)))


def test_transactions_csv(session, make_category, make_transaction):
    food = make_category("Food")
    make_transaction(food, 12.5, datetime.date(2024, 1, 2), description="Lunch, with tip")
    make_transaction(food, 3.0, datetime.date(2024, 1, 3))
    make_transaction(food, 99.0, datetime.date(2024, 1, 3), user_id=OTHER_USER_ID)

    payload = export.export_transactions(session, USER_ID, "csv")

    assert payload["format"] == "csv"
    assert payload["count"] == 2
    rows = _rows(payload["data"])
    assert rows[0] == export.TRANSACTION_HEADERS
    assert rows[1][1:6] == ["2024-01-03", "EXPENSE", "Food", "3.0", ""]
    assert rows[2][1:6] == ["2024-01-02", "EXPENSE", "Food", "12.5", "Lunch, with tip"]


def test_transactions_json_respects_filters(session, make_category, make_transaction):
    food = make_category("Food")
    rent = make_category("Rent")
    make_transaction(food, 1.0, datetime.date(2024, 1, 1))
    make_transaction(rent, 2.0, datetime.date(2024, 1, 2))

    payload = export.export_transactions(session, USER_ID, "json", category_id=rent.id)

    assert payload["format"] == "json"
    assert payload["count"] == 1
    assert payload["data"][0]["amount"] == 2.0
    assert payload["data"][0]["category"]["name"] == "Rent"


def test_budgets_csv(session, make_category, make_transaction, make_budget):
    food = make_category("Food")
    make_budget(food, amount=200.0, name="Eating")
    make_transaction(food, 50.0, datetime.date(2024, 1, 10))

    payload = export.export_budgets(session, USER_ID, "csv")

    rows = _rows(payload["data"])
    assert rows[0] == export.BUDGET_HEADERS
    assert rows[1][1:] == ["Eating", "Food", "200.0", "50.0", "150.0", "MONTH", "2024-01-01", "2024-01-31"]


def test_categories_csv(session, make_category, make_transaction):
    food = make_category("Food")
    make_category("Groceries", parent=food)
    make_transaction(food, 1.0, datetime.date(2024, 1, 1))

    payload = export.export_categories(session, USER_ID, "csv")

    assert payload["count"] == 2
    by_name = {row[1]: row for row in _rows(payload["data"])[1:]}
    assert by_name["Groceries"][3] == "Food"
    assert by_name["Food"][6:] == ["1", "0"]


def test_empty_csv_has_header_only(session):
    payload = export.export_budgets(session, USER_ID, "csv")
    assert payload["count"] == 0
    assert _rows(payload["data"]) == [export.BUDGET_HEADERS]


def test_full_export(session, make_category, make_transaction, make_budget):
    food = make_category()
    make_budget(food)
    make_transaction(food, 5.0, datetime.date(2024, 1, 1))
    make_transaction(food, 6.0, datetime.date(2024, 1, 2))

    payload = export.export_full(session, USER_ID, "alice@example.com")

    assert payload["user"]["id"] == USER_ID
    assert payload["user"]["email"] == "alice@example.com"
    assert payload["stats"] == {"transaction_count": 2, "budget_count": 1, "category_count": 1}
    assert len(payload["data"]["transactions"]) == 2
    assert payload["data"]["categories"][0]["name"] == "Food"
    assert datetime.datetime.fromisoformat(payload["export_date"])


@pytest.mark.parametrize("headers, rows, expected", [
    (["A", "B"], [], "A,B\n"),
    (["A"], [["x\"y"]], "A\n\"x\"\"y\"\n"),
])
def test_to_csv_quoting(headers, rows, expected):
    assert export.to_csv(headers, rows) == expected
