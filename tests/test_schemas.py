from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from expense_api.schemas import ExpenseCreate, ExpenseUpdate, format_validation_errors


def test_create_accepts_plain_date():
    e = ExpenseCreate(category_id=1, amount="4.20", expense_name="tea", date_of_expense="2024-03-05")
    assert e.date_of_expense == datetime(2024, 3, 5)
    assert e.amount == Decimal("4.20")


def test_create_rejects_blank_name():
    with pytest.raises(ValidationError):
        ExpenseCreate(category_id=1, amount=1, expense_name="   ", date_of_expense="2024-03-05")


def test_create_rejects_three_decimal_places():
    with pytest.raises(ValidationError):
        ExpenseCreate(category_id=1, amount="1.005", expense_name="x", date_of_expense="2024-03-05")


def test_update_changes_only_supplied_fields():
    u = ExpenseUpdate(expense_name="rent", amount=None)
    assert u.changes() == {"expense_name": "rent"}
    assert u.has_changes()


def test_update_without_fields_has_no_changes():
    assert not ExpenseUpdate().has_changes()
    assert not ExpenseUpdate.model_validate({"note": "ignored"}).has_changes()


def test_format_validation_errors_drops_location_prefix():
    errors = [
        {"loc": ("body", "amount"), "msg": "Input should be greater than or equal to 0"},
        {"loc": ("path", "month"), "msg": "Input should be a valid integer"},
        {"loc": ("body",), "msg": "Field required"},
    ]
    assert format_validation_errors(errors) == [
        {"field": "amount", "message": "Input should be greater than or equal to 0"},
        {"field": "month", "message": "Input should be a valid integer"},
        {"field": "body", "message": "Field required"},
    ]


def test_offset_timestamps_become_naive_utc():
    e = ExpenseCreate(
        category_id=1, amount=1, expense_name="x", date_of_expense="2024-03-05T01:00:00+07:00"
    )
    assert e.date_of_expense == datetime(2024, 3, 4, 18, 0)
    assert e.date_of_expense.tzinfo is None

    u = ExpenseUpdate(date_of_expense="2024-03-05T00:30:00-02:00")
    assert u.changes() == {"date_of_expense": datetime(2024, 3, 5, 2, 30)}


def test_unix_timestamp_string_is_not_treated_as_plain_date():
    e = ExpenseCreate(category_id=1, amount=1, expense_name="x", date_of_expense="1709600400")
    assert e.date_of_expense == datetime(2024, 3, 5, 1, 0)
