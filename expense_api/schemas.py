# expense_api/schemas.py
from __future__ import annotations

import re
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .grouping import DayBucket


# ---------- Requests ----------
PLAIN_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _widen_date(v):
    # "YYYY-MM-DD" means midnight of that day
    if isinstance(v, str) and PLAIN_DATE.match(v.strip()):
        return v.strip() + "T00:00:00"
    return v


def _as_utc_naive(v):
    # the column has no zone; offsets are folded into UTC before storing
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


class ExpenseCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    category_id: int
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    expense_name: str = Field(..., min_length=1, max_length=200)
    date_of_expense: datetime

    @field_validator("expense_name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("date_of_expense", mode="before")
    @classmethod
    def accept_plain_date(cls, v):
        return _widen_date(v)

    @field_validator("date_of_expense")
    @classmethod
    def drop_offset(cls, v):
        return _as_utc_naive(v)


class ExpenseUpdate(BaseModel):
    """Partial update: every field may be left out independently."""

    model_config = ConfigDict(extra="ignore")

    category_id: Optional[int] = None
    amount: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    expense_name: Optional[str] = Field(None, min_length=1, max_length=200)
    date_of_expense: Optional[datetime] = None

    @field_validator("expense_name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("date_of_expense", mode="before")
    @classmethod
    def accept_plain_date(cls, v):
        return _widen_date(v)

    @field_validator("date_of_expense")
    @classmethod
    def drop_offset(cls, v):
        return _as_utc_naive(v)

    def changes(self) -> Dict[str, Any]:
        # explicit nulls count as "not supplied"
        return {
            k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None
        }

    def has_changes(self) -> bool:
        return bool(self.changes())


# ---------- Responses ----------
class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_by: Optional[int] = None


class ExpenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    category_id: int
    category: Optional[CategoryOut] = None
    amount: float
    expense_name: str
    date_of_expense: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DayBucketOut(BaseModel):
    date_of_expenses: date
    total_expense: float
    data_expenses: List[ExpenseOut]


def dump_expense(expense) -> Dict[str, Any]:
    return ExpenseOut.model_validate(expense).model_dump(mode="json")


def dump_bucket(bucket: DayBucket) -> Dict[str, Any]:
    return DayBucketOut(
        date_of_expenses=bucket.day,
        total_expense=float(bucket.total),
        data_expenses=[ExpenseOut.model_validate(r) for r in bucket.records],
    ).model_dump(mode="json")


def format_validation_errors(errors) -> List[Dict[str, str]]:
    """Flatten pydantic/FastAPI error dicts into ``{field, message}`` items."""
    out: List[Dict[str, str]] = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query")]
        out.append({"field": ".".join(loc) or "body", "message": err.get("msg", "invalid value")})
    return out
