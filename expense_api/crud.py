# expense_api/crud.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select, or_, desc, asc
from sqlalchemy.orm import Session

from .models import Category, Expense


class CategoryNotFound(Exception):
    """Category missing or not visible to the expense owner."""


# ---------- Authorization policies ----------
def owner_only(user_id: int):
    return Expense.user_id == user_id


def owner_or_global_category(user_id: int):
    # also matches other users' expenses filed under a global category
    return or_(
        Expense.user_id == user_id,
        Expense.category.has(Category.created_by.is_(None)),
    )


def visible_category(user_id: int):
    return or_(Category.created_by == user_id, Category.created_by.is_(None))


# ---------- Queries ----------
def list_between(
    db: Session,
    user_id: int,
    start: datetime,
    end: datetime,
    include_end: bool = False,
    newest_first: bool = True,
) -> List[Expense]:
    upper = Expense.date_of_expense <= end if include_end else Expense.date_of_expense < end
    order = desc(Expense.date_of_expense) if newest_first else asc(Expense.date_of_expense)

    q = (
        select(Expense)
        .where(owner_only(user_id))
        .where(Expense.date_of_expense >= start, upper)
        .order_by(order, Expense.id)
    )
    return list(db.execute(q).scalars().all())


def get_expense(db: Session, user_id: int, expense_id: int) -> Optional[Expense]:
    q = select(Expense).where(Expense.id == expense_id, owner_only(user_id))
    return db.execute(q).scalar_one_or_none()


def find_category(db: Session, user_id: int, category_id: int) -> Optional[Category]:
    q = select(Category).where(Category.id == category_id, visible_category(user_id))
    return db.execute(q).scalar_one_or_none()


# ---------- Commands ----------
def create_expense(db: Session, user_id: int, fields: Dict[str, Any]) -> Expense:
    obj = Expense(user_id=user_id, **fields)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def update_expense(
    db: Session, user_id: int, expense_id: int, changes: Dict[str, Any]
) -> Optional[Expense]:
    q = select(Expense).where(Expense.id == expense_id, owner_or_global_category(user_id))
    obj = db.execute(q).scalar_one_or_none()
    if obj is None:
        return None

    # visibility follows the expense owner, who may not be the caller
    if "category_id" in changes and find_category(db, obj.user_id, changes["category_id"]) is None:
        raise CategoryNotFound(changes["category_id"])

    for k, v in changes.items():
        setattr(obj, k, v)
    obj.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(obj)
    return obj


def delete_expense(db: Session, obj: Expense) -> None:
    # hard delete, no tombstone
    db.delete(obj)
    db.commit()
