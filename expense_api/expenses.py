# expense_api/expenses.py
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud
from .auth import require_user
from .config import API_PREFIX
from .db import get_db
from .grouping import current_month_window, group_by_day, month_window
from .log import log_request, logger
from .models import User
from .schemas import ExpenseCreate, ExpenseUpdate, dump_bucket, dump_expense

router = APIRouter(prefix=API_PREFIX, tags=["expenses"])

NOT_FOUND = "expense not found"


def _reply(request: Request, user: User, status_code: int, body: Dict[str, Any]) -> JSONResponse:
    log_request(request, user.id, ok=status_code < 400, status=status_code)
    return JSONResponse(status_code=status_code, content=body)


def _store_failed(request: Request, user: User, db: Session, message: str) -> JSONResponse:
    # raw store errors stay in the log, the caller only sees the generic message
    db.rollback()
    logger.exception("store operation failed", operation=message, user_id=user.id)
    return _reply(request, user, 500, {"message": message})


# ---------- Listing ----------
@router.get("/")
def list_current_month(
    request: Request,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    start, end = current_month_window(datetime.now())
    try:
        rows = crud.list_between(db, user.id, start, end, include_end=True, newest_first=True)
    except SQLAlchemyError:
        return _store_failed(request, user, db, "error get all expenses")

    if not rows:
        return _reply(request, user, 404, {"message": NOT_FOUND, "data": []})

    data = [dump_bucket(b) for b in group_by_day(rows)]
    return _reply(request, user, 200, {"message": "success get all expenses", "data": data})


@router.get("/month/{month}")
def list_month(
    month: int,
    request: Request,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        start, end = month_window(month, datetime.now().year)
    except (ValueError, OverflowError):
        # month so far out that the year is not representable: nothing can match
        return _reply(request, user, 404, {"message": NOT_FOUND, "data": []})

    try:
        rows = crud.list_between(db, user.id, start, end, include_end=False, newest_first=False)
    except SQLAlchemyError:
        return _store_failed(request, user, db, "error get all expenses")

    if not rows:
        return _reply(request, user, 404, {"message": NOT_FOUND, "data": []})

    data = [dump_expense(e) for e in rows]
    return _reply(request, user, 200, {"message": "success get all expenses", "data": data})


@router.get("/{expense_id}")
def get_expense(
    expense_id: int,
    request: Request,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        expense = crud.get_expense(db, user.id, expense_id)
    except SQLAlchemyError:
        return _store_failed(request, user, db, "error get expense by id")

    if expense is None:
        return _reply(request, user, 404, {"message": NOT_FOUND, "data": []})
    return _reply(request, user, 200, {"message": "success get expense by id", "data": dump_expense(expense)})


# ---------- Commands ----------
@router.post("/")
def create_expense(
    payload: ExpenseCreate,
    request: Request,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        if crud.find_category(db, user.id, payload.category_id) is None:
            return _reply(request, user, 400, {"message": "category not found"})
        expense = crud.create_expense(db, user.id, payload.model_dump())
    except SQLAlchemyError:
        return _store_failed(request, user, db, "error create expense")

    return _reply(request, user, 201, {"message": "success create expense", "data": dump_expense(expense)})


@router.patch("/{expense_id}")
def update_expense(
    expense_id: int,
    payload: ExpenseUpdate,
    request: Request,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    if not payload.has_changes():
        return _reply(request, user, 400, {"message": "at least one field must be filled"})

    changes = payload.changes()
    try:
        expense = crud.update_expense(db, user.id, expense_id, changes)
    except crud.CategoryNotFound:
        return _reply(request, user, 400, {"message": "category not found"})
    except SQLAlchemyError:
        return _store_failed(request, user, db, "error update expense")

    if expense is None:
        return _reply(request, user, 404, {"message": NOT_FOUND})
    return _reply(request, user, 200, {"message": "success update expense", "data": dump_expense(expense)})


@router.delete("/{expense_id}")
def delete_expense(
    expense_id: int,
    request: Request,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        expense = crud.get_expense(db, user.id, expense_id)
        if expense is None:
            return _reply(request, user, 404, {"message": NOT_FOUND})
        data = dump_expense(expense)
        crud.delete_expense(db, expense)
    except SQLAlchemyError:
        return _store_failed(request, user, db, "error delete expense")

    return _reply(request, user, 200, {"message": "success delete expense", "data": data})
