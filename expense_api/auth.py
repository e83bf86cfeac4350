# expense_api/auth.py
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .config import SESSION_COOKIE
from .db import get_db
from .models import User


class NotAuthenticated(Exception):
    """No usable session on the request."""


def get_current_user_id(request: Request) -> Optional[int]:
    v = request.cookies.get(SESSION_COOKIE)
    if not v:
        return None
    try:
        return int(v)
    except ValueError:
        return None


def require_user(request: Request, db: Session = Depends(get_db)) -> User:
    user_id = get_current_user_id(request)
    if user_id is None:
        raise NotAuthenticated()
    user = db.get(User, user_id)
    if user is None:
        raise NotAuthenticated()
    request.state.user_id = user.id
    return user
