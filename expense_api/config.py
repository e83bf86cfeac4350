# expense_api/config.py
import os


def _normalize_database_url(url: str) -> str:
    # hosted Postgres often hands out postgres://, SQLAlchemy wants a driver
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://") and "+psycopg" not in url and "+psycopg2" not in url:
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = _normalize_database_url(os.getenv("DATABASE_URL", "sqlite:///./local.db"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_JSON = _env_flag("LOG_JSON")

SESSION_COOKIE = os.getenv("SESSION_COOKIE", "expense_session_user_id")

API_PREFIX = "/api/expenses"
