from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from expense_api.config import SESSION_COOKIE
from expense_api.db import Base, get_db
from expense_api.main import app
from expense_api.models import Category, Expense, User


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield factory
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def alice(db):
    u = User(username="alice")
    db.add(u)
    db.commit()
    return u


@pytest.fixture
def bob(db):
    u = User(username="bob")
    db.add(u)
    db.commit()
    return u


@pytest.fixture
def global_category(db):
    c = Category(name="Food", created_by=None)
    db.add(c)
    db.commit()
    return c


@pytest.fixture
def alice_category(db, alice):
    c = Category(name="Alice hobby", created_by=alice.id)
    db.add(c)
    db.commit()
    return c


@pytest.fixture
def bob_category(db, bob):
    c = Category(name="Bob hobby", created_by=bob.id)
    db.add(c)
    db.commit()
    return c


@pytest.fixture
def add_expense(db):
    def _add(user, category, when: datetime, amount="10.00", name="coffee"):
        e = Expense(
            user_id=user.id,
            category_id=category.id,
            amount=Decimal(amount),
            expense_name=name,
            date_of_expense=when,
        )
        db.add(e)
        db.commit()
        return e

    return _add


def make_client(user=None) -> TestClient:
    client = TestClient(app)
    if user is not None:
        client.cookies.set(SESSION_COOKIE, str(user.id))
    return client


@pytest.fixture
def client_for(session_factory):
    return make_client
