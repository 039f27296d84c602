from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ledger_metrics.db.core import AccountDB, AccountType, Base, CategoryDB, CategoryType, UserDB, get_db
from ledger_metrics.main import app


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = testing_session()
    session.add(UserDB(id=1, email="saver@example.com", username="saver"))
    session.commit()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def checking(db):
    account = AccountDB(
        user_id=1,
        account_name="Checking",
        account_type=AccountType.CHECKING,
        initial_balance=Decimal("1000.00"),
        balance=Decimal("1000.00"),
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


@pytest.fixture
def groceries(db):
    category = CategoryDB(user_id=1, name="Groceries", category_type=CategoryType.EXPENSE)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def make_transaction(amount, transaction_type, transaction_date=date(2024, 3, 15), **extra):
    """Plain record carrying the attributes the metric functions read."""
    fields = {
        "id": None,
        "amount": Decimal(str(amount)),
        "transaction_type": transaction_type,
        "transaction_date": transaction_date,
        "category_id": None,
        "category": None,
        "description": None,
        "is_recurring": False,
    }
    fields.update(extra)
    return SimpleNamespace(**fields)
