"""Shared test fixtures."""

import os

# Keep the module-level engine and Redis client away from real services
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("CACHE_ENABLED", "false")

import pytest
import fakeredis
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import date
from decimal import Decimal
import uuid

from capital.cache import Cache
from capital.database import Base
from capital.dependencies import get_cache, get_db, get_today
from capital.main import app
from capital.models.account import Account, AccountHistory, AccountType
from capital.models.budget import BudgetCategory, BudgetGoal
from capital.models.transaction import Transaction, TransactionType

TODAY = date(2024, 6, 15)
USER_ID = "local"


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def redis_client():
    """In-process Redis double."""
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def cache(redis_client):
    return Cache(redis_client)


@pytest.fixture(scope="function")
def client(db_session, cache):
    """Create a test client with database, cache and clock overrides."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_account(db_session):
    """Create a checking account with two balance snapshots."""
    account = Account(
        id=str(uuid.uuid4()),
        user_id=USER_ID,
        name="Test Checking",
        account_type=AccountType.checking,
        account_order=0,
    )
    account.history = [
        AccountHistory(balance=Decimal("500.00"), last_updated=date(2024, 6, 1)),
        AccountHistory(balance=Decimal("450.00"), last_updated=date(2024, 1, 1)),
    ]
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def sample_liability(db_session):
    """Create a credit card account."""
    account = Account(
        id=str(uuid.uuid4()),
        user_id=USER_ID,
        name="Test Card",
        account_type=AccountType.credit_card,
        account_order=1,
    )
    account.history = [AccountHistory(balance=Decimal("300.00"), last_updated=date(2024, 6, 1))]
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def sample_category(db_session):
    """Create an Expenses subcategory with a goal."""
    category = BudgetCategory(
        id=str(uuid.uuid4()),
        user_id=USER_ID,
        type=TransactionType.expenses,
        name="Groceries",
        category_order=0,
    )
    category.goals = [BudgetGoal(year=2024, month=6, goal=Decimal("400.00"))]
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def sample_transaction(db_session, sample_account, sample_category):
    """Create an expense on the sample account."""
    txn = Transaction(
        id=str(uuid.uuid4()),
        user_id=USER_ID,
        date=date(2024, 3, 15),
        amount=Decimal("-100.00"),
        type=TransactionType.expenses,
        description="Whole Foods",
        account_id=sample_account.id,
        budget_category_id=sample_category.id,
    )
    db_session.add(txn)
    db_session.commit()
    db_session.refresh(txn)
    return txn
