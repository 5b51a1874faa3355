"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from ops_console.api.main import create_app
from ops_console.api.dependencies import get_store
from ops_console.infrastructure.database.models import Base
from ops_console.infrastructure.database.session import make_engine
from ops_console.infrastructure.store.sql import SqlRecordStore
from ops_console.domain.models import BankAccount, Profile


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = make_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db: Session) -> SqlRecordStore:
    return SqlRecordStore(db)


@pytest.fixture
def client(store: SqlRecordStore) -> TestClient:
    """Create FastAPI test client backed by the test store"""
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    return TestClient(app)


@pytest.fixture
def profile() -> Profile:
    return Profile(id="p1", full_name="Alice Smith", role="employee", hourly_rate=Decimal("25.00"))


@pytest.fixture
def account() -> BankAccount:
    return BankAccount(id="acc1", opening_balance=Decimal("1000.00"), bank_name="Westpac")
