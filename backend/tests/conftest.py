"""Shared test fixtures for all test modules."""

import contextlib

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import invoicing.models  # noqa: F401
from invoicing.core import database as db_module
from invoicing.core.database import Base, get_db
from invoicing.main import app
from invoicing.repositories.customer_repository import CustomerRepository
from invoicing.repositories.shop_repository import ShopRepository
from invoicing.schemas.customer import CustomerCreate
from invoicing.schemas.shop import ShopCreate

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database.
    """
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    yield
    # Children first, so foreign keys stay enforced for the next test
    with _test_engine.connect() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.commit()

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def db_session():
    """Create a database session for direct repository testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def shop(db_session):
    return ShopRepository(db_session).create(
        ShopCreate(name="Corner Grocery", owner_name="Asha Rao", city="Pune", zip_code="411001")
    )


@pytest.fixture
def customer(db_session):
    return CustomerRepository(db_session).create(
        CustomerCreate(name="Ravi Kumar", mobile="9876543210")
    )
