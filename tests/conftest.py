# tests/conftest.py

"""
Shared fixtures.
HTTP tests get a TestClient plus a fresh store wired in through
app.dependency_overrides, so every test starts from the same catalogue.
"""

import logging
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from product_service.db import Base, build_engine, init_db
from product_service.deps import get_product_store
from product_service.main import app
from product_service.repository import InMemoryProductStore, SqlProductStore
from product_service.schemas import Product
from product_service.seed import sample_products

# Suppress noisy logs during tests for cleaner output
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
logging.getLogger("fastapi").setLevel(logging.WARNING)
logging.getLogger("product_service.main").setLevel(logging.WARNING)


@pytest.fixture
def store():
    """An empty in-memory store."""
    return InMemoryProductStore()


@pytest.fixture
def seeded_store():
    """An in-memory store holding the five sample products."""
    return InMemoryProductStore(sample_products())


@pytest.fixture
def sql_store():
    """A SQL store on its own in-memory SQLite database."""
    engine = build_engine("sqlite://")
    init_db(bind=engine, max_retries=1)
    session_factory = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
    )
    yield SqlProductStore(session_factory)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def make_product():
    """Build a valid, not-yet-stored product; keyword arguments override fields."""

    def _make(**overrides) -> Product:
        fields = {
            "name": "Test Product",
            "price": Decimal("19.99"),
            "description": "A product for testing",
        }
        fields.update(overrides)
        return Product(**fields)

    return _make


@pytest.fixture(scope="module")  # Client is created once per test module
def client():
    """
    Provides a TestClient for making HTTP requests to the FastAPI application.
    The TestClient automatically manages the app's lifespan events (startup/shutdown).
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def store_for_test(seeded_store):
    """
    Routes every request of one test to a fresh seeded store and removes the
    override afterwards.
    """
    app.dependency_overrides[get_product_store] = lambda: seeded_store
    try:
        yield seeded_store
    finally:
        app.dependency_overrides.pop(get_product_store, None)
