# product_service/deps.py

"""
FastAPI dependency providers for the product store and service.
Tests swap these out through app.dependency_overrides.
"""
import logging
import os
from functools import lru_cache

from fastapi import Depends

from .db import SessionLocal, init_db
from .repository import InMemoryProductStore, ProductStore, SqlProductStore
from .seed import sample_products
from .service import ProductService

logger = logging.getLogger(__name__)

PRODUCT_STORE_BACKEND = os.getenv("PRODUCT_STORE_BACKEND", "memory").lower()
SEED_SAMPLE_DATA = os.getenv("SEED_SAMPLE_DATA", "true").lower() in {"1", "true", "yes"}


def build_product_store(backend: str = PRODUCT_STORE_BACKEND, seed: bool = SEED_SAMPLE_DATA) -> ProductStore:
    initial = sample_products() if seed else []
    if backend == "memory":
        logger.info("Using in-memory product store.")
        return InMemoryProductStore(initial)
    if backend == "sql":
        init_db()
        logger.info("Using SQL product store.")
        return SqlProductStore(SessionLocal, initial)
    raise ValueError(f"Unknown PRODUCT_STORE_BACKEND: {backend!r}")


@lru_cache
def get_product_store() -> ProductStore:
    """One store per process, shared by every request."""
    return build_product_store()


def get_product_service(store: ProductStore = Depends(get_product_store)) -> ProductService:
    return ProductService(store)
