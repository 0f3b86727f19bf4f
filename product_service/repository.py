# product_service/repository.py

"""
Product stores.
ProductStore is the contract ProductService depends on. Two backends implement it:
InMemoryProductStore (a locked dict, the default) and SqlProductStore (SQLAlchemy).
Stores never validate; whatever reaches them has already passed the service.
"""
import logging
import threading
from datetime import timezone
from typing import Dict, Iterable, List, Optional, Protocol

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import func, or_, select
from sqlalchemy.orm import sessionmaker

from .models import ProductRecord
from .schemas import Product

logger = logging.getLogger(__name__)


class ProductStore(Protocol):
    """Structural contract for product persistence."""

    async def insert(self, product: Product) -> Product: ...

    async def get(self, product_id: int) -> Optional[Product]: ...

    async def get_all(self) -> List[Product]: ...

    async def update(self, product: Product) -> Product: ...

    async def delete(self, product_id: int) -> bool: ...

    async def search(self, term: str) -> List[Product]: ...


def _copy(product: Product) -> Product:
    return product.model_copy(deep=True)


def _matches(product: Product, needle: str) -> bool:
    return needle in product.name.casefold() or needle in product.description.casefold()


class InMemoryProductStore:
    """
    Thread-safe in-memory store keyed by an auto-incrementing integer id.

    Ids are handed out from a counter that only moves forward, so an id is
    never reused after a delete. Products are copied on the way in and on the
    way out; callers never hold a reference to the stored object.
    """

    def __init__(self, initial: Iterable[Product] = ()):
        self._products: Dict[int, Product] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        for product in initial:
            self._insert(product)
        if self._products:
            logger.debug(f"Seeded in-memory store with {len(self._products)} products.")

    def _insert(self, product: Product) -> Product:
        with self._lock:
            stored = product.model_copy(update={"id": self._next_id}, deep=True)
            self._next_id += 1
            self._products[stored.id] = stored
        return stored

    async def insert(self, product: Product) -> Product:
        stored = self._insert(product)
        logger.debug(f"Inserted product {stored.id} ('{stored.name}').")
        return _copy(stored)

    async def get(self, product_id: int) -> Optional[Product]:
        with self._lock:
            product = self._products.get(product_id)
        return _copy(product) if product is not None else None

    async def get_all(self) -> List[Product]:
        with self._lock:
            products = list(self._products.values())
        return [_copy(p) for p in products]

    async def update(self, product: Product) -> Product:
        """Overwrite the product at ``product.id``, creating it if it is missing."""
        stored = _copy(product)
        with self._lock:
            if stored.id not in self._products:
                logger.debug(f"Update of unknown product {stored.id}; inserting it.")
            self._products[stored.id] = stored
            # Keep the counter ahead of any id written through an upsert.
            self._next_id = max(self._next_id, stored.id + 1)
        return _copy(stored)

    async def delete(self, product_id: int) -> bool:
        with self._lock:
            removed = self._products.pop(product_id, None)
        if removed is not None:
            logger.debug(f"Deleted product {product_id}.")
        return removed is not None

    async def search(self, term: str) -> List[Product]:
        needle = term.casefold()
        with self._lock:
            products = list(self._products.values())
        return [_copy(p) for p in products if _matches(p, needle)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)


def _to_product(record: ProductRecord) -> Product:
    created_at = record.created_at
    # SQLite drops tzinfo; stored values are always UTC.
    if created_at is not None and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return Product(
        id=record.id,
        name=record.name,
        price=record.price,
        description=record.description,
        created_at=created_at,
        is_active=record.is_active,
    )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlProductStore:
    """
    Product store on top of a SQLAlchemy session factory.
    Each operation runs in its own short-lived session on a worker thread, so
    database I/O never blocks the event loop. Tables must already exist
    (see db.init_db).
    """

    def __init__(self, session_factory: sessionmaker, initial: Iterable[Product] = ()):
        self._session_factory = session_factory
        initial = list(initial)
        if initial:
            self._seed(initial)

    def _seed(self, products: List[Product]) -> None:
        with self._session_factory() as db:
            if db.scalar(select(func.count()).select_from(ProductRecord)):
                logger.info("Products table already populated; skipping sample data.")
                return
            for product in products:
                db.add(self._new_record(product))
            db.commit()
        logger.debug(f"Seeded SQL store with {len(products)} products.")

    @staticmethod
    def _new_record(product: Product) -> ProductRecord:
        return ProductRecord(
            name=product.name,
            price=product.price,
            description=product.description,
            created_at=product.created_at,
            is_active=product.is_active,
        )

    # The coroutines below hand the blocking session work to the threadpool.

    def _insert(self, product: Product) -> Product:
        with self._session_factory() as db:
            record = self._new_record(product)
            db.add(record)
            db.commit()
            db.refresh(record)
            logger.debug(f"Inserted product {record.id} ('{record.name}').")
            return _to_product(record)

    async def insert(self, product: Product) -> Product:
        return await run_in_threadpool(self._insert, product)

    def _get(self, product_id: int) -> Optional[Product]:
        with self._session_factory() as db:
            record = db.get(ProductRecord, product_id)
            return _to_product(record) if record is not None else None

    async def get(self, product_id: int) -> Optional[Product]:
        return await run_in_threadpool(self._get, product_id)

    def _get_all(self) -> List[Product]:
        with self._session_factory() as db:
            records = db.scalars(select(ProductRecord).order_by(ProductRecord.id)).all()
            return [_to_product(r) for r in records]

    async def get_all(self) -> List[Product]:
        return await run_in_threadpool(self._get_all)

    def _update(self, product: Product) -> Product:
        with self._session_factory() as db:
            record = db.merge(
                ProductRecord(
                    id=product.id,
                    name=product.name,
                    price=product.price,
                    description=product.description,
                    created_at=product.created_at,
                    is_active=product.is_active,
                )
            )
            db.commit()
            db.refresh(record)
            return _to_product(record)

    async def update(self, product: Product) -> Product:
        """Overwrite the row at ``product.id``, creating it if it is missing."""
        return await run_in_threadpool(self._update, product)

    def _delete(self, product_id: int) -> bool:
        with self._session_factory() as db:
            record = db.get(ProductRecord, product_id)
            if record is None:
                return False
            db.delete(record)
            db.commit()
        logger.debug(f"Deleted product {product_id}.")
        return True

    async def delete(self, product_id: int) -> bool:
        return await run_in_threadpool(self._delete, product_id)

    def _search(self, term: str) -> List[Product]:
        pattern = f"%{_escape_like(term)}%"
        query = (
            select(ProductRecord)
            .where(
                or_(
                    ProductRecord.name.ilike(pattern, escape="\\"),
                    ProductRecord.description.ilike(pattern, escape="\\"),
                )
            )
            .order_by(ProductRecord.id)
        )
        with self._session_factory() as db:
            return [_to_product(r) for r in db.scalars(query).all()]

    async def search(self, term: str) -> List[Product]:
        return await run_in_threadpool(self._search, term)
