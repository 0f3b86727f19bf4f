# product_service/service.py

"""
Business rules for products.
ProductService validates every request before it reaches the store, stamps
creation times and computes the aggregates exposed by the API.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from .errors import InvalidArgumentError, ProductNotFoundError
from .repository import ProductStore
from .schemas import Product

logger = logging.getLogger(__name__)


def _require_positive_id(product_id: int) -> None:
    if product_id <= 0:
        logger.warning(f"Rejected non-positive product ID: {product_id}")
        raise InvalidArgumentError("Product ID must be positive", "id")


def _require_valid_product(product: Optional[Product]) -> Product:
    if product is None:
        raise InvalidArgumentError("Product is required", "product")
    if not product.name or not product.name.strip():
        logger.warning("Rejected product with a blank name.")
        raise InvalidArgumentError("Product name is required", "product")
    if product.price <= 0:
        logger.warning(f"Rejected product '{product.name}' with price {product.price}.")
        raise InvalidArgumentError("Product price must be positive", "product")
    return product


class ProductService:
    def __init__(self, store: ProductStore):
        self._store = store

    async def get_all_products(self) -> List[Product]:
        return await self._store.get_all()

    async def get_product_by_id(self, product_id: int) -> Optional[Product]:
        """Return the product, or None if there is none with that id."""
        _require_positive_id(product_id)
        return await self._store.get(product_id)

    async def create_product(self, product: Optional[Product]) -> Product:
        """
        Validate and store a new product.
        The creation time is set here and the product always starts active,
        whatever the caller sent.
        """
        product = _require_valid_product(product)
        new_product = product.model_copy(
            update={"created_at": datetime.now(timezone.utc), "is_active": True}
        )
        return await self._store.insert(new_product)

    async def update_product(self, product_id: int, product: Optional[Product]) -> Product:
        """
        Replace the product stored under ``product_id``.
        The path id wins over any id in the body and the original creation
        time is kept. Raises ProductNotFoundError if nothing is stored there.
        """
        _require_positive_id(product_id)
        if product is None:
            raise InvalidArgumentError("Product is required", "product")
        _require_valid_product(product)

        existing = await self._store.get(product_id)
        if existing is None:
            logger.warning(f"Product with ID: {product_id} not found for update.")
            raise ProductNotFoundError(product_id)

        replacement = product.model_copy(
            update={"id": product_id, "created_at": existing.created_at}
        )
        return await self._store.update(replacement)

    async def delete_product(self, product_id: int) -> bool:
        _require_positive_id(product_id)
        return await self._store.delete(product_id)

    async def search_products(self, search_term: Optional[str]) -> List[Product]:
        # A blank term means "no filter", not "match nothing".
        if not search_term or not search_term.strip():
            return await self.get_all_products()
        return await self._store.search(search_term)

    async def calculate_total_value(self) -> Decimal:
        """Sum of prices over active products."""
        products = await self._store.get_all()
        return sum((p.price for p in products if p.is_active), Decimal("0"))

    async def get_active_products(self) -> List[Product]:
        products = await self._store.get_all()
        return [p for p in products if p.is_active]
