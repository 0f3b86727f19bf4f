# product_service/seed.py

"""Sample products loaded into a fresh store for demos and manual testing."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

from .schemas import Product

# (name, price, description, age in days)
SAMPLE_PRODUCTS = [
    ("Laptop", "999.99", "High-performance laptop", 30),
    ("Mouse", "29.99", "Wireless mouse", 20),
    ("Keyboard", "79.99", "Mechanical keyboard", 15),
    ("Monitor", "299.99", "24-inch display", 10),
    ("Headphones", "149.99", "Noise-cancelling headphones", 5),
]


def sample_products(now: Optional[datetime] = None) -> List[Product]:
    """Return the sample products, with creation times staggered back from ``now``."""
    now = now or datetime.now(timezone.utc)
    return [
        Product(
            name=name,
            price=Decimal(price),
            description=description,
            created_at=now - timedelta(days=age_days),
        )
        for name, price, description, age_days in SAMPLE_PRODUCTS
    ]
