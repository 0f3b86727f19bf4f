# product_service/errors.py

"""
Exceptions raised by the Product Service.
The HTTP layer maps InvalidArgumentError to 400 and ProductNotFoundError to 404.
"""

from typing import Optional


class ProductServiceError(Exception):
    """Base class for every error the service raises on purpose."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(ProductServiceError, ValueError):
    """A caller-supplied argument broke a precondition."""

    def __init__(self, message: str, argument: Optional[str] = None):
        super().__init__(message)
        self.argument = argument


class ProductNotFoundError(ProductServiceError, LookupError):
    def __init__(self, product_id: int):
        super().__init__(f"Product with ID {product_id} not found")
        self.product_id = product_id
