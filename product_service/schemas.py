# product_service/schemas.py

"""
Pydantic schemas for the Product Service API.
The same Product model is used by the service, the stores and the HTTP layer,
so the JSON field names defined here are the public contract.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

# Prices are kept as Decimal internally and written to JSON as plain numbers.
Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


# Schema for a product, used for request bodies and responses alike.
# Business rules (non-blank name, positive price) are enforced by ProductService,
# not here, so that rejected input is reported the same way for every caller.
class Product(BaseModel):
    id: int = Field(0, description="Unique identifier; 0 until the product is stored.")
    name: str = Field("", max_length=100, description="Name of the product.")
    # Same precision as the products.price column: Numeric(10, 2).
    price: Money = Field(
        Decimal("0"),
        max_digits=10,
        decimal_places=2,
        description="Price of the product. Must be greater than 0, at most 2 decimal places.",
    )
    description: str = Field("", description="Free-text description of the product.")
    created_at: Optional[datetime] = Field(
        None, alias="createdAt", description="UTC timestamp when the product was created."
    )
    is_active: bool = Field(True, alias="isActive", description="Whether the product is on sale.")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("description", mode="before")
    @classmethod
    def none_description_is_empty(cls, value):
        return "" if value is None else value


# Response body for GET /products/total-value.
class TotalValue(BaseModel):
    total_value: Money = Field(..., alias="totalValue")

    model_config = ConfigDict(populate_by_name=True)
