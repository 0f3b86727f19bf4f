# product_service/models.py

"""
SQLAlchemy database models for the SQL-backed product store.
These classes define the structure of tables in the database.
"""

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text

from .db import Base


class ProductRecord(Base):
    """
    SQLAlchemy model for the 'products' table.
    Mirrors the Product schema field for field.
    """

    __tablename__ = "products"
    # SQLite reuses the highest rowid after a delete unless AUTOINCREMENT is set.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Product name: required, max 100 chars, indexed for search.
    name = Column(String(100), nullable=False, index=True)

    # Numeric with 10 total digits and 2 decimal places.
    price = Column(Numeric(10, 2), nullable=False)

    description = Column(Text, nullable=False, default="")

    # Set once by the service at creation time, never touched by updates.
    created_at = Column(DateTime(timezone=True), nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<ProductRecord(id={self.id}, name='{self.name}', active={self.is_active})>"
