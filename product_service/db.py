# product_service/db.py

"""
Database configuration and session management for the SQL-backed store.
Only used when PRODUCT_STORE_BACKEND=sql.
"""
import logging
import os
import time

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Defaults to an in-memory SQLite database, which lives as long as the process.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://")
DB_INIT_MAX_RETRIES = int(os.getenv("DB_INIT_MAX_RETRIES", "10"))
DB_INIT_RETRY_DELAY_SECONDS = float(os.getenv("DB_INIT_RETRY_DELAY_SECONDS", "5"))


def build_engine(url: str):
    """
    Create an engine for ``url``.
    In-memory SQLite needs a single shared connection, otherwise every pooled
    connection would see its own empty database.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    # pool_pre_ping=True helps maintain healthy connections in a pool
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(DATABASE_URL)

# expire_on_commit=False keeps attribute values readable after the session closes.
SessionLocal = sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
)

# Base class for ORM models
Base = declarative_base()


def init_db(
    bind=None,
    max_retries: int = DB_INIT_MAX_RETRIES,
    retry_delay_seconds: float = DB_INIT_RETRY_DELAY_SECONDS,
) -> None:
    """
    Ensure database tables exist.
    Retries on OperationalError so the service can start before its database does.
    """
    # Register the models on Base.metadata before create_all.
    from . import models  # noqa: F401

    bind = bind if bind is not None else engine
    for i in range(max_retries):
        try:
            logger.info(
                f"Attempting to connect to the database and create tables (attempt {i+1}/{max_retries})..."
            )
            Base.metadata.create_all(bind=bind)
            logger.info("Successfully connected to the database and ensured tables exist.")
            return
        except OperationalError as e:
            logger.warning(f"Failed to connect to the database: {e}")
            if i == max_retries - 1:
                logger.critical(
                    f"Failed to connect to the database after {max_retries} attempts."
                )
                raise
            logger.info(f"Retrying in {retry_delay_seconds} seconds...")
            time.sleep(retry_delay_seconds)
