"""SQLAlchemy engine for the invoices record store.

The connection string is read from ``INVOICES_DB_URL`` (a local ``.env``
file is honoured) and one pooled engine is shared by every repository.
"""

import os
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from src.application.ports.database import DatabaseEnginePort

INVOICES_DB_URL_VAR = "INVOICES_DB_URL"


def _get_env_var(name: str) -> str:
    """Return a required setting, loading ``.env`` first.

    Raises:
        RuntimeError: If the variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _create_engine(db_url: str) -> Engine:
    """Build the pooled engine; stale connections are pinged before use."""
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_invoices_engine: Optional[Engine] = None


def get_invoices_engine() -> Engine:
    """Return the shared invoices engine, creating it on first use."""
    global _invoices_engine
    if _invoices_engine is None:
        db_url = _get_env_var(INVOICES_DB_URL_VAR)
        _invoices_engine = _create_engine(db_url)
    return _invoices_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """Expose the shared invoices engine through ``DatabaseEnginePort``."""

    def get_invoices_engine(self) -> Engine:
        return get_invoices_engine()


__all__ = [
    "INVOICES_DB_URL_VAR",
    "get_invoices_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
