"""Database ports for the invoice dashboard.

This module defines the application-layer protocol for accessing the
database engine. Infrastructure implementations are expected to provide
concrete adapters that satisfy this port.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the engine of the invoices record store.

    Application use cases can depend on this protocol instead of concrete
    database drivers or configuration details.
    """

    def get_invoices_engine(self) -> Engine:
        """Get the engine for the invoices database.

        Returns:
            Engine: SQLAlchemy engine connected to the record store.
        """


__all__ = ["DatabaseEnginePort"]
