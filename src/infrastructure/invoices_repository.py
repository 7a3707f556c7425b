"""SQLAlchemy-backed repository for invoice records."""

from datetime import date, datetime
from decimal import Decimal
import logging

from sqlalchemy import text

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.invoices_repository import InvoicesRepositoryPort
from src.domain.models.invoices import InvoiceRecord
from src.infrastructure.settings import DEFAULT_INVOICES_TABLE
from src.utils.decimal_utils import coerce_decimal


class SqlAlchemyInvoicesRepository(InvoicesRepositoryPort):
    """Repository backed by SQLAlchemy for the invoices table."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        table: str = DEFAULT_INVOICES_TABLE,
        logger=None,
    ) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the invoices engine.
            table: Validated table name to read from.
            logger: Optional logger used to report unparseable amounts.
        """
        self._db_port = db_port
        self._table = table
        self._logger = logger or logging.getLogger(__name__)

    def fetch_invoices(self) -> list[InvoiceRecord]:
        """Return invoices ordered by creation time, newest first."""
        query = text(
            f"""
            SELECT id, client_name, invoice_date, description, amount
            FROM {self._table}
            ORDER BY created_at DESC
            """
        )
        engine = self._db_port.get_invoices_engine()
        with engine.connect() as conn:
            rows = conn.execute(query).all()
        return [
            InvoiceRecord(
                id=_to_text(row.id),
                client_name=row.client_name,
                invoice_date=_to_iso_date(row.invoice_date),
                description=row.description,
                amount=_to_amount(row.amount, self._logger),
            )
            for row in rows
        ]


def _to_text(value) -> str | None:
    if value is None:
        return None
    return str(value)


def _to_amount(value, logger) -> Decimal | None:
    """Coerce NUMERIC or text amounts; missing amounts stay None."""
    if value is None:
        return None
    return coerce_decimal(value, logger)


def _to_iso_date(value) -> str | None:
    """Render DATE/TIMESTAMP columns as ISO strings; pass strings through."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


__all__ = ["SqlAlchemyInvoicesRepository"]
