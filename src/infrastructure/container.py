"""Composition root for wiring infrastructure adapters."""

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.invoices_repository import InvoicesRepositoryPort
from src.application.use_cases.get_invoice_tree import GetInvoiceTreeUseCase
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.invoices_repository import (
    SqlAlchemyInvoicesRepository,
)
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import InvoiceTreeSettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_invoices_repository(
    db_port: DatabaseEnginePort | None = None,
    settings: InvoiceTreeSettings | None = None,
    logger=None,
) -> InvoicesRepositoryPort:
    """Return the invoices repository for the configured table."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or InvoiceTreeSettings.from_env()
    return SqlAlchemyInvoicesRepository(
        resolved_db,
        table=resolved_settings.invoices_table,
        logger=logger,
    )


def build_get_invoice_tree_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> GetInvoiceTreeUseCase:
    """Return the use case building the client hierarchy."""
    logger = get_app_logger()
    return GetInvoiceTreeUseCase(
        repository=build_invoices_repository(db_port, logger=logger),
        logger=logger,
    )


__all__ = [
    "build_database_adapter",
    "build_invoices_repository",
    "build_get_invoice_tree_use_case",
]
