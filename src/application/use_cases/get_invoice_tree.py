"""Use case to build the client -> date -> purchase invoice hierarchy."""

from collections.abc import Sequence

from src.application.ports.invoices_repository import InvoicesRepositoryPort
from src.domain.models.invoices import InvoiceFilter, InvoiceRecord, TreeNode
from src.domain.services.invoice_tree import aggregate_invoices
from src.infrastructure.logging.logger import get_app_logger


class GetInvoiceTreeUseCase:
    """Load invoice records and group them into tree nodes."""

    def __init__(
        self,
        repository: InvoicesRepositoryPort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            repository: Port providing invoice records.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._repository = repository
        self._logger = logger or get_app_logger()

    def fetch_records(self) -> list[InvoiceRecord]:
        """Return the invoice records visible to the current viewer."""
        records = self._repository.fetch_invoices()
        self._logger.info(f"Fetched {len(records)} invoice records")
        return records

    def execute(
        self,
        invoice_filter: InvoiceFilter | None = None,
        records: Sequence[InvoiceRecord] | None = None,
    ) -> list[TreeNode]:
        """Return the client nodes for the filtered invoices.

        Args:
            invoice_filter: Optional client-name and date criteria.
            records: Already loaded records; fetched from the repository
                when omitted.

        Returns:
            list[TreeNode]: Root client nodes, empty when nothing matches.
        """
        source = self.fetch_records() if records is None else records
        tree = aggregate_invoices(
            source,
            invoice_filter,
            logger=self._logger,
        )
        self._logger.info(
            f"Built invoice tree with {len(tree)} clients "
            f"from {len(source)} records"
        )
        return tree


__all__ = ["GetInvoiceTreeUseCase"]
