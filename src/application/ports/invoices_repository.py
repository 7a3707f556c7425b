"""Port for reading invoice records."""

from typing import Protocol

from src.domain.models.invoices import InvoiceRecord


class InvoicesRepositoryPort(Protocol):
    """Port exposing read access to the invoices visible to the viewer."""

    def fetch_invoices(self) -> list[InvoiceRecord]:
        """Return invoice records, most recently created first."""


__all__ = ["InvoicesRepositoryPort"]
