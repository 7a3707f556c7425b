"""Domain models for invoice records and the client hierarchy."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal

NodeKind = Literal["client", "date", "purchase"]

CLIENT_KIND: NodeKind = "client"
DATE_KIND: NodeKind = "date"
PURCHASE_KIND: NodeKind = "purchase"


@dataclass(frozen=True)
class InvoiceRecord:
    """Invoice row as read from the record store.

    Attributes:
        id: Store identifier of the invoice, if any.
        client_name: Name of the invoiced client.
        invoice_date: ISO formatted invoice date (YYYY-MM-DD).
        description: Free-text description of the purchase.
        amount: Monetary amount of the purchase.
    """

    id: str | None
    client_name: str | None
    invoice_date: str | None
    description: str | None
    amount: Decimal | None


@dataclass(frozen=True)
class InvoiceFilter:
    """User-entered criteria narrowing the invoice hierarchy.

    Attributes:
        date_iso_prefix: Keep invoices whose date starts with this prefix.
        client_name_substring: Keep invoices whose client name contains this
            value, ignoring case.
    """

    date_iso_prefix: str | None = None
    client_name_substring: str | None = None

    @property
    def is_empty(self) -> bool:
        """Return True when no criterion is set."""
        return not (
            (self.date_iso_prefix or "").strip()
            or (self.client_name_substring or "").strip()
        )


@dataclass(frozen=True)
class TreeNode:
    """Node of the client -> date -> purchase hierarchy."""

    id: str
    kind: NodeKind
    label: str
    value: Decimal | None = None
    children: tuple["TreeNode", ...] = field(default_factory=tuple)

    @property
    def is_leaf(self) -> bool:
        """Return True for nodes without children."""
        return not self.children

    @property
    def total(self) -> Decimal:
        """Return the summed purchase amounts below this node."""
        if self.is_leaf:
            return self.value if self.value is not None else Decimal("0")
        return sum((child.total for child in self.children), Decimal("0"))


@dataclass(frozen=True)
class ClientTotal:
    """Total purchase amount for a single client."""

    client: str
    amount: Decimal


__all__ = [
    "NodeKind",
    "CLIENT_KIND",
    "DATE_KIND",
    "PURCHASE_KIND",
    "InvoiceRecord",
    "InvoiceFilter",
    "TreeNode",
    "ClientTotal",
]
