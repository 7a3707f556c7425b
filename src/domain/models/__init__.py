"""Domain models package."""

from .invoices import (
    CLIENT_KIND,
    DATE_KIND,
    PURCHASE_KIND,
    ClientTotal,
    InvoiceFilter,
    InvoiceRecord,
    NodeKind,
    TreeNode,
)

__all__ = [
    "CLIENT_KIND",
    "DATE_KIND",
    "PURCHASE_KIND",
    "ClientTotal",
    "InvoiceFilter",
    "InvoiceRecord",
    "NodeKind",
    "TreeNode",
]
