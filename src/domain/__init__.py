"""Domain package for invoice hierarchy rules and core models."""

from .constants import UNKNOWN_CLIENT, UNKNOWN_DATE
from .models import (
    ClientTotal,
    InvoiceFilter,
    InvoiceRecord,
    TreeNode,
)
from .services import (
    aggregate_invoices,
    iter_nodes,
    matches_filter,
    summarize_client_totals,
)

__all__ = [
    "ClientTotal",
    "InvoiceFilter",
    "InvoiceRecord",
    "TreeNode",
    "UNKNOWN_CLIENT",
    "UNKNOWN_DATE",
    "aggregate_invoices",
    "iter_nodes",
    "matches_filter",
    "summarize_client_totals",
]
