"""Domain services package."""

from .invoice_tree import (
    aggregate_invoices,
    client_node_id,
    date_node_id,
    iter_nodes,
    matches_filter,
    purchase_node_id,
    summarize_client_totals,
)
from .normalization import (
    client_group_key,
    date_group_key,
    normalize_filter_value,
    purchase_label,
)

__all__ = [
    "aggregate_invoices",
    "client_node_id",
    "date_node_id",
    "iter_nodes",
    "matches_filter",
    "purchase_node_id",
    "summarize_client_totals",
    "client_group_key",
    "date_group_key",
    "normalize_filter_value",
    "purchase_label",
]
