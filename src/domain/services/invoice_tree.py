"""Domain service grouping invoice records into a client hierarchy.

The hierarchy has three levels: client -> invoice date -> purchase. Groups
keep the order in which they first appear in the filtered input; nothing is
sorted, so callers control ordering through the order of the records they
pass in.
"""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from decimal import Decimal
import logging
from logging import Logger

from src.domain.constants import (
    CLIENT_ID_PREFIX,
    DATE_ID_PREFIX,
    FALLBACK_RECORD_PREFIX,
    PURCHASE_ID_PREFIX,
)
from src.domain.models.invoices import (
    CLIENT_KIND,
    DATE_KIND,
    PURCHASE_KIND,
    ClientTotal,
    InvoiceFilter,
    InvoiceRecord,
    TreeNode,
)
from src.domain.services.normalization import (
    client_group_key,
    date_group_key,
    normalize_filter_value,
    purchase_label,
)
from src.utils.decimal_utils import coerce_decimal


@dataclass(frozen=True)
class _PurchaseEntry:
    record_key: str
    label: str
    amount: Decimal


def client_node_id(client: str) -> str:
    """Return the node id of a client group."""
    return f"{CLIENT_ID_PREFIX}-{client}"


def date_node_id(client: str, invoice_date: str) -> str:
    """Return the node id of a date group under a client."""
    return f"{DATE_ID_PREFIX}-{client}-{invoice_date}"


def purchase_node_id(record_key: str) -> str:
    """Return the node id of a purchase leaf."""
    return f"{PURCHASE_ID_PREFIX}-{record_key}"


def matches_filter(
    record: InvoiceRecord,
    invoice_filter: InvoiceFilter | None,
) -> bool:
    """Return True when a record satisfies the filter criteria.

    A record without a date never matches a date prefix, and a record
    without a client name never matches a name substring.

    Args:
        record: Invoice record to evaluate.
        invoice_filter: Optional filter criteria.

    Returns:
        bool: True when the record should be kept.
    """
    if invoice_filter is None:
        return True
    date_prefix = normalize_filter_value(invoice_filter.date_iso_prefix)
    if date_prefix and not (record.invoice_date or "").startswith(date_prefix):
        return False
    name_query = normalize_filter_value(invoice_filter.client_name_substring)
    if name_query:
        client_name = record.client_name or ""
        if name_query.lower() not in client_name.lower():
            return False
    return True


def aggregate_invoices(
    records: Sequence[InvoiceRecord],
    invoice_filter: InvoiceFilter | None = None,
    *,
    logger: Logger | None = None,
) -> list[TreeNode]:
    """Group invoice records into client -> date -> purchase nodes.

    Args:
        records: Invoice records in the order the store returned them.
        invoice_filter: Optional criteria applied before grouping.
        logger: Logger used to report malformed records.

    Returns:
        list[TreeNode]: Client nodes in first-appearance order. Empty when
        no record survives the filter.
    """
    log = logger or logging.getLogger(__name__)
    grouped = _group_records(records, invoice_filter, log)
    return _materialize(grouped, log)


def _group_records(
    records: Sequence[InvoiceRecord],
    invoice_filter: InvoiceFilter | None,
    logger: Logger,
) -> dict[str, dict[str, list[_PurchaseEntry]]]:
    grouped: dict[str, dict[str, list[_PurchaseEntry]]] = {}
    for position, record in enumerate(records):
        if not matches_filter(record, invoice_filter):
            continue
        record_key = _record_key(record, position, logger)
        client = client_group_key(record.client_name)
        invoice_date = date_group_key(record.invoice_date)

        dates = grouped.get(client)
        if dates is None:
            dates = {}
            grouped[client] = dates
        purchases = dates.get(invoice_date)
        if purchases is None:
            purchases = []
            dates[invoice_date] = purchases

        purchases.append(
            _PurchaseEntry(
                record_key=record_key,
                label=purchase_label(record.description),
                amount=coerce_decimal(record.amount, logger),
            )
        )
    return grouped


def _record_key(record: InvoiceRecord, position: int, logger: Logger) -> str:
    if record.id is not None and str(record.id).strip():
        return str(record.id)
    logger.warning(
        f"Invoice record at position {position} has no id; "
        f"using fallback id {FALLBACK_RECORD_PREFIX}-{position}"
    )
    return f"{FALLBACK_RECORD_PREFIX}-{position}"


def _materialize(
    grouped: dict[str, dict[str, list[_PurchaseEntry]]],
    logger: Logger,
) -> list[TreeNode]:
    seen: set[str] = set()
    nodes: list[TreeNode] = []
    for client, dates in grouped.items():
        client_id = _claim_id(client_node_id(client), seen, logger)
        date_nodes: list[TreeNode] = []
        for invoice_date, purchases in dates.items():
            date_id = _claim_id(
                date_node_id(client, invoice_date),
                seen,
                logger,
            )
            leaves = tuple(
                TreeNode(
                    id=_claim_id(
                        purchase_node_id(entry.record_key),
                        seen,
                        logger,
                    ),
                    kind=PURCHASE_KIND,
                    label=entry.label,
                    value=entry.amount,
                )
                for entry in purchases
            )
            date_nodes.append(
                TreeNode(
                    id=date_id,
                    kind=DATE_KIND,
                    label=invoice_date,
                    children=leaves,
                )
            )
        nodes.append(
            TreeNode(
                id=client_id,
                kind=CLIENT_KIND,
                label=client,
                children=tuple(date_nodes),
            )
        )
    return nodes


def _claim_id(candidate: str, seen: set[str], logger: Logger) -> str:
    """Reserve a node id, suffixing it when already taken."""
    if candidate not in seen:
        seen.add(candidate)
        return candidate
    counter = 2
    while f"{candidate}#{counter}" in seen:
        counter += 1
    unique = f"{candidate}#{counter}"
    logger.warning(f"Duplicate node id {candidate}; using {unique}")
    seen.add(unique)
    return unique


def iter_nodes(tree: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Yield every node depth-first, parents before children."""
    for node in tree:
        yield node
        yield from iter_nodes(node.children)


def summarize_client_totals(tree: Iterable[TreeNode]) -> list[ClientTotal]:
    """Return purchase totals per client node, in tree order.

    Args:
        tree: Root client nodes produced by ``aggregate_invoices``.

    Returns:
        list[ClientTotal]: One entry per client node.
    """
    return [
        ClientTotal(client=node.label, amount=node.total)
        for node in tree
        if node.kind == CLIENT_KIND
    ]


__all__ = [
    "aggregate_invoices",
    "matches_filter",
    "client_node_id",
    "date_node_id",
    "purchase_node_id",
    "iter_nodes",
    "summarize_client_totals",
]
