"""CLI adapter printing the invoice hierarchy to the console.

Filters are read from ``INVOICE_FILTER_CLIENT`` (client name substring) and
``INVOICE_FILTER_DATE`` (ISO date prefix such as ``2024``, ``2024-01`` or
``2024-01-05``). Every node is expanded.
"""

from datetime import date
import re

from src.adapters.interface.invoice_tree_view import (
    TreeViewController,
    VisibleRow,
)
from src.domain.models.invoices import InvoiceFilter
from src.infrastructure.container import build_get_invoice_tree_use_case
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import InvoiceTreeSettings

_DATE_PREFIX = re.compile(r"^\d{4}(-\d{2}(-\d{2})?)?$")


def _parse_date_prefix(value: str | None, logger) -> str | None:
    """Validate an ISO date prefix.

    Args:
        value: Year, year-month or full date string.
        logger: Logger used for warnings.

    Returns:
        str | None: The prefix, or None when missing or invalid.
    """
    if not value:
        return None
    candidate = value.strip()
    if not _DATE_PREFIX.match(candidate):
        logger.warning(
            f"Invalid date prefix '{value}'. "
            "Expected YYYY, YYYY-MM or YYYY-MM-DD."
        )
        return None
    if len(candidate) == 10:
        try:
            date.fromisoformat(candidate)
        except ValueError:
            logger.warning(f"Invalid date '{value}'.")
            return None
    return candidate


def format_row(row: VisibleRow) -> str:
    """Return the console line for a visible row."""
    indent = "    " * row.depth
    node = row.node
    if node.is_leaf:
        return f"{indent}- {node.label}: {node.value}"
    return f"{indent}+ {node.label}"


def main() -> None:
    """Print the fully expanded invoice tree."""
    logger = get_app_logger()
    settings = InvoiceTreeSettings.from_env()
    invoice_filter = InvoiceFilter(
        date_iso_prefix=_parse_date_prefix(settings.date_filter, logger),
        client_name_substring=settings.client_filter,
    )

    use_case = build_get_invoice_tree_use_case()
    tree = use_case.execute(invoice_filter)
    if not tree:
        print("No client data available.")
        return

    controller = TreeViewController(logger=logger)
    controller.build(tree)
    controller.expand_all()
    for row in controller.visible_rows():
        print(format_row(row))


if __name__ == "__main__":  # pragma: no cover
    main()
