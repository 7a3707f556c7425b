"""Domain normalization helpers."""

from src.domain.constants import (
    DEFAULT_PURCHASE_LABEL,
    UNKNOWN_CLIENT,
    UNKNOWN_DATE,
)


def normalize_filter_value(value: str | None) -> str | None:
    """Normalize a user-entered filter value.

    Args:
        value: Raw filter text.

    Returns:
        str | None: Stripped value, or None when blank.
    """
    if not value:
        return None
    cleaned = value.strip()
    return cleaned or None


def client_group_key(client_name: str | None) -> str:
    """Return the grouping key for a client name.

    Args:
        client_name: Raw client name from the record.

    Returns:
        str: The client name, or the Unknown placeholder when missing.
    """
    return client_name or UNKNOWN_CLIENT


def date_group_key(invoice_date: str | None) -> str:
    """Return the grouping key for an invoice date."""
    return invoice_date or UNKNOWN_DATE


def purchase_label(description: str | None) -> str:
    return description or DEFAULT_PURCHASE_LABEL


__all__ = [
    "normalize_filter_value",
    "client_group_key",
    "date_group_key",
    "purchase_label",
]
