"""Helpers for Decimal normalization."""

from decimal import Decimal, InvalidOperation


def coerce_decimal(value, logger=None) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL or adapters.
        logger: Optional logger used to report unparseable values.

    Returns:
        Decimal: Normalized numeric value, zero when missing or invalid.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    raw = str(value).strip()
    if not raw:
        return Decimal("0")
    try:
        return Decimal(raw)
    except InvalidOperation:
        if logger is not None:
            logger.warning(f"Invalid amount {value!r}; using 0")
        return Decimal("0")


__all__ = ["coerce_decimal"]
