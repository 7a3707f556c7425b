"""Domain constants for the invoice hierarchy."""

UNKNOWN_CLIENT = "Unknown"
UNKNOWN_DATE = "Unknown Date"
DEFAULT_PURCHASE_LABEL = "Purchase"

CLIENT_ID_PREFIX = "name"
DATE_ID_PREFIX = "date"
PURCHASE_ID_PREFIX = "purchase"
FALLBACK_RECORD_PREFIX = "row"


__all__ = [
    "UNKNOWN_CLIENT",
    "UNKNOWN_DATE",
    "DEFAULT_PURCHASE_LABEL",
    "CLIENT_ID_PREFIX",
    "DATE_ID_PREFIX",
    "PURCHASE_ID_PREFIX",
    "FALLBACK_RECORD_PREFIX",
]
