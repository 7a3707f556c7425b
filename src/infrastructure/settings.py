"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os
import re
from typing import Optional

import dotenv

from src.infrastructure.logging.logger import get_app_logger

DEFAULT_INVOICES_TABLE = "invoices"

_IDENTIFIER = re.compile(
    r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$"
)
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class InvoiceTreeSettings:
    """Settings for reading invoices and driving the tree view.

    Attributes:
        invoices_table: Table (optionally schema-qualified) holding invoices.
        keep_expansion: Carry expanded nodes over when the tree is rebuilt.
        client_filter: Default client-name substring filter.
        date_filter: Default ISO date prefix filter.
    """

    invoices_table: str = DEFAULT_INVOICES_TABLE
    keep_expansion: bool = False
    client_filter: Optional[str] = None
    date_filter: Optional[str] = None

    @classmethod
    def from_env(cls) -> "InvoiceTreeSettings":
        """Build settings from environment variables.

        Returns:
            InvoiceTreeSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        table = cls._normalize_table(
            os.getenv("INVOICES_TABLE", DEFAULT_INVOICES_TABLE),
            logger=logger,
        )
        keep_expansion = (
            os.getenv("INVOICE_TREE_KEEP_EXPANSION", "").strip().lower()
            in _TRUTHY
        )
        return cls(
            invoices_table=table,
            keep_expansion=keep_expansion,
            client_filter=os.getenv("INVOICE_FILTER_CLIENT") or None,
            date_filter=os.getenv("INVOICE_FILTER_DATE") or None,
        )

    @staticmethod
    def _normalize_table(raw_table: str, logger) -> str:
        """Validate the configured table name.

        Args:
            raw_table: Raw table name from the environment.
            logger: Logger used for warnings.

        Returns:
            str: The table name, or the default when it is not a plain
            SQL identifier.
        """
        table = raw_table.strip()
        if _IDENTIFIER.match(table):
            return table
        logger.warning(
            f"Invalid INVOICES_TABLE value '{raw_table}'. "
            f"Falling back to '{DEFAULT_INVOICES_TABLE}'."
        )
        return DEFAULT_INVOICES_TABLE


__all__ = ["InvoiceTreeSettings", "DEFAULT_INVOICES_TABLE"]
