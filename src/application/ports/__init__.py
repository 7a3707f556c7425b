"""Application ports package."""

from .database import DatabaseEnginePort
from .invoices_repository import InvoicesRepositoryPort

__all__ = [
    "DatabaseEnginePort",
    "InvoicesRepositoryPort",
]
