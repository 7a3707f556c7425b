"""Application use cases package."""

from .get_invoice_tree import GetInvoiceTreeUseCase

__all__ = ["GetInvoiceTreeUseCase"]
