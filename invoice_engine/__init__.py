"""GST invoice normalization, tax computation, HSN summary and pagination."""
from .hsn import hsn_grand_total, summarize_by_code
from .normalizer import normalize
from .paginator import InvalidPageSizeError, paginate
from .pipeline import prepare_invoice
from .schemas import (
    Company,
    HsnSummaryRow,
    InvoiceComputation,
    Page,
    Party,
    ShippingAddress,
    TaxedLineItem,
    TaxMode,
    TotalsSummary,
    UnifiedLineItem,
)
from .tax import TaxEngine, compute_taxes

__all__ = [
    "Company",
    "HsnSummaryRow",
    "InvalidPageSizeError",
    "InvoiceComputation",
    "Page",
    "Party",
    "ShippingAddress",
    "TaxEngine",
    "TaxMode",
    "TaxedLineItem",
    "TotalsSummary",
    "UnifiedLineItem",
    "compute_taxes",
    "hsn_grand_total",
    "normalize",
    "paginate",
    "prepare_invoice",
]
