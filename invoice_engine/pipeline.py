"""One-call composition: raw transaction -> lines, taxes, HSN rows, pages and header."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .config import EngineSettings, get_settings
from .formatters import amount_in_words_label
from .header import build_header
from .hsn import summarize_by_code
from .normalizer import normalize
from .paginator import paginate
from .schemas import Company, InvoiceComputation, InvoiceRequest, Party, ShippingAddress, UnifiedLineItem
from .tax import TaxEngine

logger = logging.getLogger(__name__)


def placeholder_line() -> UnifiedLineItem:
    """Zero-amount row so an invoice without a transaction still has a table."""
    return UnifiedLineItem(item_type="service")


def prepare_invoice(
    tx: Optional[Mapping[str, Any]],
    company: Company,
    party: Optional[Party] = None,
    consignee: Optional[ShippingAddress] = None,
    service_name_by_id: Optional[Mapping[str, str]] = None,
    page_size: Optional[int] = None,
    settings: Optional[EngineSettings] = None,
) -> InvoiceComputation:
    settings = settings or get_settings()
    page_size = settings.default_page_size if page_size is None else page_size

    lines = normalize(tx, service_name_by_id)
    if not lines:
        logger.warning("no transaction data; rendering a zero-amount placeholder line")
        lines = [placeholder_line()]

    engine = TaxEngine(assume_interstate_when_unknown=settings.assume_interstate_when_unknown)
    taxed = engine.compute(lines, company, party, consignee)
    hsn_rows = summarize_by_code(taxed.taxed_lines, taxed.totals.mode)
    pages = paginate(taxed.taxed_lines, page_size)

    return InvoiceComputation(
        lines=tuple(lines),
        taxed_lines=taxed.taxed_lines,
        totals=taxed.totals,
        hsn_rows=tuple(hsn_rows),
        pages=tuple(pages),
        header=build_header(tx, company, party, consignee, taxed.totals.is_gst_applicable),
        amount_in_words=amount_in_words_label(taxed.totals.total_amount),
        page_size=page_size,
    )


def prepare_from_request(request: InvoiceRequest, settings: Optional[EngineSettings] = None) -> InvoiceComputation:
    return prepare_invoice(
        request.transaction,
        request.company,
        party=request.party,
        consignee=request.shipping_address,
        service_name_by_id=request.service_names,
        page_size=request.page_size,
        settings=settings,
    )
