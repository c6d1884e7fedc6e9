"""GST engine deciding the transaction-wide tax mode and computing per-line and total tax."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from .formatters import normalize_state
from .schemas import (
    Company,
    Party,
    ShippingAddress,
    TaxComputation,
    TaxedLineItem,
    TaxMode,
    TotalsSummary,
    UnifiedLineItem,
)
from .utils import is_blank

logger = logging.getLogger(__name__)


def recipient_state(buyer: Optional[Party], consignee: Optional[ShippingAddress]) -> Optional[str]:
    """State goods are delivered to: the consignee's when known, else the buyer's."""
    if consignee is not None and not is_blank(consignee.state):
        return consignee.state
    if buyer is not None and not is_blank(buyer.state):
        return buyer.state
    return None


class TaxEngine:
    def __init__(self, assume_interstate_when_unknown: bool = True) -> None:
        self.assume_interstate_when_unknown = assume_interstate_when_unknown

    def is_gst_applicable(self, lines: Iterable[UnifiedLineItem], seller: Company) -> bool:
        # an unregistered seller never charges GST, whatever the lines say
        if is_blank(seller.gstin):
            return False
        lines = list(lines)
        total_tax = sum(line.line_tax for line in lines)
        has_rate = any((line.gst_percentage or 0) > 0 for line in lines)
        return total_tax > 0 or has_rate

    def is_interstate(
        self,
        seller: Company,
        buyer: Optional[Party] = None,
        consignee: Optional[ShippingAddress] = None,
    ) -> bool:
        supplier = normalize_state(seller.address_state)
        recipient = normalize_state(recipient_state(buyer, consignee))
        if not supplier or not recipient:
            return self.assume_interstate_when_unknown
        return supplier != recipient

    def decide_mode(
        self,
        lines: Iterable[UnifiedLineItem],
        seller: Company,
        buyer: Optional[Party] = None,
        consignee: Optional[ShippingAddress] = None,
    ) -> TaxMode:
        if not self.is_gst_applicable(lines, seller):
            return TaxMode.NO_TAX
        if self.is_interstate(seller, buyer, consignee):
            return TaxMode.INTER_STATE
        return TaxMode.INTRA_STATE

    def tax_line(self, line: UnifiedLineItem, mode: TaxMode) -> TaxedLineItem:
        taxable_value = line.amount
        gst_rate = 0.0 if mode is TaxMode.NO_TAX else (line.gst_percentage or 0.0)
        cgst = sgst = igst = 0.0
        if mode is TaxMode.INTER_STATE:
            igst = taxable_value * gst_rate / 100
        elif mode is TaxMode.INTRA_STATE:
            cgst = taxable_value * (gst_rate / 2) / 100
            sgst = taxable_value * (gst_rate / 2) / 100
        return TaxedLineItem(
            **line.model_dump(),
            taxable_value=taxable_value,
            gst_rate=gst_rate,
            cgst=cgst,
            sgst=sgst,
            igst=igst,
            total=taxable_value + igst + cgst + sgst,
        )

    def compute(
        self,
        lines: Iterable[UnifiedLineItem],
        seller: Company,
        buyer: Optional[Party] = None,
        consignee: Optional[ShippingAddress] = None,
    ) -> TaxComputation:
        lines = list(lines)
        mode = self.decide_mode(lines, seller, buyer, consignee)
        logger.debug("tax mode %s for %d line(s)", mode.value, len(lines))

        taxed_lines = tuple(self.tax_line(line, mode) for line in lines)

        total_taxable = sum(line.taxable_value for line in taxed_lines)
        total_cgst = sum(line.cgst for line in taxed_lines)
        total_sgst = sum(line.sgst for line in taxed_lines)
        total_igst = sum(line.igst for line in taxed_lines)

        totals = TotalsSummary(
            mode=mode,
            total_taxable=total_taxable,
            total_cgst=total_cgst,
            total_sgst=total_sgst,
            total_igst=total_igst,
            total_tax=total_cgst + total_sgst + total_igst,
            total_amount=sum(line.total for line in taxed_lines),
            total_items=len(taxed_lines),
            total_qty=sum(line.quantity for line in taxed_lines),
            is_gst_applicable=mode is not TaxMode.NO_TAX,
            is_interstate=mode is TaxMode.INTER_STATE,
            show_igst=mode is TaxMode.INTER_STATE,
            show_cgst_sgst=mode is TaxMode.INTRA_STATE,
            show_no_tax=mode is TaxMode.NO_TAX,
        )
        return TaxComputation(taxed_lines=taxed_lines, totals=totals)


def compute_taxes(
    lines: Iterable[UnifiedLineItem],
    seller: Company,
    buyer: Optional[Party] = None,
    consignee: Optional[ShippingAddress] = None,
    assume_interstate_when_unknown: bool = True,
) -> TaxComputation:
    """Tax ``lines`` for a sale from ``seller`` to ``buyer`` (shipped to ``consignee``)."""
    engine = TaxEngine(assume_interstate_when_unknown=assume_interstate_when_unknown)
    return engine.compute(lines, seller, buyer, consignee)
