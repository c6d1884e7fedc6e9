"""HSN/SAC summary: taxed lines grouped by classification code."""
from __future__ import annotations

from typing import Dict, Iterable, List

from .schemas import HsnSummaryRow, TaxedLineItem, TaxMode
from .utils import is_blank

MISSING_CODE = "-"
TOTAL_CODE = "Total"


class _Group:
    __slots__ = ("code", "tax_rate", "taxable_value", "tax_amount", "cgst_amount", "sgst_amount", "total")

    def __init__(self, code: str, tax_rate: float) -> None:
        self.code = code
        self.tax_rate = tax_rate
        self.taxable_value = 0.0
        self.tax_amount = 0.0
        self.cgst_amount = 0.0
        self.sgst_amount = 0.0
        self.total = 0.0

    def to_row(self) -> HsnSummaryRow:
        return HsnSummaryRow(
            hsn_code=self.code,
            taxable_value=self.taxable_value,
            tax_rate=self.tax_rate,
            tax_amount=self.tax_amount,
            cgst_amount=self.cgst_amount,
            sgst_amount=self.sgst_amount,
            total=self.total,
        )


def summarize_by_code(taxed_lines: Iterable[TaxedLineItem], mode: TaxMode) -> List[HsnSummaryRow]:
    """One row per HSN/SAC code, in the order codes first appear.

    Lines without a code share the ``"-"`` row. The rate shown for a group is
    its first member's; mixed-rate groups are reported by the consistency
    checker, not corrected here. No grand-total row is added (see
    :func:`hsn_grand_total`).
    """
    groups: Dict[str, _Group] = {}
    for line in taxed_lines:
        code = MISSING_CODE if is_blank(line.code) else line.code
        group = groups.get(code)
        if group is None:
            group = groups[code] = _Group(code, line.gst_rate)

        group.taxable_value += line.taxable_value
        if mode is TaxMode.INTER_STATE:
            group.tax_amount += line.igst
        elif mode is TaxMode.INTRA_STATE:
            group.cgst_amount += line.cgst
            group.sgst_amount += line.sgst
            group.tax_amount += line.cgst + line.sgst
        group.total += line.total

    return [group.to_row() for group in groups.values()]


def hsn_grand_total(rows: Iterable[HsnSummaryRow]) -> HsnSummaryRow:
    """Footer row summing every group; for presentation code."""
    rows = list(rows)
    return HsnSummaryRow(
        hsn_code=TOTAL_CODE,
        taxable_value=sum(row.taxable_value for row in rows),
        tax_rate=0.0,
        tax_amount=sum(row.tax_amount for row in rows),
        cgst_amount=sum(row.cgst_amount for row in rows),
        sgst_amount=sum(row.sgst_amount for row in rows),
        total=sum(row.total for row in rows),
    )
