"""Consistency checks across the independently computed views of one invoice."""
from __future__ import annotations

import math
from typing import Dict, List, Set

from .hsn import MISSING_CODE
from .schemas import ConsistencyReport, InvoiceComputation
from .utils import approx_equal, is_blank


class InvoiceConsistencyChecker:
    def __init__(self, tolerance: float = 1e-6) -> None:
        self.tolerance = tolerance

    def check(self, computation: InvoiceComputation) -> ConsistencyReport:
        errors: List[str] = []
        warnings: List[str] = []
        totals = computation.totals
        lines = computation.taxed_lines

        if not lines:
            errors.append("lines: empty")

        # Totals vs their own components
        component_sum = totals.total_taxable + totals.total_cgst + totals.total_sgst + totals.total_igst
        if not approx_equal(totals.total_amount, component_sum, tolerance=self.tolerance):
            errors.append("totals: amount_mismatch")
        if totals.total_items != len(lines):
            errors.append("totals: item_count_mismatch")

        # HSN rows vs totals
        hsn_total = sum(row.total for row in computation.hsn_rows)
        if not approx_equal(hsn_total, totals.total_amount, tolerance=self.tolerance):
            errors.append("hsn: total_mismatch")

        rates: Dict[str, Set[float]] = {}
        for line in lines:
            code = MISSING_CODE if is_blank(line.code) else line.code
            rates.setdefault(code, set()).add(line.gst_rate)
        for code, seen in rates.items():
            if len(seen) > 1:
                warnings.append(f"hsn: mixed_rates:{code}")

        # Pages vs lines
        paged = [item for page in computation.pages for item in page.items]
        if paged != list(lines):
            errors.append("pages: incomplete")
        expected_pages = max(1, math.ceil(len(lines) / computation.page_size))
        if len(computation.pages) != expected_pages:
            errors.append("pages: count_mismatch")
        flags = [page.is_last_page for page in computation.pages]
        if flags.count(True) != 1 or not flags[-1]:
            errors.append("pages: last_page_flag")

        # Mode flags
        if [totals.show_igst, totals.show_cgst_sgst, totals.show_no_tax].count(True) != 1:
            errors.append("mode: not_exclusive")

        return ConsistencyReport(is_consistent=not errors, errors=errors, warnings=warnings)
