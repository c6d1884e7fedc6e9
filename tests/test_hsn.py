import pytest

from invoice_engine.hsn import hsn_grand_total, summarize_by_code
from invoice_engine.normalizer import normalize
from invoice_engine.schemas import TaxMode
from invoice_engine.tax import compute_taxes

MIXED_TX = {
    "products": [
        {"name": "Pen", "quantity": 10, "pricePerUnit": 10, "gstPercentage": 12, "hsn": "9608"},
        {"name": "Paper", "quantity": 2, "pricePerUnit": 250, "gstPercentage": 18, "hsn": "4802"},
        {"name": "Marker", "quantity": 5, "pricePerUnit": 20, "gstPercentage": 12, "hsn": "9608"},
        {"name": "Loose item", "amount": 40, "gstPercentage": 5},
    ],
    "services": [{"serviceName": "Delivery", "amount": 60, "gstPercentage": 18}],
}


def test_groups_in_first_seen_order_with_sentinel_for_missing_code(seller, local_buyer):
    taxed = compute_taxes(normalize(MIXED_TX), seller, local_buyer)
    rows = summarize_by_code(taxed.taxed_lines, taxed.totals.mode)
    assert [row.hsn_code for row in rows] == ["9608", "4802", "-"]

    pens = rows[0]
    assert pens.taxable_value == pytest.approx(200)
    assert pens.tax_rate == 12
    assert pens.cgst_amount == pytest.approx(12)
    assert pens.sgst_amount == pytest.approx(12)
    assert pens.tax_amount == pytest.approx(24)
    assert pens.total == pytest.approx(224)


def test_missing_code_group_uses_first_member_rate(seller, local_buyer):
    taxed = compute_taxes(normalize(MIXED_TX), seller, local_buyer)
    rows = summarize_by_code(taxed.taxed_lines, taxed.totals.mode)
    loose = rows[-1]
    assert loose.tax_rate == 5
    assert loose.taxable_value == pytest.approx(100)


def test_interstate_rows_report_igst_as_tax_amount(seller, outstation_buyer):
    taxed = compute_taxes(normalize(MIXED_TX), seller, outstation_buyer)
    rows = summarize_by_code(taxed.taxed_lines, TaxMode.INTER_STATE)
    paper = rows[1]
    assert paper.tax_amount == pytest.approx(90)
    assert paper.cgst_amount == 0
    assert paper.sgst_amount == 0


def test_no_tax_rows_carry_zero_tax(unregistered_seller, local_buyer):
    taxed = compute_taxes(normalize(MIXED_TX), unregistered_seller, local_buyer)
    rows = summarize_by_code(taxed.taxed_lines, TaxMode.NO_TAX)
    assert all(row.tax_amount == 0 and row.tax_rate == 0 for row in rows)
    assert rows[0].total == pytest.approx(200)


@pytest.mark.parametrize("buyer_fixture", ["local_buyer", "outstation_buyer"])
def test_row_totals_add_up_to_invoice_total(request, seller, buyer_fixture):
    buyer = request.getfixturevalue(buyer_fixture)
    taxed = compute_taxes(normalize(MIXED_TX), seller, buyer)
    rows = summarize_by_code(taxed.taxed_lines, taxed.totals.mode)
    assert abs(sum(row.total for row in rows) - taxed.totals.total_amount) < 1e-6


def test_aggregator_does_not_append_grand_total(seller, local_buyer):
    taxed = compute_taxes(normalize(MIXED_TX), seller, local_buyer)
    rows = summarize_by_code(taxed.taxed_lines, taxed.totals.mode)
    assert "Total" not in [row.hsn_code for row in rows]

    footer = hsn_grand_total(rows)
    assert footer.hsn_code == "Total"
    assert footer.total == pytest.approx(taxed.totals.total_amount)
    assert footer.taxable_value == pytest.approx(taxed.totals.total_taxable)


def test_empty_input_gives_no_rows():
    assert summarize_by_code([], TaxMode.NO_TAX) == []
