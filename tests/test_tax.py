import pytest

from invoice_engine.normalizer import normalize
from invoice_engine.schemas import Company, Party, ShippingAddress, TaxMode
from invoice_engine.tax import TaxEngine, compute_taxes


def _flags(totals):
    return [totals.show_igst, totals.show_cgst_sgst, totals.show_no_tax]


def test_same_state_splits_into_cgst_and_sgst(seller, local_buyer, widget_tx):
    result = compute_taxes(normalize(widget_tx), seller, local_buyer)
    line = result.taxed_lines[0]
    assert result.totals.mode is TaxMode.INTRA_STATE
    assert line.taxable_value == 200
    assert line.gst_rate == 18
    assert line.cgst == pytest.approx(18)
    assert line.sgst == pytest.approx(18)
    assert line.igst == 0
    assert line.total == pytest.approx(236)
    assert _flags(result.totals) == [False, True, False]


def test_different_state_charges_igst(seller, outstation_buyer, widget_tx):
    result = compute_taxes(normalize(widget_tx), seller, outstation_buyer)
    line = result.taxed_lines[0]
    assert result.totals.mode is TaxMode.INTER_STATE
    assert line.igst == pytest.approx(36)
    assert line.cgst == line.sgst == 0
    assert line.total == pytest.approx(236)
    assert result.totals.is_interstate is True
    assert _flags(result.totals) == [True, False, False]


def test_consignee_state_takes_precedence_over_buyer(seller, local_buyer, widget_tx):
    consignee = ShippingAddress(state="Karnataka")
    result = compute_taxes(normalize(widget_tx), seller, local_buyer, consignee)
    assert result.totals.mode is TaxMode.INTER_STATE

    blank_consignee = ShippingAddress(state="  ")
    result = compute_taxes(normalize(widget_tx), seller, local_buyer, blank_consignee)
    assert result.totals.mode is TaxMode.INTRA_STATE


def test_state_comparison_ignores_case_whitespace_and_parenthetical(widget_tx):
    seller = Company(gstin="07AAAAA0000A1Z5", address_state="Delhi (NCT)")
    buyer = Party(state="  delhi ")
    assert compute_taxes(normalize(widget_tx), seller, buyer).totals.mode is TaxMode.INTRA_STATE


def test_missing_buyer_state_defaults_to_interstate(seller, widget_tx):
    """Incomplete address data fails open towards IGST, not CGST+SGST."""
    result = compute_taxes(normalize(widget_tx), seller, Party(name="No State"))
    assert result.totals.mode is TaxMode.INTER_STATE
    assert result.totals.total_igst == pytest.approx(36)


def test_missing_seller_state_defaults_to_interstate(local_buyer, widget_tx):
    seller = Company(gstin="27ABCDE1234F1Z5")
    assert compute_taxes(normalize(widget_tx), seller, local_buyer).totals.mode is TaxMode.INTER_STATE


def test_missing_state_policy_can_be_flipped(seller, widget_tx):
    engine = TaxEngine(assume_interstate_when_unknown=False)
    result = engine.compute(normalize(widget_tx), seller, None)
    assert result.totals.mode is TaxMode.INTRA_STATE


def test_seller_without_gstin_never_charges_gst(unregistered_seller, local_buyer, widget_tx):
    result = compute_taxes(normalize(widget_tx), unregistered_seller, local_buyer)
    line = result.taxed_lines[0]
    assert result.totals.mode is TaxMode.NO_TAX
    assert line.gst_rate == 0
    assert line.cgst == line.sgst == line.igst == 0
    assert line.total == 200
    # the nominal rate is still on the line for reference
    assert line.gst_percentage == 18
    assert _flags(result.totals) == [False, False, True]
    assert result.totals.is_gst_applicable is False


def test_blank_gstin_is_treated_as_missing(local_buyer, widget_tx):
    seller = Company(gstin="   ", address_state="Maharashtra")
    assert compute_taxes(normalize(widget_tx), seller, local_buyer).totals.mode is TaxMode.NO_TAX


def test_zero_rate_lines_are_no_tax_even_with_gstin(seller, local_buyer):
    lines = normalize({"amount": 500, "gstPercentage": 0})
    result = compute_taxes(lines, seller, local_buyer)
    assert result.totals.mode is TaxMode.NO_TAX
    assert result.totals.total_amount == 500


def test_line_tax_alone_makes_gst_applicable(seller, local_buyer):
    lines = normalize({"products": [{"name": "P", "amount": 100, "lineTax": 5}]})
    result = compute_taxes(lines, seller, local_buyer)
    assert result.totals.is_gst_applicable is True
    # no rate on the line, so nothing is computed for it
    assert result.totals.total_tax == 0


def test_gstin_read_from_alternate_keys():
    assert Company.model_validate({"gstNumber": "27X"}).gstin == "27X"
    assert Company.model_validate({"gst_no": "27Y"}).gstin == "27Y"
    assert Company.model_validate({"tax": {"gstin": "27Z"}}).gstin == "27Z"
    assert Company.model_validate({"addressState": "Goa"}).address_state == "Goa"


def test_totals_aggregate_every_line(seller, local_buyer):
    tx = {
        "products": [
            {"name": "A", "quantity": 3, "pricePerUnit": 33.33, "gstPercentage": 12, "hsn": "1001"},
            {"name": "B", "quantity": 1.5, "pricePerUnit": 10.1, "gstPercentage": 5, "hsn": "1002"},
        ],
        "services": [{"serviceName": "Fitting", "amount": 250, "gstPercentage": 18, "sac": "9987"}],
    }
    totals = compute_taxes(normalize(tx), seller, local_buyer).totals
    assert totals.total_items == 3
    assert totals.total_qty == pytest.approx(5.5)
    components = totals.total_taxable + totals.total_cgst + totals.total_sgst + totals.total_igst
    assert abs(totals.total_amount - components) < 1e-6
    assert totals.total_tax == pytest.approx(totals.total_cgst + totals.total_sgst)


def test_repeated_computation_is_identical(seller, outstation_buyer, widget_tx):
    first = compute_taxes(normalize(widget_tx), seller, outstation_buyer)
    second = compute_taxes(normalize(widget_tx), seller, outstation_buyer)
    assert first == second
    assert first.totals.total_amount == second.totals.total_amount


def test_null_gstin_key_falls_through_to_next_key(local_buyer, widget_tx):
    company = Company.model_validate({"gstin": None, "gstNumber": "27ABCDE1234F1Z5", "addressState": "Maharashtra"})
    assert company.gstin == "27ABCDE1234F1Z5"
    result = compute_taxes(normalize(widget_tx), company, local_buyer)
    assert result.totals.mode is TaxMode.INTRA_STATE
    assert result.totals.total_cgst == pytest.approx(18)
    assert result.totals.total_sgst == pytest.approx(18)


def test_blank_gstin_keys_fall_back_to_tax_block():
    company = Company.model_validate({"gstin": "", "gstIn": None, "tax": {"gstin": "24AAACB1234C1Z9"}})
    assert company.gstin == "24AAACB1234C1Z9"


def test_null_address_state_falls_through_to_state():
    company = Company.model_validate({"gstin": "27X", "addressState": None, "state": "Maharashtra"})
    assert company.address_state == "Maharashtra"
