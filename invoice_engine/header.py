"""Invoice header fields derived from the transaction, seller, buyer and consignee."""
from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from .formatters import format_date
from .schemas import Company, InvoiceHeader, Party, ShippingAddress
from .utils import is_blank

ADDRESS_UNAVAILABLE = "Address not available"
BANK_UNAVAILABLE = "Bank details not available"


def _join(*parts: Any) -> str:
    return ", ".join(str(part).strip() for part in parts if not is_blank(part))


def is_proforma(tx: Optional[Mapping[str, Any]]) -> bool:
    return bool(tx) and str(tx.get("type") or "").strip().lower() == "proforma"


def invoice_number(tx: Optional[Mapping[str, Any]]) -> str:
    tx = tx or {}
    for key in ("invoiceNumber", "referenceNumber"):
        if not is_blank(tx.get(key)):
            return str(tx[key]).strip()
    suffix = str(tx.get("_id") or "")[-6:].upper()
    return f"INV-{suffix or '000000'}"


def document_title(tx: Optional[Mapping[str, Any]], is_gst_applicable: bool) -> str:
    if is_proforma(tx):
        return "PROFORMA INVOICE"
    return "TAX INVOICE" if is_gst_applicable else "INVOICE"


def billing_address(party: Optional[Union[Party, Company]]) -> str:
    if party is None:
        return ADDRESS_UNAVAILABLE
    state = party.address_state if isinstance(party, Company) else party.state
    return _join(party.address, party.city, state, party.pincode)


def shipping_address(consignee: Optional[ShippingAddress], billing: Optional[str] = None) -> str:
    if consignee is None:
        return billing or ADDRESS_UNAVAILABLE
    return _join(consignee.address, consignee.city, consignee.state, consignee.pincode)


def bank_details_text(bank: Union[str, Mapping[str, Any], None]) -> str:
    if is_blank(bank) or (isinstance(bank, Mapping) and not bank):
        return BANK_UNAVAILABLE
    if isinstance(bank, str):
        return bank.strip()
    ifsc = bank.get("ifscCode")
    return _join(
        bank.get("bankName"),
        bank.get("branchAddress"),
        bank.get("city"),
        f"IFSC: {ifsc}" if not is_blank(ifsc) else None,
    ) or BANK_UNAVAILABLE


def show_bank_details(tx: Optional[Mapping[str, Any]], company: Company) -> bool:
    """Bank block is printed for real invoices from a company that has bank details."""
    if is_proforma(tx):
        return False
    return bank_details_text(company.bank_details) != BANK_UNAVAILABLE


def build_header(
    tx: Optional[Mapping[str, Any]],
    company: Company,
    party: Optional[Party] = None,
    consignee: Optional[ShippingAddress] = None,
    is_gst_applicable: bool = False,
) -> InvoiceHeader:
    tx = tx or {}
    billing = billing_address(party)
    notes = tx.get("notes")
    return InvoiceHeader(
        title=document_title(tx, is_gst_applicable),
        invoice_number=invoice_number(tx),
        date=format_date(tx.get("date")),
        due_date=format_date(tx.get("dueDate")),
        billing_address=billing,
        shipping_address=shipping_address(consignee, billing),
        bank_details=bank_details_text(company.bank_details),
        show_bank_details=show_bank_details(tx, company),
        notes="" if is_blank(notes) else str(notes),
    )
