"""Data models used across the normalizer, tax engine, aggregator, paginator, CLI, and API."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .utils import field, first_of, nested

GSTIN_KEYS = ("gstin", "gstIn", "gstNumber", "gst_no", "gst", "gstinNumber")
ADDRESS_STATE_KEYS = ("addressState", "address_state", "state")


class EngineModel(BaseModel):
    """Immutable engine output; dumps to camelCase with ``by_alias=True``."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class InputModel(BaseModel):
    """Loosely typed caller input (company, party, addresses)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


class TaxMode(str, Enum):
    NO_TAX = "none"
    INTRA_STATE = "intra_state"
    INTER_STATE = "inter_state"


class UnifiedLineItem(EngineModel):
    item_type: Literal["product", "service"]
    name: str = "Item"
    description: str = ""
    quantity: float = 1.0
    unit: str = "piece"
    price_per_unit: float = 0.0
    amount: float = 0.0
    # zero is stored as None so renderers can drop the tax column
    gst_percentage: Optional[float] = None
    line_tax: float = 0.0
    line_total: float = 0.0
    code: Optional[str] = None


class TaxedLineItem(UnifiedLineItem):
    taxable_value: float = 0.0
    gst_rate: float = 0.0
    cgst: float = 0.0
    sgst: float = 0.0
    igst: float = 0.0
    total: float = 0.0


class TotalsSummary(EngineModel):
    mode: TaxMode
    total_taxable: float = 0.0
    total_cgst: float = 0.0
    total_sgst: float = 0.0
    total_igst: float = 0.0
    total_tax: float = 0.0
    total_amount: float = 0.0
    total_items: int = 0
    total_qty: float = 0.0
    is_gst_applicable: bool = False
    is_interstate: bool = False
    show_igst: bool = False
    show_cgst_sgst: bool = False
    show_no_tax: bool = True


class TaxComputation(EngineModel):
    taxed_lines: Tuple[TaxedLineItem, ...]
    totals: TotalsSummary


class HsnSummaryRow(EngineModel):
    hsn_code: str
    taxable_value: float = 0.0
    tax_rate: float = 0.0
    tax_amount: float = 0.0
    cgst_amount: float = 0.0
    sgst_amount: float = 0.0
    total: float = 0.0


class Page(EngineModel):
    items: Tuple[TaxedLineItem, ...] = ()
    start_index: int = 0
    page_number: int = 1
    total_pages: int = 1
    is_last_page: bool = False


class Company(InputModel):
    name: Optional[str] = Field(default=None, validation_alias=AliasChoices("name", "businessName"))
    gstin: Optional[str] = Field(default=None, validation_alias=AliasChoices(*GSTIN_KEYS))
    address_state: Optional[str] = Field(
        default=None, validation_alias=AliasChoices(*ADDRESS_STATE_KEYS)
    )
    address: Optional[str] = None
    city: Optional[str] = None
    pincode: Optional[str] = None
    phone: Optional[str] = Field(default=None, validation_alias=AliasChoices("phone", "mobileNumber"))
    email: Optional[str] = Field(default=None, validation_alias=AliasChoices("email", "emailId"))
    bank_details: Optional[Union[str, Dict[str, Any]]] = Field(
        default=None, validation_alias=AliasChoices("bankDetails", "bank_details")
    )

    @model_validator(mode="before")
    @classmethod
    def _resolve_fallback_keys(cls, data: Any) -> Any:
        """Take the first non-blank GSTIN (then ``tax.gstin``) and state among the accepted keys."""
        if not isinstance(data, dict):
            return data
        gstin = first_of(*(field(key) for key in GSTIN_KEYS), nested("tax", "gstin"))(data)
        state = first_of(*(field(key) for key in ADDRESS_STATE_KEYS))(data)
        data = {k: v for k, v in data.items() if k not in GSTIN_KEYS and k not in ADDRESS_STATE_KEYS}
        return {**data, "gstin": gstin, "addressState": state}


class Party(InputModel):
    name: Optional[str] = None
    state: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    pincode: Optional[str] = None
    phone: Optional[str] = Field(default=None, validation_alias=AliasChoices("phone", "contactNumber"))
    email: Optional[str] = None
    gstin: Optional[str] = None


class ShippingAddress(InputModel):
    label: Optional[str] = None
    state: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    pincode: Optional[str] = None
    phone: Optional[str] = Field(default=None, validation_alias=AliasChoices("phone", "contactNumber"))


class InvoiceHeader(EngineModel):
    title: str
    invoice_number: str
    date: str = "-"
    due_date: str = "-"
    billing_address: str = ""
    shipping_address: str = ""
    bank_details: str = ""
    show_bank_details: bool = False
    notes: str = ""


class InvoiceComputation(EngineModel):
    """Everything a renderer needs for one invoice."""

    lines: Tuple[UnifiedLineItem, ...]
    taxed_lines: Tuple[TaxedLineItem, ...]
    totals: TotalsSummary
    hsn_rows: Tuple[HsnSummaryRow, ...]
    pages: Tuple[Page, ...]
    header: InvoiceHeader
    amount_in_words: str
    page_size: int


class InvoiceRequest(InputModel):
    """JSON envelope accepted by the CLI and the HTTP API."""

    transaction: Optional[Dict[str, Any]] = None
    company: Company = Field(default_factory=Company)
    party: Optional[Party] = None
    shipping_address: Optional[ShippingAddress] = None
    service_names: Dict[str, str] = Field(default_factory=dict)
    page_size: Optional[int] = None


class ConsistencyReport(EngineModel):
    is_consistent: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
