"""Line normalizer: raw transaction -> ordered list of unified line items.

A transaction may carry ``products``, ``services`` and a legacy singular
``service`` array, each with its own loose field naming. They are flattened
in that order (input order kept within each group) so that serial numbers on
the printed invoice stay stable. A transaction with no item arrays at all is
represented by a single service line built from its scalar amount fields.

Nothing here raises on bad data: blanks and garbage fall back to defaults.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from .schemas import UnifiedLineItem
from .utils import Accessor, field, first_of, is_blank, nested, to_number

logger = logging.getLogger(__name__)

ITEM_GROUPS = (
    ("products", "product"),
    ("services", "service"),
    ("service", "service"),  # legacy
)
DEFAULT_NAME = "Item"
DEFAULT_UNIT = "piece"

_product_name = first_of(
    field("name"),
    field("productName"),
    nested("product", "name"),
)


def _service_id_lookup(service_name_by_id: Optional[Mapping[str, str]]) -> Accessor:
    def read(row: Any) -> Any:
        service = row.get("service") if isinstance(row, Mapping) else None
        if not service_name_by_id or is_blank(service) or isinstance(service, Mapping):
            return None
        return service_name_by_id.get(str(service))

    return read


def resolve_name(row: Mapping[str, Any], item_type: str, service_name_by_id: Optional[Mapping[str, str]] = None) -> str:
    if item_type == "service":
        resolver = first_of(
            _product_name,
            field("serviceName"),
            nested("service", "serviceName"),
            _service_id_lookup(service_name_by_id),
        )
    else:
        resolver = _product_name
    name = resolver(row)
    return str(name).strip() if name is not None else DEFAULT_NAME


def resolve_unit(row: Mapping[str, Any]) -> str:
    unit_type = row.get("unitType")
    other_unit = row.get("otherUnit")
    if unit_type == "Other" and not is_blank(other_unit):
        return str(other_unit).strip()
    if not is_blank(unit_type) and unit_type != "Other":
        return str(unit_type).strip()
    unit = first_of(field("unit"), field("unitName"))(row)
    return str(unit).strip() if unit is not None else DEFAULT_UNIT


def _code(value: Any) -> Optional[str]:
    if is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def normalize_row(row: Mapping[str, Any], item_type: str, service_name_by_id: Optional[Mapping[str, str]] = None) -> UnifiedLineItem:
    """Build one unified line from a raw product or service row."""
    is_service = item_type == "service"

    quantity = 1.0 if is_service else to_number(row.get("quantity"), 1.0)
    amount = to_number(row.get("amount")) or to_number(row.get("pricePerUnit")) * quantity
    price_per_unit = to_number(row.get("pricePerUnit")) or (amount / quantity if quantity > 0 else 0.0)

    gst_percentage = to_number(row.get("gstPercentage"))
    line_tax = to_number(row.get("lineTax"))
    line_total = to_number(row.get("lineTotal")) or amount + line_tax

    description = row.get("description")
    return UnifiedLineItem(
        item_type=item_type,
        name=resolve_name(row, item_type, service_name_by_id),
        description="" if is_blank(description) else str(description),
        quantity=quantity,
        unit=resolve_unit(row),
        price_per_unit=max(price_per_unit, 0.0),
        amount=amount,
        gst_percentage=gst_percentage if gst_percentage > 0 else None,
        line_tax=line_tax,
        line_total=line_total,
        code=_code(row.get("sac") if is_service else row.get("hsn")),
    )


def synthesize_line(tx: Mapping[str, Any]) -> UnifiedLineItem:
    """Single service line standing in for a transaction with no item arrays."""
    amount = to_number(tx.get("amount"))
    gst_percentage = to_number(tx.get("gstPercentage"))
    line_tax = to_number(tx.get("lineTax")) or amount * gst_percentage / 100
    line_total = to_number(tx.get("totalAmount")) or amount + line_tax
    description = tx.get("description")
    return UnifiedLineItem(
        item_type="service",
        name=DEFAULT_NAME if is_blank(description) else str(description).strip(),
        description="",
        quantity=1.0,
        unit=DEFAULT_UNIT,
        price_per_unit=max(amount, 0.0),
        amount=amount,
        gst_percentage=gst_percentage if gst_percentage > 0 else None,
        line_tax=line_tax,
        line_total=line_total,
        code=None,
    )


def normalize(tx: Optional[Mapping[str, Any]], service_name_by_id: Optional[Mapping[str, str]] = None) -> List[UnifiedLineItem]:
    """Flatten a raw transaction into unified line items.

    Returns ``[]`` only for a missing transaction; any mapping, even ``{}``,
    yields at least one line.
    """
    if tx is None:
        logger.error("normalize called without a transaction; returning no lines")
        return []

    lines: List[UnifiedLineItem] = []
    for key, item_type in ITEM_GROUPS:
        rows = tx.get(key)
        if not isinstance(rows, list):
            if rows is not None:
                logger.debug("ignoring non-list %r field of type %s", key, type(rows).__name__)
            continue
        for row in rows:
            if not isinstance(row, Mapping):
                logger.debug("skipping non-mapping entry in %r: %r", key, row)
                continue
            lines.append(normalize_row(row, item_type, service_name_by_id))

    if not lines:
        logger.debug("no item rows found; synthesizing a line from transaction amounts")
        lines.append(synthesize_line(tx))
    return lines
