"""Pure formatting helpers: currency, words, quantity, phone, dates, and state codes."""
from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from num2words import num2words

from .utils import is_blank, parse_date, safe_decimal

STATE_CODES = {
    "jammu & kashmir": "01",
    "himachal pradesh": "02",
    "punjab": "03",
    "chandigarh": "04",
    "uttarakhand": "05",
    "haryana": "06",
    "delhi": "07",
    "rajasthan": "08",
    "uttar pradesh": "09",
    "bihar": "10",
    "sikkim": "11",
    "arunachal pradesh": "12",
    "nagaland": "13",
    "manipur": "14",
    "mizoram": "15",
    "tripura": "16",
    "meghalaya": "17",
    "assam": "18",
    "west bengal": "19",
    "jharkhand": "20",
    "odisha": "21",
    "chhattisgarh": "22",
    "madhya pradesh": "23",
    "gujarat": "24",
    "daman & diu": "25",
    "dadra & nagar haveli": "26",
    "maharashtra": "27",
    "andhra pradesh": "28",
    "karnataka": "29",
    "goa": "30",
    "lakshadweep": "31",
    "kerala": "32",
    "tamil nadu": "33",
    "puducherry": "34",
    "andaman & nicobar islands": "35",
    "telangana": "36",
    "ladakh": "37",
}

# unit -> (singular, plural) short forms
UNIT_FORMS = {
    "piece": ("Pc", "Pcs"),
    "kilogram": ("Kg", "Kgs"),
    "kg": ("Kg", "Kgs"),
    "gram": ("g", "g"),
    "g": ("g", "g"),
    "litre": ("Ltr", "Ltrs"),
    "ltr": ("Ltr", "Ltrs"),
    "box": ("Box", "Boxes"),
    "bag": ("Bag", "Bags"),
    "packet": ("Pkt", "Pkts"),
    "pkt": ("Pkt", "Pkts"),
    "dozen": ("dz", "dz"),
    "meter": ("m", "m"),
    "m": ("m", "m"),
    "foot": ("ft", "ft"),
    "ft": ("ft", "ft"),
    "unit": ("Unit", "Units"),
}

CRORE = 10_000_000
CENT = Decimal("0.01")
TRAILING_PAREN_RE = re.compile(r"\s*\([^)]*\)\s*$")


def normalize_state(state: Optional[str]) -> str:
    """Lower-case, trim, and drop a trailing parenthetical such as ``(NCT)``."""
    if is_blank(state):
        return ""
    return TRAILING_PAREN_RE.sub("", str(state).strip().lower()).strip()


def state_code(state_name: Optional[str]) -> Optional[str]:
    """Two-digit GST state code for an Indian state name, or None if unknown."""
    key = normalize_state(state_name)
    if not key:
        return None
    key = re.sub(r"\s+and\s+", " & ", key)
    key = re.sub(r"\s+", " ", key)
    return STATE_CODES.get(key)


def state_code_from_gstin(gstin: Optional[str]) -> Optional[str]:
    """Extract the state code (first two digits) from a GSTIN."""
    if is_blank(gstin):
        return None
    prefix = str(gstin).strip()[:2]
    return prefix if len(prefix) == 2 and prefix.isdigit() else None


def format_currency(value: Any) -> str:
    """Render ``value`` with two decimals and Indian digit grouping (``12,34,567.89``)."""
    amount = safe_decimal(value)
    if amount is None:
        amount = Decimal(0)
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    integer, _, fraction = f"{abs(amount):.2f}".partition(".")
    return f"{sign}{_group_indian(integer)}.{fraction}"


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def _spell(n: int) -> str:
    crores, rest = divmod(n, CRORE)
    # num2words stops below ten thousand crore
    if crores >= 1000:
        head = f"{_spell(crores)} Crore"
        return f"{head} {_spell(rest)}" if rest else head
    text = num2words(n, lang="en_IN").replace("-", " ").replace(",", " ")
    return " ".join(word.capitalize() for word in text.split() if word != "and")


def amount_to_words(value: Any) -> str:
    """Spell an amount using the Indian numbering scale.

    >>> amount_to_words(125050.5)
    'One Lakh Twenty Five Thousand Fifty and Fifty Paise'
    """
    amount = safe_decimal(value)
    if amount is None:
        return "Zero"
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    prefix = "Minus " if amount < 0 else ""
    amount = abs(amount)
    rupees = int(amount)
    paise = int((amount - rupees) * 100)
    words = _spell(rupees)
    if paise:
        words = f"{words} and {_spell(paise)} Paise"
    if words == "Zero":
        return words
    return prefix + words


def amount_in_words_label(value: Any) -> str:
    """Invoice footer wording, e.g. ``Rupees Five Hundred Only``."""
    return f"Rupees {amount_to_words(value)} Only"


def format_quantity(quantity: Any, unit: Optional[str] = None) -> str:
    """``"<quantity> <unit>"`` with trailing zeros trimmed and known units abbreviated.

    >>> format_quantity(3, "piece")
    '3 Pcs'
    >>> format_quantity(1, "kgs")
    '1 Kg'
    """
    number = safe_decimal(quantity)
    if number is None:
        text = "-"
    else:
        text = f"{number.quantize(Decimal('0.001'), rounding=ROUND_HALF_UP):f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        if text == "-0":
            text = "0"
    if is_blank(unit):
        return text
    label = str(unit).strip()
    key = label.lower()
    forms = UNIT_FORMS.get(key) or (UNIT_FORMS.get(key[:-1]) if key.endswith("s") else None)
    if forms is None:
        return f"{text} {label}"
    singular, plural = forms
    return f"{text} {singular if text == '1' else plural}"


def format_phone(phone: Any) -> str:
    """Keep the digits (and a leading ``+``) of a phone number; ``-`` when absent."""
    if is_blank(phone):
        return "-"
    raw = str(phone).strip()
    digits = re.sub(r"\D", "", raw)
    if not digits:
        return "-"
    return f"+{digits}" if raw.startswith("+") else digits


def format_date(value: Any) -> str:
    """Render a date as ``DD/MM/YYYY``; ``-`` when absent or unparseable."""
    parsed = parse_date(value)
    if parsed is None:
        return "-"
    return parsed.strftime("%d/%m/%Y")
