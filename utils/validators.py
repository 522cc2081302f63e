"""Input validators for checkout and catalog payloads."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from .errors import ValidationError

CARD_NUMBER_RE = re.compile(r"[0-9]{16}")
PHONE_CHARS_RE = re.compile(r"\+?[0-9\s\-()]+", re.ASCII)
NON_DIGIT_RE = re.compile(r"[^0-9]")
DIGITS_RE = re.compile(r"[0-9]+")

PHONE_MIN_DIGITS = 8
PHONE_MAX_DIGITS = 15

# Largest value SQLite and most SQL backends store in an INTEGER column.
MAX_STORED_INT = 2**63 - 1


def is_valid_card_number(value: object) -> bool:
    """Return True for exactly sixteen ASCII digits. No checksum is applied."""

    if value is None or isinstance(value, bool):
        return False
    return CARD_NUMBER_RE.fullmatch(str(value)) is not None


def normalize_phone(value: object) -> str:
    return "" if value is None else str(value).strip()


def is_valid_phone(value: object) -> bool:
    """Return True when the phone uses allowed characters and has 8 to 15 digits."""

    phone = normalize_phone(value)
    if not PHONE_CHARS_RE.fullmatch(phone):
        return False
    digits = NON_DIGIT_RE.sub("", phone)
    return PHONE_MIN_DIGITS <= len(digits) <= PHONE_MAX_DIGITS


def parse_positive_int(value: object) -> int | None:
    """Return a positive integral id that fits a 64-bit INTEGER column, else None."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        number = int(value)
    else:
        text = str(value).strip()
        if not DIGITS_RE.fullmatch(text):
            return None
        number = int(text)
    return number if 0 < number <= MAX_STORED_INT else None


def is_storable_id(value: int) -> bool:
    return 0 < value <= MAX_STORED_INT


def parse_quantity(value: object) -> int:
    """Return the requested quantity floored to a minimum of one.

    Raises ``ValidationError`` when the quantity does not fit an INTEGER column.
    """

    if value is None or isinstance(value, bool):
        return 1
    try:
        number = int(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return 1
    if number > MAX_STORED_INT:
        raise ValidationError("Quantity is too large.")
    return max(number, 1)


def parse_price(value: object) -> Decimal | None:
    """Return a non-negative decimal price, or None when the value is not one."""

    if value is None or isinstance(value, bool) or value == "":
        return None
    try:
        price = Decimal(str(value))
    except (InvalidOperation, TypeError):
        return None
    if not price.is_finite() or price < 0:
        return None
    return price.quantize(Decimal("0.01"))
