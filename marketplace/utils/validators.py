import re
from typing import Optional, Tuple

from marketplace.config.constants import (
    CENTS_PER_UNIT,
    MAX_FRACTION_CENTS,
    MAX_STORED_INT,
    MIN_STORED_INT,
)

# leading integer, same as scanning "%d"; ASCII digits only
LEADING_INT_REGEX = re.compile(r"\s*([+-]?[0-9]+)")
# units, optionally followed by "." and a count of hundredths
PRICE_REGEX = re.compile(r"\s*([+-]?[0-9]+)(?:\.\s*([+-]?[0-9]+))?")
DIGITS_REGEX = re.compile(r"[0-9]+")


def fits_stored_int(value: int) -> bool:
    return MIN_STORED_INT <= value <= MAX_STORED_INT


def parse_int(raw: str, default: int = 0) -> int:
    match = LEADING_INT_REGEX.match(raw or "")
    if not match:
        return default
    value = int(match.group(1))
    if not fits_stored_int(value):
        return default
    return value


def parse_price_cents(raw: str) -> int:
    """
    "12.345" -> 1299, "12" -> 1200, "12,50" -> 1250.

    Digits after the separator are read as an integer count of
    hundredths and clamped to 99, so "12.5" is 1205 rather than 1250.
    Amounts that do not fit a stored integer read as 0.
    """
    price = (raw or "").strip().replace(",", ".")
    match = PRICE_REGEX.match(price)
    if not match:
        return 0

    units = int(match.group(1))
    hundredths = int(match.group(2)) if match.group(2) is not None else 0
    if hundredths > MAX_FRACTION_CENTS:
        hundredths = MAX_FRACTION_CENTS
    cents = units * CENTS_PER_UNIT + hundredths
    if not fits_stored_int(cents):
        return 0
    return cents


def parse_stock(raw: str) -> int:
    return max(parse_int((raw or "").strip()), 0)


def format_price(cents: int) -> str:
    return f"{cents / CENTS_PER_UNIT:.2f}"


# -----------------------
# IDENTITY
# -----------------------

def split_contact(contact: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Registration contact is an email when it contains "@", a phone otherwise.
    Returns (email, phone).
    """
    if "@" in contact:
        return contact, None
    return None, contact


def identifier_field(identifier: str) -> str:
    """
    Which user field a login identifier refers to.
    """
    if "@" in identifier:
        return "email"
    if identifier.startswith("+") or DIGITS_REGEX.fullmatch(identifier):
        return "phone"
    return "username"
