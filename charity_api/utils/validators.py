"""
Boundary validation helpers: ids, money amounts, pagination and email syntax.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from charity_api.utils.errors import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CENTS = Decimal("0.01")
# NUMERIC(12,2) column limit
MAX_AMOUNT = Decimal("9999999999.99")


def is_valid_email(email) -> bool:
    return isinstance(email, str) and bool(EMAIL_RE.match(email))


def parse_id(value) -> int | None:
    """Parse a path or body id; None when it is not an integer."""
    if isinstance(value, bool):
        return None
    try:
        n = value if isinstance(value, int) else int(str(value).strip())
    except (TypeError, ValueError):
        return None
    # ids are INTEGER columns
    return n if -(2**31) <= n < 2**31 else None


def parse_amount(value) -> Decimal | None:
    """
    Parse a money amount quantized to cents.
    Returns None unless the value is a finite number strictly greater than zero.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    try:
        amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # too many digits to represent in cents
        return None
    if amount <= 0 or amount > MAX_AMOUNT:
        return None
    return amount


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def positive_int(value, default: int, maximum: int | None = None) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return default
    if n <= 0 or (maximum is not None and n > maximum):
        return default
    return n


def json_object(data) -> dict:
    """Request body as a dict; a missing body reads as empty, any non-object is rejected."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data
