"""Amount parsing utilities."""
import logging
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

logger = logging.getLogger(__name__)

# Leading numeric prefix, the way a browser's parseFloat reads "12.5abc" as 12.5
_NUMERIC_PREFIX = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

CENT = Decimal("0.01")

# Largest magnitude accepted for a single entered amount
MAX_AMOUNT = Decimal("1e12")


def parse_amount(value: Any) -> Decimal:
    """
    Permissively parse a user-entered amount.

    Numbers pass through; strings are read up to the first non-numeric
    character. Anything unparseable (empty, None, "abc", NaN) becomes zero
    rather than raising.

    Args:
        value: Raw amount as submitted by the client

    Returns:
        Decimal amount, Decimal("0") when nothing numeric could be read
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")

    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")

    if isinstance(value, (int, float)):
        parsed = Decimal(str(value))
        return parsed if parsed.is_finite() else Decimal("0")

    text = str(value).strip()
    match = _NUMERIC_PREFIX.match(text)
    if not match:
        logger.warning("Non-numeric amount coerced to zero", extra={"raw_amount": text[:32]})
        return Decimal("0")

    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        logger.warning("Non-numeric amount coerced to zero", extra={"raw_amount": text[:32]})
        return Decimal("0")


def quantize_cents(value: Decimal) -> Decimal:
    """Round to two decimal places, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer with halves going up (0.5 -> 1)."""
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))
