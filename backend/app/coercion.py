"""
coercion.py — Lenient input coercion shared by schemas and services.

The ledger never rejects a malformed amount, date or optional text field.
Each value is coerced to a safe default instead:

  amount      → Decimal, quantized to 2 dp, clamped to >= 0
                (malformed, or above MAX_AMOUNT → 0.00)
  text        → trimmed str (None / unsupported types → "")
  date        → datetime.date or None (caller substitutes today)
  timestamp   → aware UTC datetime or None (caller substitutes now)

Both the marshmallow fields (schemas/fields.py) and the service layer call
these helpers, so a service invoked directly still clamps amounts before
they are persisted.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0.00")
_CENT = Decimal("0.01")

# Largest value a Numeric(12, 2) column stores exactly.
MAX_AMOUNT = Decimal("9999999999.99")


def coerce_amount(value) -> Decimal:
    """
    Returns a non-negative Decimal with exactly 2 decimal places.

    Examples:
        "90000"   → Decimal("90000.00")
        -5        → Decimal("0.00")
        "12abc"   → Decimal("0.00")
        None      → Decimal("0.00")
        16.675    → Decimal("16.68")   (str() of the float, then ROUND_HALF_UP)
        "1e11"    → Decimal("0.00")    (above MAX_AMOUNT)
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    else:
        return ZERO

    if not amount.is_finite() or amount <= 0:
        return ZERO

    try:
        amount = amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # More digits than the decimal context can hold.
        return ZERO

    # Anything the Numeric(12, 2) columns cannot hold exactly is treated
    # like any other unusable amount.
    if amount > MAX_AMOUNT:
        return ZERO
    return amount


def coerce_text(value) -> str:
    """Trimmed string form of scalars; anything else becomes ""."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, (str, int, float, Decimal)):
        return str(value).strip()
    return ""


def coerce_date(value) -> date | None:
    """Accepts date, datetime or an ISO 'YYYY-MM-DD' string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def coerce_timestamp(value) -> datetime | None:
    """
    Accepts datetime, date (midnight) or an ISO timestamp string and returns
    an aware UTC datetime. Inputs without an offset are taken to be UTC, so
    every stored created_at compares on the same clock.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
