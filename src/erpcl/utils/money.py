"""Chilean peso parsing, rounding and formatting.

Pesos have no decimal subunit, so every amount is held as an int and every
product of a quantity and a price is rounded half-up back to whole pesos.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

IVA_RATE = Decimal("0.19")

# Form input beyond these bounds is treated like unparseable input.
MAX_PESOS = 10**15
MAX_QUANTITY = Decimal(10**9)


def round_pesos(value: Decimal | int | float | str) -> int:
    """Round an amount half-up to whole pesos.

    Raises:
        ValueError: If the amount is not a number or has too many digits
    """
    try:
        return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        raise ValueError(f"Amount out of range: '{value}'")


def line_total(quantity: Decimal | int | str, unit_price: int) -> int:
    """Return ``quantity * unit_price`` in whole pesos."""
    return round_pesos(Decimal(str(quantity)) * unit_price)


def iva(subtotal: int, rate: Decimal = IVA_RATE) -> int:
    """Return the IVA (VAT) charged on a subtotal."""
    return round_pesos(Decimal(subtotal) * rate)


def parse_pesos(amount_str: str) -> int:
    """Parse a peso amount string into an int.

    Handles various formats:
    - "119000"
    - "$119.000" (es-CL thousands separator)
    - "-$1.234.567"
    - "(5.000)" (negative in parentheses)
    - "1234,5" (decimal comma, rounded half-up)

    Args:
        amount_str: Amount string

    Returns:
        Amount in whole pesos

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    text = re.sub(r"(CLP|\$|\s)", "", text)
    if text.startswith("-"):
        is_negative = not is_negative
        text = text[1:]

    # es-CL: '.' groups thousands, ',' marks decimals
    text = text.replace(".", "").replace(",", ".")

    try:
        amount = round_pesos(Decimal(text))
    except (InvalidOperation, ValueError):
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def coerce_pesos(value: Any) -> int:
    """Convert form input to pesos, treating anything unparseable or out of range as 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        if isinstance(value, int):
            amount = value
        elif isinstance(value, (float, Decimal)):
            amount = round_pesos(value)
        else:
            amount = parse_pesos(str(value))
    except ValueError:
        return 0
    return amount if abs(amount) <= MAX_PESOS else 0


def coerce_quantity(value: Any) -> Decimal:
    """Convert form input to a quantity, treating anything unparseable or out of range as 0."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        quantity = Decimal(str(value).strip().replace(",", "."))
    except InvalidOperation:
        return Decimal("0")
    if not quantity.is_finite() or abs(quantity) > MAX_QUANTITY:
        return Decimal("0")
    return quantity


def format_pesos(amount: int) -> str:
    """Format pesos the es-CL way, e.g. 1234567 -> '$1.234.567'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,}".replace(",", ".")
