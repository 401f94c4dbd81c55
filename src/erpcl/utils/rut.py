"""Chilean RUT (Rol Único Tributario) utilities."""

import re

_RUT_PATTERN = re.compile(r"^(\d{1,9})([\dK])$")


def clean_rut(rut: str) -> str:
    """Strip dots, dashes and spaces and upper-case the check digit."""
    return re.sub(r"[.\-\s]", "", rut or "").upper()


def check_digit(number: int | str) -> str:
    """Compute the modulo-11 check digit for a RUT body.

    Digits are weighted 2..7 from the right, cycling. The digit is
    ``11 - sum % 11`` with 11 written as '0' and 10 as 'K'.
    """
    total = 0
    multiplier = 2
    for digit in reversed(str(number)):
        total += int(digit) * multiplier
        multiplier = 2 if multiplier == 7 else multiplier + 1
    remainder = 11 - total % 11
    if remainder == 11:
        return "0"
    if remainder == 10:
        return "K"
    return str(remainder)


def is_valid_rut(rut: str) -> bool:
    """Return True when the RUT is well formed and its check digit matches."""
    match = _RUT_PATTERN.match(clean_rut(rut))
    if match is None:
        return False
    body, digit = match.groups()
    return check_digit(body) == digit


def format_rut(rut: str) -> str:
    """Format a RUT as '12.345.678-5'.

    Raises:
        ValueError: If the RUT is malformed
    """
    match = _RUT_PATTERN.match(clean_rut(rut))
    if match is None:
        raise ValueError(f"Could not parse RUT '{rut}'")
    body, digit = match.groups()
    return f"{int(body):,}".replace(",", ".") + f"-{digit}"
