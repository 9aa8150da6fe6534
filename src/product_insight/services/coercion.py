"""Helpers for reading loosely-typed values from catalog payloads."""

import math
import re
from decimal import Decimal

_EN_PREFIX = re.compile(r"^en:", re.IGNORECASE)
_WORD_START = re.compile(r"\b\w")
_DECIMAL_TEXT = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def to_number(value: object) -> float | None:
    """Coerce a raw value into a finite float, or None when that fails.

    Strings must be plain decimal or exponent notation; ``float`` extras
    such as digit separators, non-ASCII digits and ``inf`` are rejected.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not _DECIMAL_TEXT.fullmatch(value):
            return None
    elif not isinstance(value, int | float):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    return number


def non_blank(value: object) -> str | None:
    """Return the trimmed string, or None for non-strings and blank strings."""
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None


def format_amount(value: float) -> str:
    """Render a number in its shortest form, as ``Number#toString`` does.

    Fixed notation is used for magnitudes in ``[1e-7, 1e21)``; anything
    else uses an exponent with an explicit sign (``1e-7``, ``1.5e+21``).
    """
    number = float(value)
    if number == 0:
        return "0"
    sign = "-" if number < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(number))).as_tuple()
    digits = "".join(str(digit) for digit in digit_tuple).lstrip("0")
    trimmed = digits.rstrip("0")
    exponent += len(digits) - len(trimmed)
    digits = trimmed
    count = len(digits)
    point = count + exponent

    if count <= point <= 21:  # noqa: PLR2004
        text = digits + "0" * (point - count)
    elif 0 < point <= 21:  # noqa: PLR2004
        text = f"{digits[:point]}.{digits[point:]}"
    elif -6 < point <= 0:  # noqa: PLR2004
        text = "0." + "0" * -point + digits
    else:
        power = point - 1
        mantissa = digits if count == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"
    return sign + text


def format_allergen_tag(tag: str) -> str:
    """Turn an allergen tag like ``en:tree-nuts`` into ``Tree Nuts``."""
    label = _EN_PREFIX.sub("", tag).replace("-", " ")
    return _WORD_START.sub(lambda match: match.group(0).upper(), label)
