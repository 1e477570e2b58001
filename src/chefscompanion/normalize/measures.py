"""Serving-size scaling for free-text ingredient measures."""

import math
import re
from decimal import ROUND_HALF_UP, Decimal

from chefscompanion.logging_config import get_logger

logger = get_logger(__name__)

# Fractions first so "3/4" is one token rather than "3" and "4".
QUANTITY_PATTERN = re.compile(r"\d+/\d+|\d+(?:\.\d+)?")

_ONE_DECIMAL = Decimal("0.1")


def parse_quantity_token(token: str) -> float | None:
    """
    Parse a numeric token into a float.

    Handles formats like:
    - "2"
    - "1.5"
    - "3/4"

    Returns None for anything unparsable, including a zero denominator.
    """
    if "/" in token:
        numerator, _, denominator = token.partition("/")
        try:
            num = float(numerator)
            denom = float(denominator)
        except ValueError:
            return None
        if denom == 0:
            return None
        return num / denom

    try:
        return float(token)
    except ValueError:
        return None


def format_quantity(value: float) -> str:
    """Render whole values as integers, everything else with one decimal digit."""
    if value.is_integer():
        return str(int(value))
    return str(Decimal(repr(value)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def scale_measure(text: str, multiplier: float) -> str:
    """
    Rescale every quantity embedded in a measure string.

    Units, qualifiers and punctuation are kept exactly where they were:

        >>> scale_measure("3/4 cup", 2)
        '1.5 cup'
        >>> scale_measure("1 (12 oz.)", 2)
        '2 (24 oz.)'

    Tokens that cannot be scaled (e.g. "1/0") are returned untouched.
    """
    if multiplier == 1:
        return text

    pieces: list[str] = []
    cursor = 0
    for match in QUANTITY_PATTERN.finditer(text):
        start, end = match.span()
        pieces.append(text[cursor:start])
        pieces.append(_scale_token(match.group(), multiplier))
        cursor = end
    pieces.append(text[cursor:])

    return "".join(pieces)


def _scale_token(token: str, multiplier: float) -> str:
    value = parse_quantity_token(token)
    if value is None:
        logger.debug(f"Leaving unscalable token unchanged: {token!r}")
        return token

    scaled = value * multiplier
    if not math.isfinite(scaled):
        return token
    return format_quantity(scaled)
