"""
Quantity Service - parses and scales free-text durations and quantities.

Recipes arrive as generated text ("2 1/4 cups flour", "15 minutes"), so
numbers are pulled out of strings rather than read from typed fields.
Scaling uses exact rational arithmetic so that halves and quarters can
be recognised and written back as fractions.
"""

import logging
import math
import re
from fractions import Fraction
from typing import Optional

from cooking_path.errors import InvalidQuantityToken, UnparsableDuration

logger = logging.getLogger(__name__)

# "2", "1.5", "1/2"
QUANTITY_PATTERN = re.compile(r"\d+(?:\.\d+)?(?:/\d+)?")
MINUTES_PATTERN = re.compile(r"\d+")


def parse_minutes(text: Optional[str], default: Optional[int] = None) -> int:
    """
    Extract the first integer from a duration string.

    "25 minutes" -> 25, "about 1 hour" -> 1 (no unit conversion).

    Raises:
        UnparsableDuration: if there are no digits and no default was given
    """
    match = MINUTES_PATTERN.search(text or "")
    if match:
        return int(match.group())
    if default is None:
        raise UnparsableDuration(text)
    return default


def parse_count(text: Optional[str], default: int) -> int:
    """First integer in a free-text count such as "Serves 4"."""
    match = MINUTES_PATTERN.search(text or "")
    return int(match.group()) if match else default


def _to_fraction(value) -> Fraction:
    """Exact rational for a factor; floats go through str() to keep 1.5 as 3/2."""
    if isinstance(value, Fraction):
        return value
    if isinstance(value, float):
        return Fraction(str(value))
    return Fraction(value)


def _parse_token(token: str) -> tuple[Fraction, bool]:
    """Parse a quantity token. Returns (value, is_fraction)."""
    if "/" in token:
        numerator, _, denominator = token.partition("/")
        try:
            num = Fraction(numerator)
            den = Fraction(denominator)
        except ValueError:
            raise InvalidQuantityToken(token)
        if den == 0:
            raise InvalidQuantityToken(token, "zero denominator")
        return num / den, True

    try:
        return Fraction(token), False
    except ValueError:
        raise InvalidQuantityToken(token)


def _render(value: Fraction, from_fraction: bool) -> str:
    if value.denominator == 1:
        return str(value.numerator)

    if 0 < value < 1:
        if (value * 2).denominator == 1:
            return f"{value * 2}/2"
        if (value * 4).denominator == 1:
            return f"{value * 4}/4"

    if from_fraction:
        # Two places keeps thirds and sixths within 0.01 of the true value
        return f"{float(value):.2f}".rstrip("0").rstrip(".")
    return f"{float(value):.1f}"


def scale_quantity_token(token: str, factor) -> str:
    """
    Multiply a quantity token by a factor and render it back.

    - whole results drop the decimals: "2" x 1.5 -> "3"
    - halves and quarters under 1 become fractions: "1/2" x 0.5 -> "1/4"
    - other results from decimals keep one place: "1.5" x 1.5 -> "2.2"

    Raises:
        InvalidQuantityToken: for malformed tokens or a zero denominator
    """
    value, is_fraction = _parse_token(token.strip())
    return _render(value * _to_fraction(factor), is_fraction)


def scale_ingredient_line(line: str, factor) -> str:
    """
    Scale every number in an ingredient line, leaving the words alone.

    "2 1/4 cups flour" x 2 -> "4 1/2 cups flour". Tokens that cannot be
    scaled are kept as written.
    """

    def _replace(match: re.Match) -> str:
        token = match.group()
        try:
            return scale_quantity_token(token, factor)
        except InvalidQuantityToken as e:
            logger.warning(f"{e} - keeping '{token}' in '{line}'")
            return token

    return QUANTITY_PATTERN.sub(_replace, line)


def ceil_scaled(value: int, factor) -> int:
    """Round value * factor up without float error (10 * 0.3 -> 3, not 4)."""
    return math.ceil(value * _to_fraction(factor))


def floor_scaled(value: int, factor) -> int:
    return math.floor(value * _to_fraction(factor))
