from __future__ import annotations

"""
Range buckets for continuous attributes.

Both the collator and the item ranker label prices and ratings through these
two functions, so a value always lands in the same bucket no matter which side
looks at it.

* price_bucket(250)  -> "$200 - $399"
* rating_bucket(4.3) -> "4 - 4.99"

Anything that is not a usable number (None, text, NaN, a negative price, a
rating outside 0..5) maps to ``UNKNOWN_BUCKET`` instead of raising.
"""

import math
from numbers import Real
from typing import Optional

from .config import PRICE_BUCKET_WIDTH, RATING_BUCKET_WIDTH
from .constants import UNKNOWN_BUCKET

RATING_MIN = 0.0
RATING_MAX = 5.0


def _as_number(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Real):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def _fmt(number: float) -> str:
    """Render 4.0 as '4' and 4.5 as '4.5'."""
    if float(number).is_integer():
        return str(int(number))
    return f"{number:g}"


def price_bucket(price, width: int = PRICE_BUCKET_WIDTH) -> str:
    """
    Label the ``width``-wide half-open price interval containing ``price``.

    The upper label is ``min + width - 1``, e.g. "$0 - $199" for width 200.
    """
    if width <= 0:
        raise ValueError(f"Price bucket width must be positive, got {width}")
    number = _as_number(price)
    if number is None or number < 0:
        return UNKNOWN_BUCKET
    low = int(math.floor(number / width) * width)
    high = low + int(width) - 1
    return f"${low} - ${high}"


def rating_bucket(rating, width: float = RATING_BUCKET_WIDTH) -> str:
    """
    Label the floor-aligned rating interval containing ``rating``.

    With the default unit width, 4.3 -> "4 - 4.99" and 5 -> "5 - 5.99".
    """
    if width <= 0:
        raise ValueError(f"Rating bucket width must be positive, got {width}")
    number = _as_number(rating)
    if number is None or number < RATING_MIN or number > RATING_MAX:
        return UNKNOWN_BUCKET
    low = math.floor(number / width) * width
    high = low + width - 0.01
    return f"{_fmt(low)} - {high:.2f}"


def is_unknown(label: str) -> bool:
    return label == UNKNOWN_BUCKET
