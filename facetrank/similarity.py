from __future__ import annotations

"""
Token-overlap text distance used for the search ordering.

This is a Jaccard complement over lower-cased whitespace tokens, not a search
engine: ``distance("red oak table", "oak table")`` is 1 - 2/3.
"""

import unicodedata
from typing import Iterable, List, Set, Tuple

from loguru import logger

from .models import Item


def _normalise_unicode(text: str) -> str:
    # Fold compatibility forms (ligatures, full-width letters) and curly quotes.
    text = unicodedata.normalize("NFKC", text)
    text = text.replace("‘", "'").replace("’", "'")
    text = text.replace("“", '"').replace("”", '"')
    return text


def token_set(text: str | None) -> Set[str]:
    if not text:
        return set()
    return set(_normalise_unicode(str(text)).lower().split())


def token_distance(a: str | None, b: str | None) -> float:
    """
    ``1 - |A & B| / |A | B|`` over the token sets of ``a`` and ``b``.

    Two empty inputs are identical (distance 0). Lower means more similar.

    Both strings are NFKC-normalised and curly quotes folded to straight ones
    before lower-casing, so "ﬁne" and "fine", or "it’s" and "it's", are the
    same token.
    """
    set_a, set_b = token_set(a), token_set(b)
    union = set_a | set_b
    if not union:
        return 0.0
    return 1.0 - len(set_a & set_b) / len(union)


def rank_by_query(items: Iterable[Item], query: str | None) -> List[Tuple[Item, float]]:
    """
    Items paired with their distance to ``query``, closest first.
    Equal distances keep catalog order.
    """
    scored = [(item, token_distance(query, item.name)) for item in items]
    scored.sort(key=lambda pair: pair[1])
    logger.debug("Ranked {} items against query {!r}", len(scored), query)
    return scored
