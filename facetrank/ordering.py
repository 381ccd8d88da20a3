from __future__ import annotations

from typing import Iterable, List, Optional

import numpy as np

from .constants import (
    SORT_ASCENDING,
    SORT_DEFAULT,
    SORT_DESCENDING,
    SORT_MODES,
    SORT_RANDOM,
    SORT_SEARCH,
)
from .models import Item
from .similarity import rank_by_query


def _by_price(items: List[Item], descending: bool) -> List[Item]:
    # items without a usable price always go last
    priced = [it for it in items if it.has_price()]
    unpriced = [it for it in items if not it.has_price()]
    priced.sort(key=lambda it: it.price, reverse=descending)
    return priced + unpriced


def order_items(
    items: Iterable[Item],
    mode: str = SORT_DEFAULT,
    query: Optional[str] = None,
    seed: Optional[int] = None,
) -> List[Item]:
    """
    Return a new list of ``items`` in the requested order.

    default    catalog order
    ascending  price low -> high
    descending price high -> low
    random     shuffled; pass ``seed`` for a repeatable shuffle
    search     token distance to ``query``, closest first
    """
    items = list(items)
    if mode == SORT_DEFAULT:
        return items
    if mode == SORT_ASCENDING:
        return _by_price(items, descending=False)
    if mode == SORT_DESCENDING:
        return _by_price(items, descending=True)
    if mode == SORT_RANDOM:
        rng = np.random.default_rng(seed)
        return [items[i] for i in rng.permutation(len(items))]
    if mode == SORT_SEARCH:
        return [item for item, _ in rank_by_query(items, query)]
    raise ValueError(f"Unknown sort mode {mode!r}; expected one of {SORT_MODES}")
