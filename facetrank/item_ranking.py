from __future__ import annotations

"""
History-weighted item ranking with selection penalties.

Each item accumulates a score from its facet values:

1. every value (categorical, price bucket, rating bucket) earns
   ``bought_weight * count`` from the bought histogram and
   ``liked_weight * count`` from the liked histogram. By default the count is
   summed over *all* categories of the histogram, so a "Wood" material also
   matches a "Wood" style. ``scope_to_own_category=True`` restricts the
   lookup to the value's own category;
2. a value found in neither histogram costs ``penalty_value * penalty_weight``;
3. every selected filter the item does not carry (case-insensitive) costs
   ``filter_penalty``, which with the default cutoff removes the item.

Items under ``cutoff`` are dropped; the rest come back best first.
"""

from typing import Iterable, List, Mapping, Optional, Set

import numpy as np
from loguru import logger

from .collate import histogram_count, item_facets
from .config import (
    FILTER_PENALTY,
    PENALTY_VALUE,
    PRICE_BUCKET_WIDTH,
    RATING_BUCKET_WIDTH,
    RATING_CATEGORY_KEY,
    SCOPE_TO_OWN_CATEGORY,
    SCORE_CUTOFF,
    FacetWeights,
    RankingSettings,
)
from .models import FacetHistogram, Item, ScoredItem

_NO_WEIGHTS = FacetWeights()


def _in_histogram(hist: FacetHistogram, value: str, category: Optional[str]) -> bool:
    if category is not None:
        return value in hist.get(category, {})
    return any(value in values for values in hist.values())


def normalize_selection(selection: Optional[Iterable[str]]) -> Set[str]:
    """Lower-cased membership set; ``None`` means nothing is selected."""
    if not selection:
        return set()
    return {str(s).lower() for s in selection if s is not None and str(s) != ""}


def selection_penalty(
    item_values: Iterable[str],
    selection: Set[str],
    filter_penalty: float = FILTER_PENALTY,
) -> float:
    """
    ``-filter_penalty`` for each selected value missing from ``item_values``.
    ``selection`` must already be lower-cased.
    """
    present = {v.lower() for v in item_values}
    missing = sum(1 for s in selection if s not in present)
    return -filter_penalty * missing


def score_item(
    item: Item,
    bought_hist: FacetHistogram,
    liked_hist: FacetHistogram,
    weight_table: Mapping[str, FacetWeights],
    selection: Optional[Iterable[str]] = None,
    penalty_value: float = PENALTY_VALUE,
    filter_penalty: float = FILTER_PENALTY,
    scope_to_own_category: bool = SCOPE_TO_OWN_CATEGORY,
    rating_key: str = RATING_CATEGORY_KEY,
    price_width: int = PRICE_BUCKET_WIDTH,
    rating_width: float = RATING_BUCKET_WIDTH,
) -> float:
    """Relevance of one item; ``selection`` is matched case-insensitively."""
    wanted = normalize_selection(selection)
    facets = item_facets(item, rating_key=rating_key, price_width=price_width, rating_width=rating_width)

    score = 0.0
    for category, value in facets:
        weights = weight_table.get(category) or _NO_WEIGHTS
        scope = category if scope_to_own_category else None

        score += weights.bought_weight * histogram_count(bought_hist, value, scope)
        score += weights.liked_weight * histogram_count(liked_hist, value, scope)

        found = _in_histogram(bought_hist, value, scope) or _in_histogram(liked_hist, value, scope)
        if not found:
            score -= penalty_value * weights.penalty_weight

    score += selection_penalty((v for _, v in facets), wanted, filter_penalty)
    return score


def rank_items(
    items: Iterable[Item],
    bought_hist: FacetHistogram,
    liked_hist: FacetHistogram,
    weight_table: Mapping[str, FacetWeights],
    selection: Optional[Iterable[str]] = None,
    penalty_value: float = PENALTY_VALUE,
    filter_penalty: float = FILTER_PENALTY,
    cutoff: float = SCORE_CUTOFF,
    scope_to_own_category: bool = SCOPE_TO_OWN_CATEGORY,
    rating_key: str = RATING_CATEGORY_KEY,
    price_width: int = PRICE_BUCKET_WIDTH,
    rating_width: float = RATING_BUCKET_WIDTH,
) -> List[ScoredItem]:
    """
    Score ``items``, drop those below ``cutoff`` and sort the rest by score
    (highest first, catalog order among equal scores).
    """
    items = list(items)
    wanted = normalize_selection(selection)

    scores = np.array(
        [
            score_item(
                item,
                bought_hist,
                liked_hist,
                weight_table,
                wanted,
                penalty_value=penalty_value,
                filter_penalty=filter_penalty,
                scope_to_own_category=scope_to_own_category,
                rating_key=rating_key,
                price_width=price_width,
                rating_width=rating_width,
            )
            for item in items
        ],
        dtype="float64",
    )

    keep = np.flatnonzero(scores >= cutoff)
    order = keep[np.argsort(-scores[keep], kind="stable")]

    logger.info(
        "Ranked {} items: {} kept, {} under cutoff {} (selection={})",
        len(items),
        len(order),
        len(items) - len(order),
        cutoff,
        sorted(wanted),
    )
    return [ScoredItem(item=items[i], score=float(scores[i])) for i in order]


def rank_items_with_settings(
    items: Iterable[Item],
    bought_hist: FacetHistogram,
    liked_hist: FacetHistogram,
    selection: Optional[Iterable[str]],
    settings: RankingSettings,
) -> List[ScoredItem]:
    """:func:`rank_items` configured from a :class:`RankingSettings`."""
    return rank_items(
        items,
        bought_hist,
        liked_hist,
        settings.weight_table,
        selection,
        penalty_value=settings.penalty_value,
        filter_penalty=settings.filter_penalty,
        cutoff=settings.cutoff,
        scope_to_own_category=settings.scope_to_own_category,
        rating_key=settings.rating_key,
        price_width=settings.price_bucket_width,
        rating_width=settings.rating_bucket_width,
    )
