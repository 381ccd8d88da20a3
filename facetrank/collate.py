from __future__ import annotations

"""
Facet collation: items -> per-category value histograms.

Public helpers:

* categorical_facets(item) -> iterator of (category, value)
    Literal categorical values of one item, single- and multi-valued.

* item_facets(item, ...) -> list of (category, value)
    The categorical values plus the item's price and rating bucket labels.
    Missing numbers yield the "unknown" bucket here; the ranker relies on that.

* collate(items, ...) -> FacetHistogram
    Counts every facet value across a sequence of items.

* adjust_histogram_counts(...) -> category -> value -> float
    Copy of a catalog histogram with weighted bought/liked counts folded in.
"""

import copy
from typing import Dict, Iterable, Iterator, List, Tuple

from loguru import logger

from .bucketize import is_unknown, price_bucket, rating_bucket
from .config import PRICE_BUCKET_WIDTH, RATING_BUCKET_WIDTH, RATING_CATEGORY_KEY
from .constants import MULTI_VALUED_KEYS, PRICE_KEY, SINGLE_VALUED_KEYS
from .models import FacetHistogram, Item


def categorical_facets(item: Item) -> Iterator[Tuple[str, str]]:
    for key in SINGLE_VALUED_KEYS:
        value = getattr(item, key)
        if value is not None:
            yield key, value
    for key in MULTI_VALUED_KEYS:
        for value in getattr(item, key):
            yield key, value


def item_facets(
    item: Item,
    rating_key: str = RATING_CATEGORY_KEY,
    price_width: int = PRICE_BUCKET_WIDTH,
    rating_width: float = RATING_BUCKET_WIDTH,
) -> List[Tuple[str, str]]:
    facets = list(categorical_facets(item))
    facets.append((rating_key, rating_bucket(item.rating, rating_width)))
    facets.append((PRICE_KEY, price_bucket(item.price, price_width)))
    return facets


def _increment(hist: FacetHistogram, category: str, value: str) -> None:
    bucket = hist.setdefault(category, {})
    bucket[value] = bucket.get(value, 0) + 1


def collate(
    items: Iterable[Item],
    rating_key: str = RATING_CATEGORY_KEY,
    price_width: int = PRICE_BUCKET_WIDTH,
    rating_width: float = RATING_BUCKET_WIDTH,
) -> FacetHistogram:
    """
    Build a fresh histogram of facet values over ``items``.

    A rating or price of 0 counts as "not supplied" and is skipped, as is any
    number the bucketizer cannot label. Categories only appear once some item
    contributes a value, so no count is ever 0.
    """
    hist: FacetHistogram = {}
    n_items = 0
    for item in items:
        n_items += 1
        for category, value in categorical_facets(item):
            _increment(hist, category, value)

        if item.rating:
            label = rating_bucket(item.rating, rating_width)
            if is_unknown(label):
                logger.debug("Item {} has unusable rating {!r}; skipped", item.product_id, item.rating)
            else:
                _increment(hist, rating_key, label)

        if item.price:
            label = price_bucket(item.price, price_width)
            if is_unknown(label):
                logger.debug("Item {} has unusable price {!r}; skipped", item.product_id, item.price)
            else:
                _increment(hist, PRICE_KEY, label)

    logger.debug("Collated {} items into {} facet categories", n_items, len(hist))
    return hist


def histogram_count(
    hist: FacetHistogram,
    value: str,
    category: str | None = None,
) -> int:
    """
    Occurrences of ``value`` in ``hist``.

    With ``category`` the lookup stays inside that category; without it the
    counts of every category holding ``value`` are summed.
    """
    if category is not None:
        return hist.get(category, {}).get(value, 0)
    return sum(values.get(value, 0) for values in hist.values())


def adjust_histogram_counts(
    catalog_hist: FacetHistogram,
    bought_hist: FacetHistogram,
    liked_hist: FacetHistogram,
    bought_weight: float,
    liked_weight: float,
) -> Dict[str, Dict[str, float]]:
    """
    Return a deep copy of ``catalog_hist`` whose counts are raised by
    ``bought_weight * bought + liked_weight * liked`` for the same
    (category, value). Only values already in the catalog histogram are kept.
    Fractional weights give fractional counts.
    """
    adjusted = copy.deepcopy(catalog_hist)
    for category, values in adjusted.items():
        bought = bought_hist.get(category, {})
        liked = liked_hist.get(category, {})
        for value in values:
            values[value] += bought.get(value, 0) * bought_weight + liked.get(value, 0) * liked_weight
    return adjusted
