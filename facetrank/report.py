from __future__ import annotations
"""
Tabular views of ranking output for inspection and CSV export.
"""

from pathlib import Path
from typing import Iterable, Sequence, Tuple

import pandas as pd

from .models import FacetHistogram, Item, ScoredFacet, ScoredItem

HISTOGRAM_COLUMNS = ["category", "value", "count"]
FACET_COLUMNS = ["rank", "category", "value", "score"]
ITEM_COLUMNS = ["rank", "product_id", "name", "price", "rating", "score"]


def histogram_frame(hist: FacetHistogram) -> pd.DataFrame:
    rows = [
        {"category": category, "value": value, "count": count}
        for category, values in hist.items()
        for value, count in values.items()
    ]
    return pd.DataFrame(rows, columns=HISTOGRAM_COLUMNS)


def facets_frame(scored: Sequence[ScoredFacet]) -> pd.DataFrame:
    rows = [
        {"rank": i + 1, "category": f.category, "value": f.value, "score": f.score}
        for i, f in enumerate(scored)
    ]
    return pd.DataFrame(rows, columns=FACET_COLUMNS)


def _item_row(rank: int, item: Item, score: float) -> dict:
    return {
        "rank": rank,
        "product_id": item.product_id,
        "name": item.name,
        "price": item.price,
        "rating": item.rating,
        "score": score,
    }


def items_frame(ranked: Sequence[ScoredItem]) -> pd.DataFrame:
    rows = [_item_row(i + 1, s.item, s.score) for i, s in enumerate(ranked)]
    return pd.DataFrame(rows, columns=ITEM_COLUMNS)


def distance_frame(pairs: Iterable[Tuple[Item, float]]) -> pd.DataFrame:
    """Search results; ``score`` holds the token distance (lower is closer)."""
    rows = [_item_row(i + 1, item, dist) for i, (item, dist) in enumerate(pairs)]
    return pd.DataFrame(rows, columns=ITEM_COLUMNS)


def write_csv(frame: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(path, index=False, encoding="utf-8")
