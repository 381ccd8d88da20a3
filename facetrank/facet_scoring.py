from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from loguru import logger

from .config import FACET_BOUGHT_WEIGHT, FACET_DISPLAY_LIMIT, FACET_LIKED_WEIGHT
from .models import FacetHistogram, ScoredFacet


def _union_pairs(*hists: FacetHistogram) -> List[Tuple[str, str]]:
    """(category, value) pairs across ``hists`` in first-seen order."""
    seen: Dict[Tuple[str, str], None] = {}
    for hist in hists:
        for category, values in hist.items():
            for value in values:
                seen.setdefault((category, value), None)
    return list(seen)


def score_facets(
    catalog_hist: FacetHistogram,
    bought_hist: FacetHistogram,
    liked_hist: FacetHistogram,
    bought_weight: float = FACET_BOUGHT_WEIGHT,
    liked_weight: float = FACET_LIKED_WEIGHT,
) -> List[ScoredFacet]:
    """
    Rank every facet value seen in any of the three histograms.

    score = catalog_count + bought_weight * bought_count + liked_weight * liked_count

    A value that only shows up in the user's history is still scored, with a
    catalog count of 0. Ties keep the order of the union pass (catalog first,
    then bought, then liked) since ``sorted`` is stable.
    """
    scored: List[ScoredFacet] = []
    for category, value in _union_pairs(catalog_hist, bought_hist, liked_hist):
        catalog_count = catalog_hist.get(category, {}).get(value, 0)
        bought_count = bought_hist.get(category, {}).get(value, 0)
        liked_count = liked_hist.get(category, {}).get(value, 0)
        score = catalog_count + bought_weight * bought_count + liked_weight * liked_count
        scored.append(ScoredFacet(category=category, value=value, score=float(score)))

    ranked = sorted(scored, key=lambda f: f.score, reverse=True)
    if ranked:
        logger.debug(
            "Scored {} facet values; top={}:{} ({:.1f})",
            len(ranked),
            ranked[0].category,
            ranked[0].value,
            ranked[0].score,
        )
    return ranked


def top_facet_keys(
    scored: Sequence[ScoredFacet],
    limit: int = FACET_DISPLAY_LIMIT,
) -> List[str]:
    """
    Facet values in rank order for the filter bar.

    The same value can live in two categories (a "Wood" material and a
    "Wood" style); only its best-scoring occurrence is kept. This is not the
    same as taking the first ``limit`` scored entries: duplicates are skipped
    before counting, so the result can reach further down ``scored``.
    """
    keys: List[str] = []
    seen = set()
    for facet in scored:
        if len(keys) >= limit:
            break
        if facet.value in seen:
            continue
        seen.add(facet.value)
        keys.append(facet.value)
    return keys
