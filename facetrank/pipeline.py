from __future__ import annotations

"""
End-to-end ranking session.

    catalog ──collate──▶ catalog histogram ─┐
    bought ids ─▶ items ─collate─▶ bought ──┼─▶ score_facets ─▶ facet keys
    liked ids  ─▶ items ─collate─▶ liked ───┘
    catalog + bought/liked + selection ─▶ rank_items ─▶ ranked items
    catalog + query ─▶ rank_by_query ─▶ search order

The stores are read exactly once, at the top of :func:`run_session`; every
stage below it receives plain values.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from loguru import logger
from pydantic import BaseModel, Field

from .catalog import history_items
from .collate import collate
from .config import RankingSettings
from .facet_scoring import score_facets, top_facet_keys
from .item_ranking import rank_items_with_settings
from .models import FacetHistogram, Item, ScoredFacet, ScoredItem
from .similarity import rank_by_query
from .stores import InteractionHistory, ItemId, SelectionStore


class SessionResult(BaseModel):
    """
    What the presentation layer receives for one page render.
    """

    facet_keys: List[str] = Field(default_factory=list)
    facets: List[ScoredFacet] = Field(default_factory=list)
    items: List[ScoredItem] = Field(default_factory=list)
    search: List[Tuple[Item, float]] = Field(default_factory=list)


def history_histograms(
    items: Sequence[Item],
    bought_ids: Optional[Iterable[ItemId]],
    liked_ids: Optional[Iterable[ItemId]],
    settings: RankingSettings,
) -> Tuple[FacetHistogram, FacetHistogram]:
    """Bought and liked histograms over the catalog items named by the id lists."""
    def _collate(subset: List[Item]) -> FacetHistogram:
        return collate(
            subset,
            rating_key=settings.rating_key,
            price_width=settings.price_bucket_width,
            rating_width=settings.rating_bucket_width,
        )

    bought = _collate(history_items(items, bought_ids))
    liked = _collate(history_items(items, liked_ids))
    return bought, liked


def rank_facets_for_user(
    items: Sequence[Item],
    bought_ids: Optional[Iterable[ItemId]],
    liked_ids: Optional[Iterable[ItemId]],
    settings: Optional[RankingSettings] = None,
) -> List[ScoredFacet]:
    settings = settings or RankingSettings()
    catalog_hist = collate(
        items,
        rating_key=settings.rating_key,
        price_width=settings.price_bucket_width,
        rating_width=settings.rating_bucket_width,
    )
    bought_hist, liked_hist = history_histograms(items, bought_ids, liked_ids, settings)
    return score_facets(
        catalog_hist,
        bought_hist,
        liked_hist,
        bought_weight=settings.facet_bought_weight,
        liked_weight=settings.facet_liked_weight,
    )


def rank_items_for_user(
    items: Sequence[Item],
    bought_ids: Optional[Iterable[ItemId]],
    liked_ids: Optional[Iterable[ItemId]],
    selection: Optional[Iterable[str]],
    settings: Optional[RankingSettings] = None,
) -> List[ScoredItem]:
    settings = settings or RankingSettings()
    bought_hist, liked_hist = history_histograms(items, bought_ids, liked_ids, settings)
    return rank_items_with_settings(items, bought_hist, liked_hist, selection, settings)


def run_session(
    items: Sequence[Item],
    history: InteractionHistory,
    selection_store: SelectionStore,
    settings: Optional[RankingSettings] = None,
    query: Optional[str] = None,
) -> SessionResult:
    settings = settings or RankingSettings()
    settings.check_weights()
    items = list(items)

    bought_ids = history.get_bought_ids()
    liked_ids = history.get_liked_ids()
    selection = selection_store.get_selected_filters()
    logger.info(
        "Session context={!r}: {} items, {} bought, {} liked, {} selected",
        history.context,
        len(items),
        len(bought_ids),
        len(liked_ids),
        len(selection),
    )

    facets = rank_facets_for_user(items, bought_ids, liked_ids, settings)
    ranked = rank_items_for_user(items, bought_ids, liked_ids, selection, settings)
    search = rank_by_query(items, query) if query and query.strip() else []

    return SessionResult(
        facet_keys=top_facet_keys(facets, settings.facet_limit),
        facets=facets,
        items=ranked,
        search=search,
    )
