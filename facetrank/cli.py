from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd
from loguru import logger

from .catalog import load_catalog
from .config import RankingSettings
from .constants import SORT_DEFAULT, SORT_MODES
from .facet_scoring import top_facet_keys
from .ordering import order_items
from .pipeline import rank_facets_for_user, rank_items_for_user
from .report import distance_frame, facets_frame, items_frame, write_csv
from .similarity import rank_by_query

MODES = ["facets", "items", "search", "sort"]


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="facetrank",
        description="Rank catalog facets and items against a user's bought/liked history.",
    )
    ap.add_argument("mode", choices=MODES)
    ap.add_argument("--catalog", type=Path, required=True,
                    help="JSON document with a 'products' array")
    ap.add_argument("--bought", nargs="*", default=[], help="Bought product ids")
    ap.add_argument("--liked", nargs="*", default=[], help="Liked product ids")
    ap.add_argument("--select", nargs="*", default=[], help="Selected facet values")
    ap.add_argument("--query", default=None, help="Free-text query for search mode")
    ap.add_argument("--sort", choices=SORT_MODES, default=SORT_DEFAULT)
    ap.add_argument("--seed", type=int, default=None, help="Seed for random sort")
    ap.add_argument("--limit", type=int, default=20)
    ap.add_argument("--scope-own-category", action="store_true",
                    help="Match history values within their own category only")
    ap.add_argument("--out", type=Path, default=None, help="Write the result table as CSV")
    ap.add_argument("--log-level", default="WARNING")
    return ap


def _frame_for(args: argparse.Namespace) -> pd.DataFrame:
    items = load_catalog(args.catalog)
    settings = RankingSettings(scope_to_own_category=args.scope_own_category)

    if args.mode == "facets":
        scored = rank_facets_for_user(items, args.bought, args.liked, settings)
        logger.info("Top facet keys: {}", top_facet_keys(scored, settings.facet_limit))
        return facets_frame(scored)
    if args.mode == "items":
        ranked = rank_items_for_user(items, args.bought, args.liked, args.select, settings)
        return items_frame(ranked)
    if args.mode == "search":
        return distance_frame(rank_by_query(items, args.query or ""))
    ordered = order_items(items, args.sort, query=args.query, seed=args.seed)
    return distance_frame((item, 0.0) for item in ordered).drop(columns=["score"])


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())

    frame = _frame_for(args)
    if args.out is not None:
        write_csv(frame, args.out)
        logger.info("Wrote {} rows to {}", len(frame), args.out)

    if args.limit > 0:
        frame = frame.head(args.limit)
    print(frame.to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
