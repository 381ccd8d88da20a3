from __future__ import annotations

import os
from typing import Dict

from loguru import logger
from pydantic import BaseModel, Field, model_validator

from .constants import RATING_KEYS


# ---------------------------
# Buckets
# ---------------------------

PRICE_BUCKET_WIDTH = int(os.getenv("FACETRANK_PRICE_BUCKET_WIDTH", "200"))
RATING_BUCKET_WIDTH = float(os.getenv("FACETRANK_RATING_BUCKET_WIDTH", "1"))

# "user_rating" (full catalog export) or "rating"
RATING_CATEGORY_KEY = os.getenv("FACETRANK_RATING_KEY", "user_rating")
if RATING_CATEGORY_KEY not in RATING_KEYS:
    logger.warning(
        "Unexpected FACETRANK_RATING_KEY={!r}; expected one of {}",
        RATING_CATEGORY_KEY,
        RATING_KEYS,
    )


# ---------------------------
# Facet scoring
# ---------------------------

FACET_BOUGHT_WEIGHT = float(os.getenv("FACETRANK_FACET_BOUGHT_WEIGHT", "20"))
FACET_LIKED_WEIGHT = float(os.getenv("FACETRANK_FACET_LIKED_WEIGHT", "1"))

FACET_DISPLAY_LIMIT = 50  # facet keys handed to the filter bar


# ---------------------------
# Item ranking
# ---------------------------

PENALTY_VALUE = float(os.getenv("FACETRANK_PENALTY_VALUE", "1"))      # value unseen in history
FILTER_PENALTY = float(os.getenv("FACETRANK_FILTER_PENALTY", "1000"))  # per unmet selection
SCORE_CUTOFF = float(os.getenv("FACETRANK_SCORE_CUTOFF", "-500"))

# Look a value up in its own category only, instead of across the whole histogram.
SCOPE_TO_OWN_CATEGORY = os.getenv("FACETRANK_SCOPE_TO_OWN_CATEGORY", "false").lower() == "true"

# category -> (bought, liked, penalty)
DEFAULT_WEIGHT_TABLE: Dict[str, tuple] = {
    "category": (5.0, 2.0, 1.0),
    "subcategory": (3.0, 1.0, 1.0),
    "product_type": (2.0, 1.0, 1.0),
    "colors": (2.0, 1.0, 1.0),
    "materials": (2.0, 1.0, 1.0),
    "styles": (2.0, 1.0, 1.0),
    "features": (2.0, 1.0, 1.0),
    "brand": (2.0, 1.5, 1.0),
    "user_rating": (2.0, 1.0, 1.0),
    "price": (2.0, 1.0, 1.0),
}


# ---------------------------
# Pydantic models shared around the package
# ---------------------------

class FacetWeights(BaseModel):
    """
    Per-category weights used by the item ranker.
    """

    bought_weight: float = 0.0
    liked_weight: float = 0.0
    penalty_weight: float = 0.0

    def is_inverted(self) -> bool:
        """
        True when liked evidence outweighs (or equals) bought evidence.
        An all-zero row is a valid "scoring disabled" configuration.
        """
        if self.bought_weight == self.liked_weight == self.penalty_weight == 0:
            return False
        return self.bought_weight <= self.liked_weight


def default_weight_table() -> Dict[str, FacetWeights]:
    table = {
        category: FacetWeights(bought_weight=b, liked_weight=l, penalty_weight=p)
        for category, (b, l, p) in DEFAULT_WEIGHT_TABLE.items()
    }
    # keep the rating row addressable under whichever key the collator uses
    if RATING_CATEGORY_KEY not in table:
        table[RATING_CATEGORY_KEY] = table["user_rating"]
    return table


class RankingSettings(BaseModel):
    """
    Everything a ranking session is configured with.

    Built once per session and passed explicitly to the scorers; the core
    never reads ambient state.
    """

    weight_table: Dict[str, FacetWeights] = Field(default_factory=default_weight_table)
    facet_bought_weight: float = FACET_BOUGHT_WEIGHT
    facet_liked_weight: float = FACET_LIKED_WEIGHT
    penalty_value: float = PENALTY_VALUE
    filter_penalty: float = FILTER_PENALTY
    cutoff: float = SCORE_CUTOFF
    scope_to_own_category: bool = SCOPE_TO_OWN_CATEGORY
    facet_limit: int = Field(default=FACET_DISPLAY_LIMIT, ge=0)
    price_bucket_width: int = Field(default=PRICE_BUCKET_WIDTH, gt=0)
    rating_bucket_width: float = Field(default=RATING_BUCKET_WIDTH, gt=0)
    rating_key: str = RATING_CATEGORY_KEY

    @model_validator(mode="after")
    def _rating_row_follows_key(self) -> "RankingSettings":
        # A table written for one rating spelling keeps scoring under the other.
        if self.rating_key in self.weight_table:
            return self
        for key in RATING_KEYS:
            if key in self.weight_table:
                table = dict(self.weight_table)
                table[self.rating_key] = self.weight_table[key]
                self.weight_table = table
                break
        return self

    def weights_for(self, category: str) -> FacetWeights:
        """
        Weights for ``category``; categories missing from the table score zero.
        """
        return self.weight_table.get(category) or FacetWeights()

    def check_weights(self) -> None:
        """
        Log (never raise) when the bought > liked invariant does not hold.
        """
        inverted = sorted(c for c, w in self.weight_table.items() if w.is_inverted())
        if inverted:
            logger.warning(
                "Liked weight >= bought weight for categories {}; rankings may look odd",
                inverted,
            )
        if self.facet_bought_weight <= self.facet_liked_weight:
            logger.warning(
                "Facet bought weight {} does not exceed liked weight {}",
                self.facet_bought_weight,
                self.facet_liked_weight,
            )
