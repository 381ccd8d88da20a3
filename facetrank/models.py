"""Typed containers shared across the ranking modules."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# category -> facet value -> occurrence count
FacetHistogram = Dict[str, Dict[str, int]]


class Item(BaseModel):
    """
    One catalog product, flattened from its ``filterable_properties``.

    Items are frozen: the ranker and collator read them, never write them.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    product_id: Union[int, str]
    name: str = ""
    image_url: Optional[str] = None

    category: Optional[str] = None
    subcategory: Optional[str] = None
    product_type: Optional[str] = None

    colors: Tuple[str, ...] = ()
    materials: Tuple[str, ...] = ()
    brand: Tuple[str, ...] = ()
    styles: Tuple[str, ...] = ()
    features: Tuple[str, ...] = ()

    price: Optional[float] = None
    rating: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("rating", "user_rating"),
    )

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value):
        return "" if value is None else str(value)

    @field_validator("category", "subcategory", "product_type", mode="before")
    @classmethod
    def _coerce_single(cls, value):
        if value is None:
            return None
        s = str(value).strip()
        return s or None

    @field_validator("colors", "materials", "brand", "styles", "features", mode="before")
    @classmethod
    def _coerce_multi(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        out = []
        for v in value:
            if v is None:
                continue
            s = str(v).strip()
            if s:
                out.append(s)
        return tuple(out)

    @field_validator("price", "rating", mode="before")
    @classmethod
    def _coerce_number(cls, value):
        # Malformed numbers become None; the bucketizer maps None to the sentinel.
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    def has_price(self) -> bool:
        return self.price is not None and math.isfinite(self.price)


@dataclass
class ScoredFacet:
    """A facet value with its relevance score. Only the relative order is meaningful."""

    category: str
    value: str
    score: float


@dataclass
class ScoredItem:
    """An item with its accumulated ranking score."""

    item: Item
    score: float
