from __future__ import annotations

"""Facet vocabulary shared by the collator, the ranker and the loader.

Keeping the attribute names in one place means the histogram builder and the
item scorer always walk the same attributes in the same order.
"""

# Single-valued categorical attributes, counted under their own name.
SINGLE_VALUED_KEYS = [
    "category",
    "subcategory",
    "product_type",
]

# Multi-valued categorical attributes; every element counts once.
MULTI_VALUED_KEYS = [
    "colors",
    "materials",
    "brand",
    "styles",
    "features",
]

PRICE_KEY = "price"

# Both spellings appear in catalog exports; the rating facet key is configurable.
RATING_KEYS = ["user_rating", "rating"]

# Label returned by the bucketizer for missing or malformed numbers.
UNKNOWN_BUCKET = "unknown"

# Catalog orderings
SORT_DEFAULT = "default"
SORT_ASCENDING = "ascending"
SORT_DESCENDING = "descending"
SORT_RANDOM = "random"
SORT_SEARCH = "search"

SORT_MODES = [
    SORT_DEFAULT,
    SORT_ASCENDING,
    SORT_DESCENDING,
    SORT_RANDOM,
    SORT_SEARCH,
]

# Store key suffixes, prefixed with the caller's context key.
BOUGHT_SUFFIX = "bought"
LIKED_SUFFIX = "liked"
SELECTED_FILTERS_SUFFIX = "selectedFilters"
