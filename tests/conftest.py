"""
Shared pytest fixtures.
"""
import pytest

from facetrank.config import FacetWeights
from facetrank.models import Item


@pytest.fixture
def make_item():
    """Factory for items; only ``product_id`` is required."""
    def _make(product_id, **attrs):
        return Item(product_id=product_id, **attrs)
    return _make


@pytest.fixture
def three_items(make_item):
    """Two category-A red items and one category-B blue item."""
    return [
        make_item(1, name="Red Oak Chair", category="A", colors=["red"], price=150, rating=4.5),
        make_item(2, name="Red Pine Table", category="A", colors=["red"], price=450, rating=3.2),
        make_item(3, name="Blue Steel Lamp", category="B", colors=["blue"], price=90, rating=4.1),
    ]


@pytest.fixture
def flat_weights():
    """Same weights for every category the collator produces."""
    row = FacetWeights(bought_weight=2.0, liked_weight=1.0, penalty_weight=1.0)
    keys = [
        "category", "subcategory", "product_type", "colors", "materials",
        "styles", "features", "brand", "user_rating", "price",
    ]
    return {k: row for k in keys}
