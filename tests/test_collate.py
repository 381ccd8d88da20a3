from facetrank.collate import (
    adjust_histogram_counts,
    categorical_facets,
    collate,
    histogram_count,
    item_facets,
)
from facetrank.constants import UNKNOWN_BUCKET


def test_collate_counts_every_facet(three_items):
    hist = collate(three_items, rating_key="user_rating")

    assert hist["category"] == {"A": 2, "B": 1}
    assert hist["colors"] == {"red": 2, "blue": 1}
    assert hist["price"] == {"$0 - $199": 2, "$400 - $599": 1}
    assert hist["user_rating"] == {"4 - 4.99": 2, "3 - 3.99": 1}


def test_collate_has_no_zero_counts_and_no_empty_categories(three_items):
    hist = collate(three_items)
    # nobody supplied these
    assert "subcategory" not in hist
    assert "materials" not in hist
    for values in hist.values():
        assert values
        assert all(count >= 1 for count in values.values())


def test_collate_empty_sequence():
    assert collate([]) == {}


def test_collate_multi_valued_counts_each_element(make_item):
    item = make_item(1, materials=["wood", "steel"], brand=["Acme"], features=["foldable", "wood"])
    hist = collate([item])
    assert hist["materials"] == {"wood": 1, "steel": 1}
    assert hist["brand"] == {"Acme": 1}
    assert hist["features"] == {"foldable": 1, "wood": 1}


def test_zero_rating_and_price_count_as_missing(make_item):
    hist = collate([make_item(1, category="A", price=0, rating=0)])
    assert hist == {"category": {"A": 1}}


def test_malformed_numbers_are_skipped(make_item):
    hist = collate([make_item(1, price="cheap", rating=9)])
    assert hist == {}


def test_rating_key_is_configurable(make_item):
    hist = collate([make_item(1, rating=3.3)], rating_key="rating")
    assert hist == {"rating": {"3 - 3.99": 1}}


def test_collate_returns_fresh_histograms(three_items):
    first = collate(three_items)
    second = collate(three_items)
    assert first == second
    assert first is not second
    assert first["colors"] is not second["colors"]


def test_categorical_facets_skip_missing_attributes(make_item):
    item = make_item(1, subcategory="Chairs", colors=["red", "black"])
    assert list(categorical_facets(item)) == [
        ("subcategory", "Chairs"),
        ("colors", "red"),
        ("colors", "black"),
    ]


def test_item_facets_always_carry_both_buckets(make_item):
    facets = item_facets(make_item(1, category="A"), rating_key="user_rating")
    assert ("category", "A") in facets
    assert ("user_rating", UNKNOWN_BUCKET) in facets
    assert ("price", UNKNOWN_BUCKET) in facets


def test_histogram_count_cross_and_scoped():
    hist = {"materials": {"Wood": 1}, "styles": {"Wood": 2, "Modern": 1}}
    assert histogram_count(hist, "Wood") == 3
    assert histogram_count(hist, "Wood", "styles") == 2
    assert histogram_count(hist, "Wood", "colors") == 0
    assert histogram_count({}, "Wood") == 0


def test_adjust_histogram_counts_copies_input():
    catalog = {"colors": {"red": 2, "blue": 1}, "category": {"A": 3}}
    bought = {"colors": {"red": 1, "green": 4}}
    liked = {"colors": {"blue": 2}}

    adjusted = adjust_histogram_counts(catalog, bought, liked, 20, 1)

    assert adjusted == {"colors": {"red": 22, "blue": 3}, "category": {"A": 3}}
    # input untouched, history-only values not added
    assert catalog == {"colors": {"red": 2, "blue": 1}, "category": {"A": 3}}
    assert "green" not in adjusted["colors"]


def test_adjust_histogram_counts_with_fractional_weights():
    catalog = {"colors": {"red": 2, "blue": 1}}
    bought = {"colors": {"red": 1}}
    liked = {"colors": {"blue": 3}}

    adjusted = adjust_histogram_counts(catalog, bought, liked, 0.5, 0.25)

    assert adjusted == {"colors": {"red": 2.5, "blue": 1.75}}
    assert catalog == {"colors": {"red": 2, "blue": 1}}
