import pytest

from facetrank.collate import collate
from facetrank.config import FacetWeights, RankingSettings
from facetrank.item_ranking import (
    normalize_selection,
    rank_items,
    rank_items_with_settings,
    score_item,
    selection_penalty,
)


def _ids(ranked):
    return [s.item.product_id for s in ranked]


def test_selection_excludes_items_without_the_value(three_items, flat_weights):
    ranked = rank_items(
        three_items, {}, {}, flat_weights, {"blue"},
        penalty_value=1, filter_penalty=1000, cutoff=-500,
    )
    assert _ids(ranked) == [3]

    for item in three_items[:2]:
        score = score_item(item, {}, {}, flat_weights, {"blue"}, penalty_value=1, filter_penalty=1000)
        assert score <= -1000


def test_selection_is_case_insensitive(three_items, flat_weights):
    ranked = rank_items(three_items, {}, {}, flat_weights, ["BLUE"])
    assert _ids(ranked) == [3]


def test_bucket_labels_can_be_selected(three_items, flat_weights):
    ranked = rank_items(three_items, {}, {}, flat_weights, ["$0 - $199"])
    assert sorted(_ids(ranked)) == [1, 3]

    ranked = rank_items(three_items, {}, {}, flat_weights, ["4 - 4.99"], rating_key="user_rating")
    assert sorted(_ids(ranked)) == [1, 3]


def test_bought_match_beats_no_match(make_item, flat_weights):
    matching = make_item(1, category="A", colors=["red"], price=150, rating=4.5)
    other = make_item(2, category="Z", colors=["green"], price=950, rating=1.2)
    bought_hist = collate([matching])

    s_match = score_item(matching, bought_hist, {}, flat_weights, set())
    s_other = score_item(other, bought_hist, {}, flat_weights, set())
    assert s_match > s_other

    ranked = rank_items([other, matching], bought_hist, {}, flat_weights)
    assert _ids(ranked) == [1, 2]


def test_raising_filter_penalty(three_items, flat_weights):
    selection = normalize_selection(["red", "A"])
    missing, matching = three_items[2], three_items[0]

    low = score_item(missing, {}, {}, flat_weights, selection, filter_penalty=1000)
    high = score_item(missing, {}, {}, flat_weights, selection, filter_penalty=2000)
    assert high < low

    assert score_item(matching, {}, {}, flat_weights, selection, filter_penalty=1000) == \
        score_item(matching, {}, {}, flat_weights, selection, filter_penalty=2000)


def test_cross_category_lookup_by_default(make_item):
    weights = {"materials": FacetWeights(bought_weight=2, liked_weight=1, penalty_weight=1)}
    item = make_item(1, materials=["Wood"])
    bought_hist = {"styles": {"Wood": 2}}

    assert score_item(item, bought_hist, {}, weights, set()) == 4
    # scoped: no credit and the value counts as unseen
    assert score_item(item, bought_hist, {}, weights, set(), scope_to_own_category=True) == -1


def test_value_seen_only_in_liked_is_not_penalised(make_item):
    weights = {"colors": FacetWeights(bought_weight=2, liked_weight=1, penalty_weight=5)}
    item = make_item(1, colors=["teal"])

    assert score_item(item, {}, {"colors": {"teal": 1}}, weights, set()) == 1
    assert score_item(item, {}, {}, weights, set(), penalty_value=2) == -10


def test_unseen_values_cost_penalty_per_value(three_items, flat_weights):
    # category, colour, rating bucket, price bucket
    assert score_item(three_items[0], {}, {}, flat_weights, set(), penalty_value=1) == -4


def test_all_zero_weights_keep_catalog_order(three_items):
    zero = {k: FacetWeights() for k in ["category", "colors", "user_rating", "price"]}
    ranked = rank_items(three_items, collate(three_items[2:]), {}, zero)
    assert _ids(ranked) == [1, 2, 3]
    assert all(s.score == 0 for s in ranked)

    ranked = rank_items(three_items, {}, {}, zero, ["red"])
    assert _ids(ranked) == [1, 2]


def test_missing_numbers_do_not_raise(make_item, flat_weights):
    item = make_item(1, category="A", price=None, rating="n/a")
    ranked = rank_items([item], {"category": {"A": 1}}, {}, flat_weights)
    assert _ids(ranked) == [1]
    # unknown buckets are never in history, so they cost a penalty each
    assert ranked[0].score == 2 - 2


def test_cutoff_is_inclusive_and_output_sorted(three_items, flat_weights):
    bought_hist = collate(three_items[:1])
    ranked = rank_items(three_items, bought_hist, {}, flat_weights, cutoff=-4)
    scores = [s.score for s in ranked]
    assert scores == sorted(scores, reverse=True)
    assert _ids(ranked)[0] == 1
    assert min(scores) >= -4


def test_empty_inputs():
    assert rank_items([], {}, {}, {}, ["blue"], cutoff=-500) == []
    assert selection_penalty(["a"], set()) == 0


def test_rank_items_with_settings(three_items):
    settings = RankingSettings(filter_penalty=10, cutoff=-15)
    ranked = rank_items_with_settings(three_items, {}, {}, ["blue"], settings)
    # -10 for the missing filter plus -4 unseen values keeps items above -15
    assert len(ranked) == 3
    assert _ids(ranked)[0] == 3


def test_score_item_normalizes_selection_itself(three_items, flat_weights):
    blue_lamp = three_items[2]
    raw = score_item(blue_lamp, {}, {}, flat_weights, ["BLUE"])
    lowered = score_item(blue_lamp, {}, {}, flat_weights, {"blue"})

    assert raw == lowered
    # every facet of the lamp is unseen, and the selection is met
    assert raw == -4.0


@pytest.mark.parametrize("rating_key", ["user_rating", "rating"])
def test_rating_key_spelling_does_not_change_scores(three_items, rating_key):
    baseline = RankingSettings(rating_key="user_rating")
    settings = RankingSettings(rating_key=rating_key)

    def _scores(s):
        bought = collate(three_items[:1], rating_key=s.rating_key)
        ranked = rank_items_with_settings(three_items, bought, {}, None, s)
        return [r.score for r in ranked]

    assert _scores(settings) == _scores(baseline)
