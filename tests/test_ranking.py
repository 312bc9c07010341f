import pytest

from poolwizard.core.models import ConstraintSet, Environment
from poolwizard.matching.ranking import MAX_RESULTS, apply_hard_filters, rank_matches


def test_result_cap(item_factory):
    catalog = [item_factory(id=f"item-{i}") for i in range(12)]
    results = rank_matches(ConstraintSet(environment="in-ground"), catalog)
    assert len(results) == MAX_RESULTS == 5


def test_custom_limit(item_factory):
    catalog = [item_factory(id=f"item-{i}") for i in range(4)]
    assert len(rank_matches(ConstraintSet(environment="in-ground"), catalog, limit=2)) == 2


def test_zero_scores_are_dropped(catalog):
    # Default turnover alone scores nothing
    assert rank_matches(ConstraintSet(), catalog) == []

    results = rank_matches(ConstraintSet(diameter=5.0), catalog)
    assert results
    assert all(result.score > 0 for result in results)
    assert "pentair-8in" not in [result.product_id for result in results]


def test_hard_filter_excludes_other_environments(catalog, item_factory):
    # A near-perfect in-ground item must still lose to the environment filter
    catalog = catalog + [item_factory(id="perfect-in-ground", dimensions={"diameter": 5.0})]
    results = rank_matches(
        ConstraintSet(environment="spa", diameter=5.0, pool_volume=20000),
        catalog,
    )
    ids = [result.product_id for result in results]
    assert ids == ["spa-filter"]
    by_id = {item.id: item for item in catalog}
    assert all(by_id[i].environment is Environment.SPA for i in ids)


def test_hard_filters_on_brand_and_series(catalog):
    survivors = apply_hard_filters(ConstraintSet(brand="Pentair", series="Clean & Clear"), catalog)
    assert [item.id for item in survivors] == ["pentair-5in", "pentair-8in", "sand-media"]


def test_ties_keep_catalog_order(item_factory):
    catalog = [item_factory(id=name) for name in ("c", "a", "b")]
    results = rank_matches(ConstraintSet(system="cartridge"), catalog)
    assert [result.product_id for result in results] == ["c", "a", "b"]


def test_sorted_by_score_descending(catalog):
    results = rank_matches(ConstraintSet(diameter=7.0, pool_volume=20000), catalog)
    scores = [result.score for result in results]
    assert scores == sorted(scores, reverse=True)
    assert results[0].product_id == "hayward-7in"


def test_empty_catalog():
    assert rank_matches(ConstraintSet(environment="spa"), []) == []


def test_no_survivors(catalog):
    assert rank_matches(ConstraintSet(brand="Nobody"), catalog) == []


def test_options_are_keyword_only(catalog):
    with pytest.raises(TypeError):
        rank_matches(ConstraintSet(environment="in-ground"), catalog, None, 2)
