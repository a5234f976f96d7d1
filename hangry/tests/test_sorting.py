from collections import Counter

import pytest

from hangry.recommendations.models import Candidate, SortKey
from hangry.recommendations.sorting import sort_candidates


def _candidate(cid, distance=None, price=None, rating=None):
    return Candidate(id=cid, name=cid, distance=distance, price=price, rating=rating)


POOL = [
    _candidate("1", distance=None, price="$$", rating=4.0),
    _candidate("2", distance=500, price=None, rating=None),
    _candidate("3", distance=100, price="$", rating=4.8),
    _candidate("4", distance=None, price="$$$$", rating=4.0),
    _candidate("5", distance=500, price="$", rating=3.5),
]


def _ids(candidates):
    return [c.id for c in candidates]


def test_distance_scenario():
    pool = [_candidate("1"), _candidate("2", distance=500), _candidate("3", distance=100)]
    assert _ids(sort_candidates(pool, SortKey.distance)) == ["3", "2", "1"]


def test_default_keeps_order():
    assert _ids(sort_candidates(POOL, SortKey.default)) == ["1", "2", "3", "4", "5"]


def test_distance_unknown_last_and_stable():
    assert _ids(sort_candidates(POOL, SortKey.distance)) == ["3", "2", "5", "1", "4"]


def test_price_ascending_missing_last():
    assert _ids(sort_candidates(POOL, SortKey.price)) == ["3", "5", "1", "4", "2"]


def test_rating_descending_missing_as_zero():
    assert _ids(sort_candidates(POOL, SortKey.rating)) == ["3", "1", "4", "5", "2"]


def test_accepts_plain_string_key():
    assert _ids(sort_candidates(POOL, "rating")) == ["3", "1", "4", "5", "2"]


@pytest.mark.parametrize("key", list(SortKey))
def test_result_is_a_permutation_and_input_untouched(key):
    before = list(POOL)
    result = sort_candidates(POOL, key)
    assert result is not POOL
    assert Counter(_ids(result)) == Counter(_ids(POOL))
    assert POOL == before


def test_empty_list():
    assert sort_candidates([], SortKey.price) == []
