from __future__ import annotations

from typing import Sequence

from .models import Candidate, SortKey


def _distance_key(c: Candidate) -> tuple[int, float]:
    if c.distance is None:
        return (1, 0.0)
    return (0, c.distance)


def _price_key(c: Candidate) -> tuple[int, int]:
    tier = c.price_tier
    if tier is None:
        return (1, 0)
    return (0, tier)


def _rating_key(c: Candidate) -> float:
    return -(c.rating or 0.0)


def sort_candidates(candidates: Sequence[Candidate], key: SortKey | str = SortKey.default) -> list[Candidate]:
    """Return a new list ordered for display; the input is never modified.

    All orderings are stable. Missing distance or price sorts last; a
    missing rating counts as 0.
    """
    key = SortKey(key)
    if key is SortKey.distance:
        return sorted(candidates, key=_distance_key)
    if key is SortKey.price:
        return sorted(candidates, key=_price_key)
    if key is SortKey.rating:
        return sorted(candidates, key=_rating_key)
    return list(candidates)
