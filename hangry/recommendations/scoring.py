"""
Preference-driven scoring and filtering.

Every candidate in the pool is scored from three signals:

* its base **rating** (0 when unrated),
* **category affinity** taken from the decision history: the running
  category score, plus a flat bonus for liked categories and a flat
  penalty for disliked ones (both apply when the history conflicts),
* a linear **distance** term that rewards candidates closer than the
  maximum distance and goes negative, unbounded, beyond it.

Candidates scoring at or below ``SURVIVAL_THRESHOLD`` are dropped. The
rest are sorted by score (stable) and, once the profile holds any liked
or disliked category, candidates matching a liked category are moved to
the front with both partitions keeping their order.
"""
from __future__ import annotations

from typing import Sequence

from .models import AffinityProfile, Candidate, Decision, RankedCandidate
from .preferences import analyze_decisions

LIKED_BONUS = 5.0
DISLIKED_PENALTY = 10.0
DISTANCE_WEIGHT = 2.0
SURVIVAL_THRESHOLD = -5.0


def score_candidate(
    candidate: Candidate,
    profile: AffinityProfile,
    max_distance: float | None = None,
) -> float:
    score = candidate.rating or 0.0

    for category in candidate.categories:
        key = category.lower()
        score += profile.category_score.get(key, 0.0)
        if key in profile.disliked_categories:
            score -= DISLIKED_PENALTY
        if key in profile.liked_categories:
            score += LIKED_BONUS

    # A zero (or negative) max distance disables normalisation
    if candidate.distance is not None and max_distance and max_distance > 0:
        score += (max_distance - candidate.distance) / max_distance * DISTANCE_WEIGHT

    return score


def _matches_liked(candidate: Candidate, profile: AffinityProfile) -> bool:
    return any(c.lower() in profile.liked_categories for c in candidate.categories)


def rank_candidates(
    pool: Sequence[Candidate],
    decisions: Sequence[Decision],
    max_distance: float | None = None,
) -> list[RankedCandidate]:
    """Score, threshold and order *pool*; the scored form of ``score_and_filter``."""
    profile = analyze_decisions(decisions)

    survivors: list[RankedCandidate] = []
    for candidate in pool:
        score = score_candidate(candidate, profile, max_distance)
        if score > SURVIVAL_THRESHOLD:
            survivors.append(RankedCandidate(candidate=candidate, score=score))

    # sorted() is stable, so equal scores keep pool order
    survivors = sorted(survivors, key=lambda r: r.score, reverse=True)

    if not profile.has_signal:
        return survivors

    liked = [r for r in survivors if _matches_liked(r.candidate, profile)]
    others = [r for r in survivors if not _matches_liked(r.candidate, profile)]
    return liked + others


def score_and_filter(
    pool: Sequence[Candidate],
    decisions: Sequence[Decision],
    max_distance: float | None = None,
) -> list[Candidate]:
    return [r.candidate for r in rank_candidates(pool, decisions, max_distance)]
