from __future__ import annotations

from typing import Iterable

from .models import AffinityProfile, Candidate, Decision, DecisionStatus

APPROVE_WEIGHT = 2.0
REJECT_WEIGHT = -3.0
UNDECIDED_WEIGHT = -0.5


def analyze_decisions(decisions: Iterable[Decision]) -> AffinityProfile:
    """Aggregate every decision (duplicates included) into an affinity profile.

    Scores are additive with no clamping. A category may end up in both
    the liked and disliked sets when decisions conflict.
    """
    liked: set[str] = set()
    disliked: set[str] = set()
    scores: dict[str, float] = {}

    for decision in decisions:
        for category in decision.candidate.categories:
            key = category.lower()
            if decision.status is DecisionStatus.approve:
                liked.add(key)
                scores[key] = scores.get(key, 0.0) + APPROVE_WEIGHT
            elif decision.status is DecisionStatus.reject:
                disliked.add(key)
                scores[key] = scores.get(key, 0.0) + REJECT_WEIGHT
            else:
                scores[key] = scores.get(key, 0.0) + UNDECIDED_WEIGHT

    return AffinityProfile(
        liked_categories=liked,
        disliked_categories=disliked,
        category_score=scores,
    )


def latest_status_by_id(decisions: Iterable[Decision]) -> dict[str, DecisionStatus]:
    """Most recent status per candidate id."""
    latest: dict[str, DecisionStatus] = {}
    for decision in decisions:
        latest[decision.candidate_id] = decision.status
    return latest


def approved_candidates(decisions: list[Decision]) -> list[Candidate]:
    """Snapshots whose latest status is approve, de-duplicated by id.

    Ordered by first appearance in the decision history.
    """
    latest = latest_status_by_id(decisions)
    seen: set[str] = set()
    approved: list[Candidate] = []
    for decision in decisions:
        cid = decision.candidate_id
        if cid in seen or latest[cid] is not DecisionStatus.approve:
            continue
        seen.add(cid)
        approved.append(_latest_snapshot(decisions, cid))
    return approved


def _latest_snapshot(decisions: list[Decision], candidate_id: str) -> Candidate:
    for decision in reversed(decisions):
        if decision.candidate_id == candidate_id:
            return decision.candidate
    raise KeyError(candidate_id)
