import pytest

from hangry.recommendations.models import AffinityProfile, Candidate, Decision, DecisionStatus
from hangry.recommendations.preferences import analyze_decisions
from hangry.recommendations.scoring import (
    SURVIVAL_THRESHOLD,
    rank_candidates,
    score_and_filter,
    score_candidate,
)


def _candidate(cid, categories=(), rating=None, distance=None):
    return Candidate(
        id=cid,
        name=f"Restaurant {cid}",
        categories=list(categories),
        rating=rating,
        distance=distance,
    )


def _decide(candidate, status):
    return Decision(candidate_id=candidate.id, status=status, candidate=candidate)


A = _candidate("A", ["Italian"], rating=4.5)
B = _candidate("B", ["Japanese"], rating=4.8)


# ── Worked scenarios ─────────────────────────────────────────────────────


class TestScenarios:
    def test_approve_italian(self):
        decisions = [_decide(A, DecisionStatus.approve)]
        profile = analyze_decisions(decisions)

        assert profile.liked_categories == {"italian"}
        assert profile.category_score == {"italian": 2.0}
        assert score_candidate(A, profile) == pytest.approx(11.5)
        assert score_candidate(B, profile) == pytest.approx(4.8)
        assert [c.id for c in score_and_filter([A, B], decisions)] == ["A", "B"]

    def test_reject_italian(self):
        decisions = [_decide(A, DecisionStatus.reject)]
        profile = analyze_decisions(decisions)

        assert profile.category_score == {"italian": -3.0}
        assert score_candidate(A, profile) == pytest.approx(-8.5)
        assert [c.id for c in score_and_filter([A, B], decisions)] == ["B"]


# ── Scorer ───────────────────────────────────────────────────────────────


def test_unrated_candidate_starts_at_zero():
    assert score_candidate(_candidate("x"), AffinityProfile()) == 0.0


def test_unseen_category_adds_nothing():
    profile = AffinityProfile(category_score={"thai": 4.0})
    assert score_candidate(_candidate("x", ["Mexican"], rating=3.0), profile) == 3.0


def test_conflicting_category_gets_bonus_and_penalty():
    # Liked and disliked at once: +5 and -10 both apply on top of the running score
    decisions = [
        _decide(_candidate("p", ["Italian"]), DecisionStatus.approve),
        _decide(_candidate("q", ["Italian"]), DecisionStatus.reject),
    ]
    profile = analyze_decisions(decisions)
    assert score_candidate(_candidate("x", ["Italian"], rating=4.0), profile) == pytest.approx(-2.0)


class TestDistanceTerm:
    def test_closer_than_max_earns_bonus(self):
        c = _candidate("x", rating=4.0, distance=500)
        assert score_candidate(c, AffinityProfile(), max_distance=1000) == pytest.approx(5.0)

    def test_beyond_max_goes_negative(self):
        c = _candidate("x", rating=4.0, distance=3000)
        assert score_candidate(c, AffinityProfile(), max_distance=1000) == pytest.approx(0.0)

    def test_zero_max_distance_disables_normalisation(self):
        c = _candidate("x", rating=4.0, distance=500)
        assert score_candidate(c, AffinityProfile(), max_distance=0) == 4.0

    def test_unknown_distance_ignored(self):
        c = _candidate("x", rating=4.0)
        assert score_candidate(c, AffinityProfile(), max_distance=1000) == 4.0

    def test_no_max_distance_ignored(self):
        c = _candidate("x", rating=4.0, distance=500)
        assert score_candidate(c, AffinityProfile()) == 4.0


# ── Filter ───────────────────────────────────────────────────────────────


def test_empty_pool_gives_empty_list():
    assert score_and_filter([], []) == []


def test_threshold_is_exclusive():
    hedged = _candidate("h", ["Diner"])
    at_threshold = [_decide(hedged, DecisionStatus.undecided)] * 10
    just_above = [_decide(hedged, DecisionStatus.undecided)] * 9

    assert score_candidate(hedged, analyze_decisions(at_threshold)) == SURVIVAL_THRESHOLD
    assert score_and_filter([hedged], at_threshold) == []
    assert [c.id for c in score_and_filter([hedged], just_above)] == ["h"]


def test_no_survivor_scores_at_or_below_threshold():
    pool = [
        _candidate("1", ["Italian"], rating=4.5),
        _candidate("2", ["Italian", "Pizza"], rating=1.0),
        _candidate("3", ["Burgers"], rating=2.0),
        _candidate("4", [], rating=None),
    ]
    decisions = [
        _decide(pool[0], DecisionStatus.reject),
        _decide(pool[2], DecisionStatus.approve),
    ]
    profile = analyze_decisions(decisions)
    for item in rank_candidates(pool, decisions):
        assert item.score > SURVIVAL_THRESHOLD
        assert item.score == score_candidate(item.candidate, profile)


def test_equal_scores_keep_pool_order():
    pool = [_candidate(str(i), rating=4.0) for i in range(5)]
    assert [c.id for c in score_and_filter(pool, [])] == ["0", "1", "2", "3", "4"]


def test_without_signal_plain_score_order():
    thai = _candidate("thai", ["Thai"], rating=3.0)
    mexican = _candidate("mex", ["Mexican"], rating=3.2)
    decisions = [_decide(thai, DecisionStatus.undecided)]
    assert [c.id for c in score_and_filter([thai, mexican], decisions)] == ["mex", "thai"]


def test_liked_matches_move_ahead_of_higher_scores():
    liked = _candidate("liked", ["Italian"], rating=4.0)
    junk = _candidate("junk", ["Fast Food"], rating=3.0)
    mixed = _candidate("mixed", ["Italian", "Fast Food"], rating=1.5)
    french = _candidate("french", ["French"], rating=5.0)
    decisions = [
        _decide(liked, DecisionStatus.approve),
        _decide(junk, DecisionStatus.reject),
    ]

    ranked = rank_candidates([mixed, french], decisions)
    assert [r.candidate.id for r in ranked] == ["mixed", "french"]
    assert ranked[0].score == pytest.approx(-4.5)
    assert ranked[1].score == pytest.approx(5.0)


def test_liked_partition_keeps_internal_order():
    decisions = [_decide(_candidate("seed", ["Thai"]), DecisionStatus.approve)]
    pool = [
        _candidate("t1", ["Thai"], rating=3.0),
        _candidate("x1", ["Greek"], rating=4.9),
        _candidate("t2", ["Thai"], rating=4.0),
        _candidate("x2", ["Greek"], rating=2.0),
    ]
    assert [c.id for c in score_and_filter(pool, decisions)] == ["t2", "t1", "x1", "x2"]


def test_filter_is_deterministic():
    pool = [
        _candidate("1", ["Italian"], rating=4.5, distance=200),
        _candidate("2", ["Thai"], rating=4.1, distance=900),
        _candidate("3", ["Italian", "Thai"], rating=3.9),
    ]
    decisions = [_decide(pool[1], DecisionStatus.approve)]
    first = score_and_filter(pool, decisions, max_distance=1000)
    second = score_and_filter(pool, decisions, max_distance=1000)
    assert first == second
