"""
Head-to-head elimination ("duel") over a candidate subset.

The contenders are shuffled once at start. Each choice removes the loser
for good and re-queues the winner at the *back* of the contender list, so
the pool shrinks by exactly one per choice and a start with N candidates
always finishes after N - 1 choices.
"""
from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Sequence

from ..recommendations.models import Candidate

logger = logging.getLogger(__name__)


class TournamentPhase(str, Enum):
    idle = "idle"
    pair_presented = "pair_presented"
    round_transition = "round_transition"
    finished = "finished"


class TournamentError(ValueError):
    """Raised for an invalid start or choice; state is left untouched."""


class Tournament:
    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self.phase = TournamentPhase.idle
        self.contenders: list[Candidate] = []
        self.current_pair: tuple[Candidate, Candidate] | None = None
        self.winner: Candidate | None = None
        self.initial_count = 0
        self.choices_made = 0
        self.history: list[tuple[str, str]] = []

    def start(self, candidates: Sequence[Candidate]) -> tuple[Candidate, Candidate]:
        unique: list[Candidate] = []
        seen: set[str] = set()
        for candidate in candidates:
            if candidate.id not in seen:
                seen.add(candidate.id)
                unique.append(candidate)

        if len(unique) < 2:
            raise TournamentError("A duel needs at least 2 distinct candidates")

        # random.shuffle is a Fisher-Yates shuffle
        self._rng.shuffle(unique)

        self.contenders = unique
        self.winner = None
        self.initial_count = len(unique)
        self.choices_made = 0
        self.history = []
        self.current_pair = (unique[0], unique[1])
        self.phase = TournamentPhase.pair_presented
        logger.debug("Duel started with %d contenders", len(unique))
        return self.current_pair

    def choose(self, winner_id: str) -> TournamentPhase:
        if self.phase is not TournamentPhase.pair_presented or self.current_pair is None:
            raise TournamentError("No pair is currently presented")

        first, second = self.current_pair
        if winner_id == first.id:
            winner, loser = first, second
        elif winner_id == second.id:
            winner, loser = second, first
        else:
            raise TournamentError(f"{winner_id!r} is not in the presented pair")

        remaining = [c for c in self.contenders if c.id not in (first.id, second.id)]
        remaining.append(winner)
        self.contenders = remaining
        self.choices_made += 1
        self.history.append((winner.id, loser.id))

        if len(remaining) == 1:
            self.winner = winner
            self.contenders = []
            self.current_pair = None
            self.phase = TournamentPhase.finished
            logger.info("Duel finished after %d choices, winner=%s", self.choices_made, winner.id)
            return self.phase

        self.phase = TournamentPhase.round_transition
        logger.debug("%s beat %s, %d contenders left", winner.id, loser.id, len(remaining))
        self.current_pair = (remaining[0], remaining[1])
        self.phase = TournamentPhase.pair_presented
        return self.phase

    def reset(self) -> None:
        self.phase = TournamentPhase.idle
        self.contenders = []
        self.current_pair = None
        self.winner = None
        self.initial_count = 0
        self.choices_made = 0
        self.history = []

    @property
    def remaining_choices(self) -> int:
        return max(0, len(self.contenders) - 1)
