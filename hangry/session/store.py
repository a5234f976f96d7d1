"""
Per-user session state.

A session owns exactly one candidate pool, the ordered decision history
and the duel in progress. Sessions are kept in memory on the application
and addressed by an opaque id held in the signed session cookie.
"""
from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable

from ..duel.tournament import Tournament
from ..recommendations.models import Candidate, Coordinates, Decision, DecisionStatus

logger = logging.getLogger(__name__)

_DEFAULT_IDLE_TTL = 6 * 60 * 60  # 6 hours
_DEFAULT_MAX_SESSIONS = 10_000


@dataclass
class SessionContext:
    pool: list[Candidate] = field(default_factory=list)
    decisions: list[Decision] = field(default_factory=list)
    tournament: Tournament = field(default_factory=Tournament)
    cursor: int = 0
    origin: Coordinates | None = None
    location_label: str | None = None
    max_distance: float | None = None
    search_generation: int = 0

    def begin_search(self) -> int:
        """Claim a generation token; any older in-flight search is superseded."""
        self.search_generation += 1
        return self.search_generation

    def replace_pool(
        self,
        generation: int,
        pool: list[Candidate],
        origin: Coordinates | None,
        location_label: str | None,
        max_distance: float | None,
    ) -> bool:
        """Install a fetched pool unless a newer search started meanwhile."""
        if generation != self.search_generation:
            logger.info("Discarding superseded search %d (current %d)", generation, self.search_generation)
            return False
        self.pool = pool
        self.origin = origin
        self.location_label = location_label
        self.max_distance = max_distance
        self.cursor = 0
        self.tournament.reset()
        return True

    def find(self, candidate_id: str) -> Candidate | None:
        for candidate in self.pool:
            if candidate.id == candidate_id:
                return candidate
        return None

    def current_card(self) -> Candidate | None:
        if self.cursor < len(self.pool):
            return self.pool[self.cursor]
        return None

    def record_decision(self, candidate_id: str, status: DecisionStatus) -> Decision:
        candidate = self.find(candidate_id)
        if candidate is None:
            raise KeyError(candidate_id)

        decision = Decision(candidate_id=candidate_id, status=status, candidate=candidate)
        self.decisions.append(decision)

        current = self.current_card()
        if current is not None and current.id == candidate_id:
            self.cursor += 1
        return decision

    def lookup(self, candidate_ids: list[str]) -> list[Candidate]:
        """Resolve ids against the pool, then against decision snapshots."""
        snapshots = {d.candidate_id: d.candidate for d in self.decisions}
        resolved: list[Candidate] = []
        for cid in candidate_ids:
            candidate = self.find(cid) or snapshots.get(cid)
            if candidate is None:
                raise KeyError(cid)
            resolved.append(candidate)
        return resolved

    def reset(self) -> None:
        self.decisions.clear()
        self.cursor = 0
        self.tournament.reset()


class SessionStore:
    """In-memory sessions keyed by opaque id.

    Sessions idle for longer than ``idle_ttl`` seconds are dropped, and once
    ``max_sessions`` is reached the least recently used one is evicted.
    """

    def __init__(
        self,
        tournament_factory: Callable[[], Tournament] = Tournament,
        idle_ttl: float = _DEFAULT_IDLE_TTL,
        max_sessions: int = _DEFAULT_MAX_SESSIONS,
    ) -> None:
        self._tournament_factory = tournament_factory
        self.idle_ttl = idle_ttl
        self.max_sessions = max_sessions
        # Insertion order doubles as recency order
        self._sessions: dict[str, tuple[float, SessionContext]] = {}

    def _prune(self, now: float) -> None:
        expired = [sid for sid, (seen, _) in self._sessions.items() if now - seen >= self.idle_ttl]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug("Dropped %d idle sessions", len(expired))

    def get_or_create(self, session_id: str | None) -> tuple[str, SessionContext]:
        now = time.time()
        self._prune(now)

        if session_id and session_id in self._sessions:
            _, context = self._sessions.pop(session_id)
            self._sessions[session_id] = (now, context)
            return session_id, context

        while self._sessions and len(self._sessions) >= self.max_sessions:
            oldest = next(iter(self._sessions))
            del self._sessions[oldest]
            logger.info("Session limit %d reached, evicted %s", self.max_sessions, oldest)

        new_id = uuid.uuid4().hex
        context = SessionContext(tournament=self._tournament_factory())
        self._sessions[new_id] = (now, context)
        return new_id, context

    def __len__(self) -> int:
        return len(self._sessions)
