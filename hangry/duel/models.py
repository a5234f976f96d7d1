from __future__ import annotations

from pydantic import BaseModel, Field

from ..recommendations.models import Candidate
from .tournament import Tournament, TournamentPhase


class DuelStartRequest(BaseModel):
    candidate_ids: list[str] | None = Field(
        default=None,
        description="Subset to duel; defaults to the approved candidates",
    )


class DuelChoiceRequest(BaseModel):
    winner_id: str = Field(..., min_length=1)


class DuelState(BaseModel):
    phase: TournamentPhase
    pair: list[Candidate] | None = None
    winner: Candidate | None = None
    contenders_left: int = 0
    choices_made: int = 0
    remaining_choices: int = 0

    @classmethod
    def from_tournament(cls, tournament: Tournament) -> "DuelState":
        return cls(
            phase=tournament.phase,
            pair=list(tournament.current_pair) if tournament.current_pair else None,
            winner=tournament.winner,
            contenders_left=len(tournament.contenders),
            choices_made=tournament.choices_made,
            remaining_choices=tournament.remaining_choices,
        )
