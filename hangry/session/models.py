from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from ..recommendations.models import Candidate, DecisionStatus, SortKey, parse_status


class SearchRequest(BaseModel):
    location: str | None = Field(default=None, description="Free-text location fallback")
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    use_ip_location: bool = False
    radius_meters: int | None = Field(default=None, ge=1, le=40_000)
    max_distance_miles: float | None = Field(default=None, gt=0.0)
    excluded_categories: list[str] = Field(default_factory=list)
    open_now: bool = False
    price_tiers: list[str] = Field(default_factory=list, description='e.g. ["$", "$$"]')

    @model_validator(mode="after")
    def _both_or_neither(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be given together")
        return self


class SearchResponse(BaseModel):
    total_candidates: int
    source: Literal["directory", "fixture"]
    used_coordinates: bool
    location: str | None = None
    max_distance: float | None = None
    notice: str | None = None


class DecisionRequest(BaseModel):
    candidate_id: str = Field(..., min_length=1)
    status: DecisionStatus

    @field_validator("status", mode="before")
    @classmethod
    def _accept_swipe_words(cls, v):
        return parse_status(v)


class DecisionResponse(BaseModel):
    status: str
    total_decisions: int
    approved_count: int
    next_candidate: Candidate | None = None


class DeckState(BaseModel):
    current: Candidate | None
    position: int
    remaining: int
    approved_count: int


class OptionsResponse(BaseModel):
    options: list[Candidate]
    approved_count: int
    sort: SortKey
