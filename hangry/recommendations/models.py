from __future__ import annotations

import time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class Candidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    categories: list[str] = Field(default_factory=list)
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    price: str | None = Field(default=None, description='Price symbol, "$" to "$$$$"')
    address: str = ""
    image: str = ""
    url: str | None = None
    photos: list[str] = Field(default_factory=list)
    coordinates: Coordinates | None = None
    distance: float | None = Field(default=None, ge=0.0, description="Meters from the user")

    @property
    def price_tier(self) -> int | None:
        return len(self.price) if self.price else None


class DecisionStatus(str, Enum):
    approve = "approve"
    reject = "reject"
    undecided = "undecided"


# Swipe vocabulary used by the mobile client.
_STATUS_ALIASES = {
    "yum": DecisionStatus.approve,
    "yuck": DecisionStatus.reject,
    "maybe": DecisionStatus.undecided,
}


def parse_status(value: str | DecisionStatus) -> DecisionStatus:
    if isinstance(value, DecisionStatus):
        return value
    lower = str(value).strip().lower()
    if lower in _STATUS_ALIASES:
        return _STATUS_ALIASES[lower]
    return DecisionStatus(lower)


class Decision(BaseModel):
    candidate_id: str
    status: DecisionStatus
    candidate: Candidate
    decided_at: float = Field(default_factory=time.time)

    @field_validator("status", mode="before")
    @classmethod
    def _normalise_status(cls, v):
        return parse_status(v)


class AffinityProfile(BaseModel):
    liked_categories: set[str] = Field(default_factory=set)
    disliked_categories: set[str] = Field(default_factory=set)
    category_score: dict[str, float] = Field(default_factory=dict)

    @property
    def has_signal(self) -> bool:
        return bool(self.liked_categories or self.disliked_categories)


class SortKey(str, Enum):
    default = "default"
    distance = "distance"
    price = "price"
    rating = "rating"


class RankedCandidate(BaseModel):
    candidate: Candidate
    score: float
    reason: str | None = None


class RecommendationRequest(BaseModel):
    max_distance: float | None = Field(
        default=None,
        ge=0.0,
        description="Meters used for distance normalisation; falls back to the search radius",
    )
    sort: SortKey = SortKey.default
    limit: int | None = Field(default=None, ge=1, le=50)
    explain: bool = False


class RecommendationResponse(BaseModel):
    recommendations: list[RankedCandidate]
    total_candidates: int
    sort: SortKey
