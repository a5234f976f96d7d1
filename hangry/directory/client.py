from __future__ import annotations

import logging
import random
from typing import Any, Literal

import httpx
from pydantic import BaseModel, Field, ValidationError

from ..cache import ResponseCache
from ..errors import UpstreamError
from ..recommendations.models import Candidate, Coordinates
from .config import DEFAULT_DIRECTORY_CONFIG, DirectoryConfig
from .fixtures import SAMPLE_CANDIDATES

logger = logging.getLogger(__name__)

PRICE_SYMBOLS = ["$", "$$", "$$$", "$$$$"]
SORT_MODES = ["best_match", "rating", "review_count", "distance"]


class DirectoryQuery(BaseModel):
    location: str | None = None
    coordinates: Coordinates | None = None
    radius_meters: int | None = Field(default=None, ge=1)
    excluded_categories: list[str] = Field(default_factory=list)
    open_now: bool = False
    price_tiers: list[str] = Field(default_factory=list)


class DirectoryResult(BaseModel):
    candidates: list[Candidate]
    source: Literal["directory", "fixture"]
    cache_hit: bool = False


def price_param(tiers: list[str]) -> str | None:
    """Translate ``["$", "$$$"]`` into the upstream ``"1,3"`` form."""
    ordinals = sorted({PRICE_SYMBOLS.index(t) + 1 for t in tiers if t in PRICE_SYMBOLS})
    if not ordinals:
        return None
    return ",".join(str(o) for o in ordinals)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def listing_to_candidate(listing: dict[str, Any]) -> Candidate:
    if not isinstance(listing, dict):
        raise TypeError(f"listing must be an object, got {type(listing).__name__}")

    coords = _as_dict(listing.get("coordinates"))
    coordinates = None
    if coords.get("latitude") is not None and coords.get("longitude") is not None:
        coordinates = Coordinates(latitude=coords["latitude"], longitude=coords["longitude"])

    photos = listing.get("photos") or []
    location = _as_dict(listing.get("location"))
    categories = [_as_dict(c).get("title") for c in listing.get("categories") or []]
    return Candidate(
        id=str(listing["id"]),
        name=listing.get("name", ""),
        categories=[title for title in categories if title],
        rating=listing.get("rating"),
        price=listing.get("price"),
        address=", ".join(location.get("display_address") or []),
        image=listing.get("image_url") or (photos[0] if photos else ""),
        url=listing.get("url"),
        photos=photos,
        coordinates=coordinates,
    )


def exclude_categories(candidates: list[Candidate], excluded: list[str]) -> list[Candidate]:
    banned = {e.lower() for e in excluded}
    if not banned:
        return candidates
    return [c for c in candidates if not any(cat.lower() in banned for cat in c.categories)]


def filter_price_tiers(candidates: list[Candidate], tiers: list[str]) -> list[Candidate]:
    wanted = {t for t in tiers if t in PRICE_SYMBOLS}
    if not wanted:
        return candidates
    return [c for c in candidates if c.price in wanted]


class DirectoryService:
    """Restaurant directory lookup with fixture fallback.

    Never raises to the caller: any upstream problem is logged and the
    built-in sample set is served instead.
    """

    def __init__(
        self,
        config: DirectoryConfig = DEFAULT_DIRECTORY_CONFIG,
        transport: httpx.AsyncBaseTransport | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config
        self._transport = transport
        self._rng = rng or random.Random()
        self.cache = ResponseCache(ttl=config.cache_ttl)

    def _params(self, query: DirectoryQuery) -> dict[str, Any]:
        params: dict[str, Any] = {
            "term": "restaurants",
            "limit": self.config.limit,
            # Vary the slice of results between searches
            "offset": self._rng.randint(0, self.config.max_offset),
            "sort_by": self._rng.choice(SORT_MODES),
        }
        if query.coordinates is not None:
            params["latitude"] = query.coordinates.latitude
            params["longitude"] = query.coordinates.longitude
        else:
            params["location"] = query.location or self.config.default_location
        if query.radius_meters:
            params["radius"] = min(query.radius_meters, self.config.max_radius)
        if query.open_now:
            params["open_now"] = "true"
        price = price_param(query.price_tiers)
        if price:
            params["price"] = price
        return params

    async def _fetch(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        try:
            async with httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    "/businesses/search",
                    params=params,
                    headers={
                        "Authorization": f"Bearer {self.config.api_key}",
                        "Accept": "application/json",
                    },
                )
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamError(f"Directory request failed: {exc}") from exc

        businesses = payload.get("businesses") if isinstance(payload, dict) else None
        if not isinstance(businesses, list):
            raise UpstreamError("Directory response has no businesses list")
        return businesses

    def fallback(self, query: DirectoryQuery) -> DirectoryResult:
        candidates = exclude_categories(list(SAMPLE_CANDIDATES), query.excluded_categories)
        candidates = filter_price_tiers(candidates, query.price_tiers)
        return DirectoryResult(candidates=candidates, source="fixture")

    async def search(self, query: DirectoryQuery) -> DirectoryResult:
        if not self.config.enabled or not self.config.api_key:
            return self.fallback(query)

        cache_key = query.model_dump()
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached.model_copy(update={"cache_hit": True})

        try:
            listings = await self._fetch(self._params(query))
        except UpstreamError:
            logger.warning("Directory lookup failed, serving sample restaurants", exc_info=True)
            return self.fallback(query)

        candidates: list[Candidate] = []
        for listing in listings:
            try:
                candidates.append(listing_to_candidate(listing))
            except (AttributeError, KeyError, TypeError, ValidationError):
                logger.debug("Skipping malformed listing %r", listing, exc_info=True)

        result = DirectoryResult(
            candidates=exclude_categories(candidates, query.excluded_categories),
            source="directory",
        )
        self.cache.set(cache_key, result)
        return result
