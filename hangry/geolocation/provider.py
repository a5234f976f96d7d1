from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

import httpx
from pydantic import BaseModel, ValidationError

from ..recommendations.models import Coordinates
from .config import DEFAULT_GEOLOCATION_CONFIG, GeolocationConfig

logger = logging.getLogger(__name__)


class GeolocationError(RuntimeError):
    """The provider could not determine a position; ``str(exc)`` is the reason."""


class LocationResolution(BaseModel):
    coordinates: Coordinates | None = None
    notice: str | None = None


class GeolocationProvider(ABC):
    """Source of the user's position; raises ``GeolocationError`` when unknown."""

    @abstractmethod
    async def locate(self, ip: str | None = None) -> Coordinates:
        ...


class StaticGeolocationProvider(GeolocationProvider):
    def __init__(self, coordinates: Coordinates | None) -> None:
        self.coordinates = coordinates

    async def locate(self, ip: str | None = None) -> Coordinates:
        if self.coordinates is None:
            raise GeolocationError("Location is not available")
        return self.coordinates


class IPGeolocationProvider(GeolocationProvider):
    """Approximate position from the client's IP address."""

    def __init__(
        self,
        config: GeolocationConfig = DEFAULT_GEOLOCATION_CONFIG,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    async def locate(self, ip: str | None = None) -> Coordinates:
        if not self.config.enabled:
            raise GeolocationError("IP geolocation is disabled")

        # Without an ip the service locates the address the request comes from
        url = f"{self.config.base_url}/{ip}/json/" if ip else f"{self.config.base_url}/json/"
        try:
            async with httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport) as client:
                response = await client.get(url)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise GeolocationError(f"Geolocation lookup failed: {exc}") from exc

        if not isinstance(payload, dict) or payload.get("error"):
            reason = payload.get("reason") if isinstance(payload, dict) else None
            raise GeolocationError(reason or "Geolocation lookup returned no position")
        try:
            return Coordinates(latitude=payload["latitude"], longitude=payload["longitude"])
        except (KeyError, ValidationError) as exc:
            raise GeolocationError("Geolocation response has no usable coordinates") from exc


async def resolve_location(
    provider: GeolocationProvider,
    ip: str | None = None,
    timeout: float = 5.0,
) -> LocationResolution:
    """Ask *provider* for a position, never waiting longer than *timeout*.

    Failure is not fatal: the caller gets no coordinates and a notice to
    show the user, and carries on with a text location.
    """
    try:
        coordinates = await asyncio.wait_for(provider.locate(ip), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Geolocation timed out after %.1fs", timeout)
        return LocationResolution(notice="Locating you took too long; using your search location instead.")
    except GeolocationError as exc:
        logger.warning("Geolocation failed: %s", exc)
        return LocationResolution(notice=f"Couldn't get your location ({exc}); using your search location instead.")
    return LocationResolution(coordinates=coordinates)
