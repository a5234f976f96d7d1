from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GeolocationConfig:
    base_url: str = "https://ipapi.co"
    timeout: float = 5.0
    enabled: bool = True


DEFAULT_GEOLOCATION_CONFIG = GeolocationConfig()
