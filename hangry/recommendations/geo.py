from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .models import Candidate, Coordinates

EARTH_RADIUS_M = 6_371_000.0
METERS_PER_MILE = 1609.344


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two points given in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push a marginally above 1 for antipodal points
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distances_from(origin: Coordinates, candidates: Sequence[Candidate]) -> np.ndarray:
    """Vectorised haversine from *origin* to every candidate.

    Candidates without coordinates get ``nan``.
    """
    lats = np.array(
        [c.coordinates.latitude if c.coordinates else np.nan for c in candidates],
        dtype=float,
    )
    lons = np.array(
        [c.coordinates.longitude if c.coordinates else np.nan for c in candidates],
        dtype=float,
    )
    if lats.size == 0:
        return lats

    phi1 = np.radians(origin.latitude)
    phi2 = np.radians(lats)
    d_phi = phi2 - phi1
    d_lambda = np.radians(lons - origin.longitude)

    a = np.sin(d_phi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    return 2 * EARTH_RADIUS_M * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def annotate_distances(
    pool: Sequence[Candidate],
    origin: Coordinates | None,
) -> list[Candidate]:
    """Return copies of *pool* with ``distance`` measured from *origin*.

    Without an origin every distance is cleared, since distance is only
    defined relative to a known user coordinate.
    """
    if origin is None:
        return [c.model_copy(update={"distance": None}) for c in pool]

    dists = distances_from(origin, pool)
    annotated: list[Candidate] = []
    for candidate, d in zip(pool, dists):
        distance = None if np.isnan(d) else float(d)
        annotated.append(candidate.model_copy(update={"distance": distance}))
    return annotated


def miles_to_meters(miles: float) -> float:
    return miles * METERS_PER_MILE


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{round(meters)}m"
    return f"{meters / 1000:.1f}km"
