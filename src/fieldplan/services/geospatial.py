"""Geospatial helper functions."""

from __future__ import annotations

import math
from datetime import timedelta

from ..models.domain import Location

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(origin: Location, destination: Location) -> float:
    return haversine_km(origin.latitude, origin.longitude, destination.latitude, destination.longitude)


def travel_time(distance: float, speed_kmh: float) -> timedelta:
    """Time needed to cover ``distance`` km at a constant ``speed_kmh``."""

    if speed_kmh <= 0:
        raise ValueError("speed_kmh must be > 0")
    return timedelta(hours=distance / speed_kmh)
