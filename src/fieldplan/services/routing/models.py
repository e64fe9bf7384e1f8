"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List


@dataclass(frozen=True, slots=True)
class RouteStop:
    job_id: str
    address: str
    sequence: int
    arrival_time: datetime
    duration_minutes: int
    distance_from_previous: float


@dataclass(frozen=True, slots=True)
class RouteOptimization:
    stops: List[RouteStop]
    total_distance: float
    total_duration_minutes: int
    savings_percent: float
    original_distance: float = 0.0
