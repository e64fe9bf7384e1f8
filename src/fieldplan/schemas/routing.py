"""Route optimization request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from .common import JobModel, LocationModel, PropertyModel


class RouteOptimizationRequest(BaseModel):
    jobs: List[JobModel] = Field(..., min_length=1)
    properties: List[PropertyModel] = Field(default_factory=list)
    start_location: LocationModel
    departure_time: datetime = Field(..., description="When the route leaves the start location.")


class RouteStopModel(BaseModel):
    job_id: str
    address: str
    sequence: int
    arrival_time: datetime
    duration_minutes: int
    distance_from_previous: float


class RouteOptimizationResponse(BaseModel):
    optimized_route: List[RouteStopModel]
    total_distance: float
    total_duration_minutes: int
    savings_percent: float
