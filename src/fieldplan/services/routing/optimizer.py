"""Nearest-neighbour visit sequencing for multi-stop routes."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Mapping, Sequence

from ...config import OptimizerConfig
from ...models.domain import Job, Location
from ..errors import NoLocatedJobsError
from ..geospatial import distance_km, travel_time
from .models import RouteOptimization, RouteStop

logger = logging.getLogger(__name__)


class RouteOptimizer:
    """Greedy TSP approximation starting from a fixed location."""

    def __init__(self, config: OptimizerConfig | None = None) -> None:
        self.config = config or OptimizerConfig()

    def optimize_route(
        self,
        jobs: Sequence[Job],
        locations: Mapping[str, Location],
        start_location: Location,
        departure_time: datetime,
    ) -> RouteOptimization:
        """Order located jobs by nearest neighbour and compare with input order.

        Jobs without an entry in ``locations`` are left out of the route.
        """

        located = [job for job in jobs if job.job_id in locations]
        if not located:
            raise NoLocatedJobsError(len(jobs))

        stops = self.nearest_neighbor(located, locations, start_location, departure_time)
        total_distance, total_duration = self.route_metrics(stops)
        original_distance, _ = self.original_route_metrics(located, locations, start_location)

        savings = 0.0
        if original_distance > 0:
            savings = (original_distance - total_distance) / original_distance * 100

        logger.info(
            "Route optimized: %d stops, %.2f km, %.1f%% savings", len(stops), total_distance, savings
        )
        return RouteOptimization(
            stops=stops,
            total_distance=total_distance,
            total_duration_minutes=total_duration,
            savings_percent=savings,
            original_distance=original_distance,
        )

    def nearest_neighbor(
        self,
        jobs: Sequence[Job],
        locations: Mapping[str, Location],
        start_location: Location,
        departure_time: datetime,
    ) -> list[RouteStop]:
        default = self.config.default_job_duration_minutes
        speed = self.config.average_speed_kmh
        route: list[RouteStop] = []
        visited: set[str] = set()
        current = start_location

        while len(visited) < len(jobs):
            nearest_job: Job | None = None
            nearest_distance = math.inf
            for job in jobs:
                if job.job_id in visited:
                    continue
                candidate = distance_km(current, locations[job.job_id])
                # Strict comparison keeps the first job scanned on ties.
                if candidate < nearest_distance:
                    nearest_distance = candidate
                    nearest_job = job

            if nearest_job is None:
                break

            if route:
                previous = route[-1]
                arrival = (
                    previous.arrival_time
                    + timedelta(minutes=previous.duration_minutes)
                    + travel_time(nearest_distance, speed)
                )
            else:
                arrival = departure_time + travel_time(nearest_distance, speed)

            location = locations[nearest_job.job_id]
            route.append(
                RouteStop(
                    job_id=nearest_job.job_id,
                    address=location.address,
                    sequence=len(route) + 1,
                    arrival_time=arrival,
                    duration_minutes=nearest_job.duration_minutes(default),
                    distance_from_previous=nearest_distance,
                )
            )
            visited.add(nearest_job.job_id)
            current = location

        return route

    def route_metrics(self, stops: Sequence[RouteStop]) -> tuple[float, int]:
        total_distance = sum(stop.distance_from_previous for stop in stops)
        total_duration = sum(stop.duration_minutes for stop in stops)
        total_duration += len(stops) * self.config.travel_minutes_between_jobs
        return total_distance, total_duration

    def original_route_metrics(
        self,
        jobs: Sequence[Job],
        locations: Mapping[str, Location],
        start_location: Location,
    ) -> tuple[float, int]:
        """Distance and work minutes when jobs are visited in the given order."""

        default = self.config.default_job_duration_minutes
        total_distance = 0.0
        total_duration = 0
        current = start_location
        for job in jobs:
            location = locations.get(job.job_id)
            if location is None:
                continue
            total_distance += distance_km(current, location)
            total_duration += job.duration_minutes(default)
            current = location
        return total_distance, total_duration
