"""Scheduling orchestration service."""

from __future__ import annotations

import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Optional, Sequence

from ...config import OptimizerConfig, settings
from ...data.stores import JobStore, PropertyStore
from ...models.domain import Job, Location, ResourceKind, TimeRange
from ..availability.calculator import AvailabilityCalculator
from ..availability.models import AvailabilityResponse, ResourceAvailability
from ..errors import NoValidJobsError
from ..routing.models import RouteOptimization
from ..routing.optimizer import RouteOptimizer
from .models import CalendarEvent, ScheduleConstraint, ScheduleResult
from .optimizer import ScheduleOptimizer

logger = logging.getLogger(__name__)

# constraint type -> OptimizerConfig field it overrides for one request
CONSTRAINT_OVERRIDES = {
    "buffer_minutes": "inter_job_buffer_minutes",
    "default_duration_minutes": "default_job_duration_minutes",
    "max_gap_minutes": "large_gap_minutes",
}

# smallest accepted value per constraint type
CONSTRAINT_MINIMUMS = {"default_duration_minutes": 1}


def _apply_constraints(config: OptimizerConfig, constraints: Sequence[ScheduleConstraint]) -> OptimizerConfig:
    overrides: dict[str, int] = {}
    for constraint in constraints:
        field_name = CONSTRAINT_OVERRIDES.get(constraint.type)
        if field_name is None:
            logger.warning("Ignoring unsupported schedule constraint '%s'", constraint.type)
            continue
        try:
            value = int(constraint.parameters)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"Constraint '{constraint.type}' expects an integer number of minutes, got {constraint.parameters!r}"
            ) from exc
        minimum = CONSTRAINT_MINIMUMS.get(constraint.type, 0)
        if value < minimum:
            raise ValueError(f"Constraint '{constraint.type}' must be >= {minimum}")
        overrides[field_name] = value
    return dataclasses.replace(config, **overrides) if overrides else config


class SchedulingService:
    """Resolves snapshots from the stores and runs the optimizers over them.

    Lookups that fail are logged and skipped; only a request that leaves
    nothing to work with is reported as an error.
    """

    def __init__(
        self,
        job_store: JobStore,
        property_store: PropertyStore,
        *,
        config: OptimizerConfig | None = None,
        max_lookup_workers: int | None = None,
    ) -> None:
        self.job_store = job_store
        self.property_store = property_store
        self.config = config or OptimizerConfig.from_settings()
        self.max_lookup_workers = max_lookup_workers or settings.max_lookup_workers
        self.availability = AvailabilityCalculator(self.config)

    def optimize_schedule(
        self,
        job_ids: Sequence[str],
        time_range: TimeRange,
        constraints: Sequence[ScheduleConstraint] = (),
    ) -> ScheduleResult:
        jobs: list[Job] = []
        for job_id in job_ids:
            job = self._get_job(job_id)
            if job is not None:
                jobs.append(job)

        if not jobs:
            raise NoValidJobsError(len(job_ids))

        config = _apply_constraints(self.config, constraints)
        resources = self._resource_busy_state(time_range, config, exclude={job.job_id for job in jobs})
        result = ScheduleOptimizer(config).optimize(jobs, time_range, resources)

        logger.info(
            "Schedule optimized successfully: jobs=%d scheduled=%d utilization=%.2f",
            len(jobs),
            len(result.slots),
            result.metrics.utilization,
        )
        return result

    def optimize_route(
        self,
        jobs: Sequence[Job],
        start_location: Location,
        departure_time: datetime,
    ) -> RouteOptimization:
        if not jobs:
            raise ValueError("No jobs provided for route optimization.")
        locations = self._resolve_locations(jobs)
        return RouteOptimizer(self.config).optimize_route(jobs, locations, start_location, departure_time)

    def check_availability(
        self,
        time_range: TimeRange,
        user_ids: Sequence[str] = (),
        crew_ids: Sequence[str] = (),
    ) -> AvailabilityResponse:
        response = AvailabilityResponse()

        bookings: list[Job] = []
        if user_ids:
            try:
                bookings = self.job_store.jobs_in_range(
                    time_range.start, time_range.end, default_duration=self.config.default_job_duration_minutes
                )
            except Exception as exc:
                logger.warning("Failed to load bookings for availability check: %s", exc)
                response.unchecked_resources.extend(user_ids)
                user_ids = ()

        for user_id in user_ids:
            user_bookings = [job for job in bookings if job.assigned_user_id == user_id]
            result = self.availability.compute_availability(user_id, ResourceKind.USER, time_range, user_bookings)
            response.available_slots.extend(result.slots)
            response.conflicts.extend(result.conflicts)

        for crew_id in crew_ids:
            result = self.availability.compute_availability(crew_id, ResourceKind.CREW, time_range)
            response.available_slots.extend(result.slots)
            response.conflicts.extend(result.conflicts)
            if not result.conflict_aware:
                response.unchecked_resources.append(crew_id)

        response.available_slots.sort(key=lambda slot: slot.start_time)
        return response

    def get_calendar_events(self, user_id: str, start: datetime, end: datetime) -> list[CalendarEvent]:
        try:
            jobs = self.job_store.jobs_in_range(start, end, default_duration=self.config.default_job_duration_minutes)
        except Exception as exc:
            raise ValueError(f"Failed to get jobs for calendar: {exc}") from exc

        user_jobs = [job for job in jobs if job.assigned_user_id == user_id]
        locations = self._resolve_locations(user_jobs)

        events: list[CalendarEvent] = []
        for job in user_jobs:
            booked = job.booked_range(self.config.default_job_duration_minutes)
            if booked is None:
                continue
            events.append(
                CalendarEvent(
                    event_id=job.job_id,
                    title=job.title,
                    description=job.description or "",
                    start_time=booked.start,
                    end_time=booked.end,
                    status=job.status,
                    location=locations.get(job.job_id),
                )
            )
        events.sort(key=lambda event: event.start_time)
        return events

    def _get_job(self, job_id: str) -> Optional[Job]:
        try:
            return self.job_store.get_job(job_id)
        except Exception as exc:
            logger.warning("Failed to get job %s for optimization: %s", job_id, exc)
            return None

    def _resource_busy_state(
        self, time_range: TimeRange, config: OptimizerConfig, *, exclude: set[str]
    ) -> list[ResourceAvailability]:
        try:
            existing = self.job_store.jobs_in_range(
                time_range.start, time_range.end, default_duration=config.default_job_duration_minutes
            )
        except Exception as exc:
            logger.warning("Failed to load existing bookings, scheduling without conflicts: %s", exc)
            return []

        by_user: dict[str, list[Job]] = {}
        for job in existing:
            if job.job_id in exclude or job.assigned_user_id is None:
                continue
            by_user.setdefault(job.assigned_user_id, []).append(job)

        calculator = AvailabilityCalculator(config)
        return [
            calculator.busy_intervals(user_id, ResourceKind.USER, user_jobs)
            for user_id, user_jobs in by_user.items()
        ]

    def _resolve_locations(self, jobs: Sequence[Job]) -> dict[str, Location]:
        """Fetch property coordinates for each job in parallel."""

        pending = [job for job in jobs if job.property_id]
        if not pending:
            return {}

        locations: dict[str, Location] = {}
        with ThreadPoolExecutor(max_workers=min(self.max_lookup_workers, len(pending))) as executor:
            futures = {executor.submit(self.property_store.get_property, job.property_id): job for job in pending}
            for future in as_completed(futures):
                job = futures[future]
                try:
                    prop = future.result()
                except Exception as exc:
                    logger.warning("Failed to get property for job %s: %s", job.job_id, exc)
                    continue
                location = prop.location() if prop is not None else None
                if location is not None:
                    locations[job.job_id] = location
        return locations
