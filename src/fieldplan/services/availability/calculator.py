"""Free/busy computation for users and crews over a business day."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo
from typing import Iterable, Sequence

from ...config import OptimizerConfig
from ...models.domain import Job, ResourceKind, TimeRange
from .models import AvailabilityConflict, AvailabilityResult, AvailabilitySlot, ResourceAvailability

logger = logging.getLogger(__name__)


class AvailabilityCalculator:
    """Scans existing bookings of a resource to find bookable gaps."""

    def __init__(self, config: OptimizerConfig | None = None) -> None:
        self.config = config or OptimizerConfig()

    def business_day(self, window: TimeRange, tz: tzinfo | None = None) -> TimeRange:
        """Business hours on the calendar date of ``window.start``.

        The date is taken in ``tz`` when both it and the window are timezone-aware,
        otherwise in the window's own clock.
        """

        anchor = window.start
        if tz is not None and anchor.tzinfo is not None:
            anchor = anchor.astimezone(tz)
        midnight = anchor.replace(hour=0, minute=0, second=0, microsecond=0)
        return TimeRange(
            start=midnight + timedelta(hours=self.config.business_day_start_hour),
            end=midnight + timedelta(hours=self.config.business_day_end_hour),
        )

    def booked_ranges(self, bookings: Iterable[Job]) -> list[tuple[Job, TimeRange]]:
        """Dated bookings with their occupied interval, ordered by start."""

        dated: list[tuple[Job, TimeRange]] = []
        for job in bookings:
            booked = job.booked_range(self.config.default_job_duration_minutes)
            if booked is None:
                continue
            dated.append((job, booked))
        dated.sort(key=lambda item: item[1].start)
        return dated

    def compute_availability(
        self,
        resource_id: str,
        resource_kind: ResourceKind,
        window: TimeRange,
        existing_bookings: Sequence[Job] = (),
        *,
        tz: tzinfo | None = None,
    ) -> AvailabilityResult:
        if resource_kind is ResourceKind.CREW:
            return self._crew_availability(resource_id, window, tz)
        return self._user_availability(resource_id, window, existing_bookings, tz)

    def busy_intervals(self, resource_id: str, resource_kind: ResourceKind, bookings: Iterable[Job]) -> ResourceAvailability:
        busy = tuple(booked for _, booked in self.booked_ranges(bookings))
        return ResourceAvailability(resource_id=resource_id, resource_kind=resource_kind, busy=busy)

    def _user_availability(
        self,
        resource_id: str,
        window: TimeRange,
        bookings: Sequence[Job],
        tz: tzinfo | None,
    ) -> AvailabilityResult:
        day = self.business_day(window, tz)
        min_slot = timedelta(minutes=self.config.min_slot_minutes)
        slots: list[AvailabilitySlot] = []
        conflicts: list[AvailabilityConflict] = []

        cursor = max(window.start, day.start)
        for job, booked in self.booked_ranges(bookings):
            conflicts.append(
                AvailabilityConflict(
                    resource_id=resource_id,
                    resource_type=ResourceKind.USER,
                    conflict_time=booked,
                    reason=f"Assigned to job: {job.title}",
                )
            )
            if cursor < booked.start and cursor < day.end:
                slot_end = min(booked.start, day.end, window.end)
                if slot_end - cursor >= min_slot:
                    slots.append(AvailabilitySlot(resource_id, ResourceKind.USER, cursor, slot_end))
            cursor = max(cursor, booked.end)

        if cursor < day.end and cursor < window.end:
            slot_end = min(day.end, window.end)
            if slot_end - cursor >= min_slot:
                slots.append(AvailabilitySlot(resource_id, ResourceKind.USER, cursor, slot_end))

        logger.debug("User %s: %d free slots, %d conflicts", resource_id, len(slots), len(conflicts))
        return AvailabilityResult(
            resource_id=resource_id,
            resource_kind=ResourceKind.USER,
            slots=tuple(slots),
            conflicts=tuple(conflicts),
        )

    def _crew_availability(self, resource_id: str, window: TimeRange, tz: tzinfo | None) -> AvailabilityResult:
        # Crew bookings are not consulted yet; the whole business day is offered.
        # It is still clipped to the window so no slot falls outside the request.
        day = self.business_day(window, tz)
        slots: tuple[AvailabilitySlot, ...] = ()
        if day.end > window.start and day.start < window.end:
            start: datetime = max(day.start, window.start)
            end: datetime = min(day.end, window.end)
            slots = (AvailabilitySlot(resource_id, ResourceKind.CREW, start, end),)
        return AvailabilityResult(
            resource_id=resource_id,
            resource_kind=ResourceKind.CREW,
            slots=slots,
            conflicts=(),
            conflict_aware=False,
        )
