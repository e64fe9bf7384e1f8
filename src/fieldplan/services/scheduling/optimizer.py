"""Greedy priority-ordered job scheduling."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from ...config import OptimizerConfig
from ...models.domain import Job, ResourceKind, TimeRange
from ..availability.models import ResourceAvailability
from .models import ScheduleMetrics, ScheduleResult, ScheduleSlot

logger = logging.getLogger(__name__)

TimelineKey = Optional[tuple[str, str]]


def _timeline_for(job: Job) -> TimelineKey:
    if job.assigned_user_id is not None:
        return (ResourceKind.USER.value, job.assigned_user_id)
    if job.assigned_crew_id is not None:
        return (ResourceKind.CREW.value, job.assigned_crew_id)
    return None


def _format_gap(gap: timedelta) -> str:
    minutes = int(gap.total_seconds() // 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h{minutes}m"


class ScheduleOptimizer:
    """Assigns jobs to start/end times one timeline per resource.

    Jobs are visited by priority (highest first), then by duration (shortest
    first). Each job is placed at the cursor of its resource's timeline, pushed
    past any busy interval of that resource, and skipped when it no longer fits
    before the end of the window. Jobs without a pre-assigned resource share one
    timeline.
    """

    def __init__(self, config: OptimizerConfig | None = None) -> None:
        self.config = config or OptimizerConfig()

    def sort_jobs(self, jobs: Sequence[Job]) -> list[Job]:
        default = self.config.default_job_duration_minutes
        return sorted(jobs, key=lambda job: (-job.priority_rank, job.duration_minutes(default)))

    def optimize(
        self,
        jobs: Sequence[Job],
        time_range: TimeRange,
        resources: Sequence[ResourceAvailability] = (),
    ) -> ScheduleResult:
        slots, unscheduled = self._assign(jobs, time_range, resources)
        metrics = self.calculate_metrics(slots, time_range)
        improvements = self.generate_improvements(slots, jobs)
        logger.info(
            "Scheduled %d of %d jobs (utilization %.2f)", len(slots), len(jobs), metrics.utilization
        )
        return ScheduleResult(
            slots=slots,
            metrics=metrics,
            improvements=improvements,
            unscheduled_job_ids=unscheduled,
        )

    def _assign(
        self,
        jobs: Sequence[Job],
        time_range: TimeRange,
        resources: Sequence[ResourceAvailability],
    ) -> tuple[list[ScheduleSlot], list[str]]:
        busy_by_key: Dict[tuple[str, str], list[TimeRange]] = {}
        for resource in resources:
            busy_by_key.setdefault(resource.key, []).extend(resource.busy)
        for intervals in busy_by_key.values():
            intervals.sort(key=lambda interval: interval.start)

        cursors: Dict[TimelineKey, datetime] = {}
        buffer = timedelta(minutes=self.config.inter_job_buffer_minutes)
        slots: list[ScheduleSlot] = []
        unscheduled: list[str] = []

        for job in self.sort_jobs(jobs):
            key = _timeline_for(job)
            duration = timedelta(minutes=job.duration_minutes(self.config.default_job_duration_minutes))
            cursor = cursors.get(key, time_range.start)
            busy = busy_by_key.get(key, []) if key is not None else []

            start = self.find_next_available_slot(cursor, duration, time_range.end, busy)
            if start is None:
                logger.info("Could not find available slot for job %s", job.job_id)
                unscheduled.append(job.job_id)
                continue

            end = start + duration
            slots.append(
                ScheduleSlot(
                    job_id=job.job_id,
                    start_time=start,
                    end_time=end,
                    user_id=job.assigned_user_id,
                    crew_id=job.assigned_crew_id,
                )
            )
            cursors[key] = end + buffer

        slots.sort(key=lambda slot: slot.start_time)
        return slots, unscheduled

    @staticmethod
    def find_next_available_slot(
        start: datetime,
        duration: timedelta,
        max_time: datetime,
        busy: Sequence[TimeRange] = (),
    ) -> Optional[datetime]:
        """Earliest start at or after ``start`` clear of ``busy``, None if past ``max_time``."""

        candidate = start
        while True:
            if candidate + duration > max_time:
                return None
            proposed = TimeRange(candidate, candidate + duration)
            blocking = next((interval for interval in busy if interval.overlaps(proposed)), None)
            if blocking is None:
                return candidate
            candidate = blocking.end

    def calculate_metrics(self, slots: Sequence[ScheduleSlot], time_range: TimeRange) -> ScheduleMetrics:
        """Utilization is measured against the scheduling window on every timeline used."""

        if not slots:
            return ScheduleMetrics()

        scheduled = sum((slot.duration for slot in slots), timedelta())
        timelines = len({slot.timeline for slot in slots})

        window = time_range.duration * timelines
        utilization = scheduled / window if window > timedelta() else 0.0

        travel_time = (len(slots) - 1) * self.config.travel_minutes_between_jobs

        overtime_hours = 0
        for slot in slots:
            if (
                slot.start_time.hour < self.config.business_day_start_hour
                or slot.end_time.hour > self.config.business_day_end_hour
            ):
                overtime_hours += int(slot.duration.total_seconds() // 3600)

        return ScheduleMetrics(
            utilization=min(1.0, utilization),
            travel_time_minutes=travel_time,
            overtime_hours=overtime_hours,
            customer_satisfaction=self.config.customer_satisfaction_placeholder,
        )

    def generate_improvements(self, slots: Sequence[ScheduleSlot], jobs: Sequence[Job]) -> List[str]:
        improvements: list[str] = []
        large_gap = timedelta(minutes=self.config.large_gap_minutes)

        by_timeline: Dict[TimelineKey, list[ScheduleSlot]] = {}
        for slot in slots:
            by_timeline.setdefault(slot.timeline, []).append(slot)
        for timeline_slots in by_timeline.values():
            for previous, current in zip(timeline_slots, timeline_slots[1:]):
                gap = current.start_time - previous.end_time
                if gap > large_gap:
                    improvements.append(
                        f"Large gap detected between jobs ({_format_gap(gap)}) - consider rescheduling"
                    )

        if any(slot.end_time.hour > self.config.business_day_end_hour for slot in slots):
            improvements.append(
                "Some jobs scheduled outside business hours - consider extending work day or rescheduling"
            )

        scheduled_ids = {slot.job_id for slot in slots}
        if any(job.is_high_priority and job.job_id not in scheduled_ids for job in jobs):
            improvements.append("High-priority jobs remain unscheduled - consider extending time window")

        if not improvements:
            improvements.append("Schedule appears well-optimized")
        return improvements
