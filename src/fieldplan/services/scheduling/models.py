"""Scheduling domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from ...models.domain import Location


@dataclass(frozen=True, slots=True)
class ScheduleSlot:
    job_id: str
    start_time: datetime
    end_time: datetime
    user_id: Optional[str] = None
    crew_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.end_time <= self.start_time:
            raise ValueError(f"Slot for job {self.job_id} must end after it starts")

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def timeline(self) -> tuple[str, str] | None:
        """Key of the resource timeline the slot occupies, None when unassigned."""

        if self.user_id is not None:
            return ("user", self.user_id)
        if self.crew_id is not None:
            return ("crew", self.crew_id)
        return None


@dataclass(frozen=True, slots=True)
class ScheduleMetrics:
    utilization: float = 0.0
    travel_time_minutes: int = 0
    overtime_hours: int = 0
    customer_satisfaction: float = 0.0


@dataclass(frozen=True, slots=True)
class ScheduleResult:
    slots: List[ScheduleSlot]
    metrics: ScheduleMetrics
    improvements: List[str]
    unscheduled_job_ids: List[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ScheduleConstraint:
    """Per-request override of an optimizer setting, e.g. ``buffer_minutes``."""

    type: str
    parameters: object = None


@dataclass(frozen=True, slots=True)
class CalendarEvent:
    event_id: str
    title: str
    description: str
    start_time: datetime
    end_time: datetime
    status: str
    location: Optional[Location] = None
    type: str = "job"
