"""Domain models for jobs, properties and time ranges."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum, IntEnum
from typing import Optional


class Priority(IntEnum):
    """Job priority; a larger value is scheduled first."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    URGENT = 4

    @classmethod
    def rank(cls, value: Optional[str]) -> int:
        """Return the sort rank of a priority label, 0 for unknown labels."""

        if not value:
            return 0
        member = cls.__members__.get(value.strip().upper())
        return int(member) if member is not None else 0


HIGH_PRIORITIES = frozenset({"urgent", "high"})


class ResourceKind(str, Enum):
    USER = "user"
    CREW = "crew"


@dataclass(frozen=True, slots=True)
class TimeRange:
    """Half-open interval [start, end)."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"TimeRange end {self.end.isoformat()} precedes start {self.start.isoformat()}")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: "TimeRange") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True, slots=True)
class Location:
    latitude: float
    longitude: float
    address: str = ""


@dataclass(frozen=True, slots=True)
class Job:
    """Snapshot of a schedulable unit of work."""

    job_id: str
    title: str
    priority: str = "medium"
    estimated_duration: Optional[int] = None
    scheduled_date: Optional[datetime] = None
    assigned_user_id: Optional[str] = None
    assigned_crew_id: Optional[str] = None
    property_id: Optional[str] = None
    status: str = "pending"
    description: Optional[str] = None

    @property
    def priority_rank(self) -> int:
        return Priority.rank(self.priority)

    @property
    def is_high_priority(self) -> bool:
        return (self.priority or "").strip().lower() in HIGH_PRIORITIES

    def duration_minutes(self, default: int) -> int:
        # a missing or non-positive estimate means "not estimated"
        if self.estimated_duration is None or self.estimated_duration <= 0:
            return default
        return self.estimated_duration

    def booked_range(self, default_duration: int) -> Optional[TimeRange]:
        """Interval occupied by an already scheduled job, None when undated."""

        if self.scheduled_date is None:
            return None
        end = self.scheduled_date + timedelta(minutes=self.duration_minutes(default_duration))
        return TimeRange(start=self.scheduled_date, end=end)


@dataclass(frozen=True, slots=True)
class Property:
    """Service address a job is performed at."""

    property_id: str
    address_line1: str = ""
    city: str = ""
    state: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def address(self) -> str:
        return f"{self.address_line1}, {self.city}, {self.state}"

    def location(self) -> Optional[Location]:
        if self.latitude is None or self.longitude is None:
            return None
        return Location(latitude=self.latitude, longitude=self.longitude, address=self.address)
