"""Availability domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ...models.domain import ResourceKind, TimeRange


@dataclass(frozen=True, slots=True)
class AvailabilitySlot:
    resource_id: str
    resource_kind: ResourceKind
    start_time: datetime
    end_time: datetime
    capacity: int = 1

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("capacity must be >= 1")

    @property
    def user_id(self) -> Optional[str]:
        return self.resource_id if self.resource_kind is ResourceKind.USER else None

    @property
    def crew_id(self) -> Optional[str]:
        return self.resource_id if self.resource_kind is ResourceKind.CREW else None


@dataclass(frozen=True, slots=True)
class AvailabilityConflict:
    resource_id: str
    resource_type: ResourceKind
    conflict_time: TimeRange
    reason: str


@dataclass(frozen=True, slots=True)
class AvailabilityResult:
    """Free intervals and conflicts of a single resource.

    ``conflict_aware`` is False when existing bookings were not consulted.
    """

    resource_id: str
    resource_kind: ResourceKind
    slots: tuple[AvailabilitySlot, ...] = field(default_factory=tuple)
    conflicts: tuple[AvailabilityConflict, ...] = field(default_factory=tuple)
    conflict_aware: bool = True


@dataclass(frozen=True, slots=True)
class ResourceAvailability:
    """Busy intervals of a resource, consumed by the schedule optimizer."""

    resource_id: str
    resource_kind: ResourceKind
    busy: tuple[TimeRange, ...] = field(default_factory=tuple)

    @property
    def key(self) -> tuple[str, str]:
        return (self.resource_kind.value, self.resource_id)


@dataclass(frozen=True, slots=True)
class AvailabilityResponse:
    """Combined availability of several resources, slots ordered by start time."""

    available_slots: list[AvailabilitySlot] = field(default_factory=list)
    conflicts: list[AvailabilityConflict] = field(default_factory=list)
    unchecked_resources: list[str] = field(default_factory=list)
