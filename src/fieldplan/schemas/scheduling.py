"""Schedule, availability and calendar request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from ..models.domain import ResourceKind
from .common import JobModel, LocationModel, PropertyModel, TimeRangeModel


class ScheduleConstraintModel(BaseModel):
    type: str = Field(..., description="buffer_minutes, default_duration_minutes or max_gap_minutes")
    parameters: Any = None


class ScheduleOptimizationRequest(BaseModel):
    jobs: List[str] = Field(..., min_length=1, description="Identifiers of the jobs to schedule.")
    time_range: TimeRangeModel
    constraints: List[ScheduleConstraintModel] = Field(default_factory=list)
    job_snapshots: List[JobModel] = Field(
        default_factory=list,
        description="Known jobs, including already scheduled bookings used for conflict detection.",
    )


class ScheduleSlotModel(BaseModel):
    job_id: str
    start_time: datetime
    end_time: datetime
    user_id: Optional[str] = None
    crew_id: Optional[str] = None


class ScheduleMetricsModel(BaseModel):
    utilization: float
    travel_time_minutes: int
    overtime_hours: int
    customer_satisfaction: float


class ScheduleOptimizationResponse(BaseModel):
    schedule: List[ScheduleSlotModel]
    metrics: ScheduleMetricsModel
    improvements: List[str]
    unscheduled_job_ids: List[str]


class AvailabilityRequest(BaseModel):
    user_ids: List[str] = Field(default_factory=list)
    crew_ids: List[str] = Field(default_factory=list)
    time_range: TimeRangeModel
    bookings: List[JobModel] = Field(default_factory=list, description="Existing job snapshots.")


class AvailabilitySlotModel(BaseModel):
    user_id: Optional[str] = None
    crew_id: Optional[str] = None
    start_time: datetime
    end_time: datetime
    capacity: int = Field(1, ge=1)


class AvailabilityConflictModel(BaseModel):
    resource_id: str
    resource_type: ResourceKind
    conflict_time: TimeRangeModel
    reason: str


class AvailabilityResponseModel(BaseModel):
    available_slots: List[AvailabilitySlotModel]
    conflicts: List[AvailabilityConflictModel]
    unchecked_resources: List[str] = Field(
        default_factory=list,
        description="Resources whose existing bookings were not consulted.",
    )


class CalendarRequest(BaseModel):
    user_id: str
    start_date: datetime
    end_date: datetime
    jobs: List[JobModel] = Field(default_factory=list)
    properties: List[PropertyModel] = Field(default_factory=list)


class CalendarEventModel(BaseModel):
    id: str
    title: str
    description: str
    start_time: datetime
    end_time: datetime
    type: str
    status: str
    location: Optional[LocationModel] = None
