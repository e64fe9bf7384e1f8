"""Snapshot models shared by the scheduling and routing endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ..models.domain import Job, Location, Property, TimeRange


class TimeRangeModel(BaseModel):
    start: datetime
    end: datetime

    @model_validator(mode="after")
    def validate_order(self) -> "TimeRangeModel":
        if self.end < self.start:
            raise ValueError("time_range.end must not precede time_range.start")
        return self

    def to_domain(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)


class LocationModel(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: str = ""

    def to_domain(self) -> Location:
        return Location(latitude=self.latitude, longitude=self.longitude, address=self.address)


class JobModel(BaseModel):
    id: str
    title: str
    priority: str = "medium"
    estimated_duration: Optional[int] = Field(default=None, gt=0, description="Minutes.")
    scheduled_date: Optional[datetime] = None
    assigned_user_id: Optional[str] = None
    assigned_crew_id: Optional[str] = None
    property_id: Optional[str] = None
    status: str = "pending"
    description: Optional[str] = None

    def to_domain(self) -> Job:
        return Job(
            job_id=self.id,
            title=self.title,
            priority=self.priority,
            estimated_duration=self.estimated_duration,
            scheduled_date=self.scheduled_date,
            assigned_user_id=self.assigned_user_id,
            assigned_crew_id=self.assigned_crew_id,
            property_id=self.property_id,
            status=self.status,
            description=self.description,
        )


class PropertyModel(BaseModel):
    id: str
    address_line1: str = ""
    city: str = ""
    state: str = ""
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    def to_domain(self) -> Property:
        return Property(
            property_id=self.id,
            address_line1=self.address_line1,
            city=self.city,
            state=self.state,
            latitude=self.latitude,
            longitude=self.longitude,
        )
