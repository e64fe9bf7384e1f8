"""Scheduling, availability and calendar endpoints."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, HTTPException, status

from ...data.stores import InMemoryJobStore, InMemoryPropertyStore
from ...schemas.common import LocationModel, TimeRangeModel
from ...schemas.scheduling import (
    AvailabilityConflictModel,
    AvailabilityRequest,
    AvailabilityResponseModel,
    AvailabilitySlotModel,
    CalendarEventModel,
    CalendarRequest,
    ScheduleMetricsModel,
    ScheduleOptimizationRequest,
    ScheduleOptimizationResponse,
    ScheduleSlotModel,
)
from ...services.scheduling.models import ScheduleConstraint
from ...services.scheduling.service import SchedulingService

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.post("/optimize", response_model=ScheduleOptimizationResponse, status_code=status.HTTP_200_OK)
def optimize(payload: ScheduleOptimizationRequest) -> ScheduleOptimizationResponse:
    service = SchedulingService(
        InMemoryJobStore(job.to_domain() for job in payload.job_snapshots),
        InMemoryPropertyStore(),
    )
    constraints = [ScheduleConstraint(type=item.type, parameters=item.parameters) for item in payload.constraints]
    try:
        result = service.optimize_schedule(payload.jobs, payload.time_range.to_domain(), constraints)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error optimizing schedule: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize schedule: {str(exc)}",
        ) from exc

    return ScheduleOptimizationResponse(
        schedule=[ScheduleSlotModel(**asdict(slot)) for slot in result.slots],
        metrics=ScheduleMetricsModel(**asdict(result.metrics)),
        improvements=result.improvements,
        unscheduled_job_ids=result.unscheduled_job_ids,
    )


@router.post("/availability", response_model=AvailabilityResponseModel, status_code=status.HTTP_200_OK)
def check_availability(payload: AvailabilityRequest) -> AvailabilityResponseModel:
    service = SchedulingService(
        InMemoryJobStore(job.to_domain() for job in payload.bookings),
        InMemoryPropertyStore(),
    )
    try:
        response = service.check_availability(
            payload.time_range.to_domain(),
            user_ids=payload.user_ids,
            crew_ids=payload.crew_ids,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return AvailabilityResponseModel(
        available_slots=[
            AvailabilitySlotModel(
                user_id=slot.user_id,
                crew_id=slot.crew_id,
                start_time=slot.start_time,
                end_time=slot.end_time,
                capacity=slot.capacity,
            )
            for slot in response.available_slots
        ],
        conflicts=[
            AvailabilityConflictModel(
                resource_id=conflict.resource_id,
                resource_type=conflict.resource_type,
                conflict_time=TimeRangeModel(start=conflict.conflict_time.start, end=conflict.conflict_time.end),
                reason=conflict.reason,
            )
            for conflict in response.conflicts
        ],
        unchecked_resources=response.unchecked_resources,
    )


@router.post("/calendar", response_model=list[CalendarEventModel], status_code=status.HTTP_200_OK)
def calendar_events(payload: CalendarRequest) -> list[CalendarEventModel]:
    """Jobs assigned to a user between two dates, as calendar entries."""
    if payload.end_date < payload.start_date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="end_date must not precede start_date")
    service = SchedulingService(
        InMemoryJobStore(job.to_domain() for job in payload.jobs),
        InMemoryPropertyStore(prop.to_domain() for prop in payload.properties),
    )
    try:
        events = service.get_calendar_events(payload.user_id, payload.start_date, payload.end_date)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return [
        CalendarEventModel(
            id=event.event_id,
            title=event.title,
            description=event.description,
            start_time=event.start_time,
            end_time=event.end_time,
            type=event.type,
            status=event.status,
            location=LocationModel(**asdict(event.location)) if event.location else None,
        )
        for event in events
    ]
