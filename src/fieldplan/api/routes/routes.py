"""Route optimization endpoints."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Response, status

from ...data.stores import InMemoryJobStore, InMemoryPropertyStore
from ...schemas.routing import RouteOptimizationRequest, RouteOptimizationResponse, RouteStopModel
from ...services.outputs.routing_formatter import route_optimization_to_csv
from ...services.routing.models import RouteOptimization
from ...services.scheduling.service import SchedulingService

router = APIRouter(prefix="/routes", tags=["routes"])


def _run(payload: RouteOptimizationRequest) -> RouteOptimization:
    jobs = [job.to_domain() for job in payload.jobs]
    service = SchedulingService(
        InMemoryJobStore(jobs),
        InMemoryPropertyStore(prop.to_domain() for prop in payload.properties),
    )
    try:
        return service.optimize_route(jobs, payload.start_location.to_domain(), payload.departure_time)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {str(exc)}",
        ) from exc


@router.post("/optimize", response_model=RouteOptimizationResponse, status_code=status.HTTP_200_OK)
def optimize(payload: RouteOptimizationRequest) -> RouteOptimizationResponse:
    result = _run(payload)
    return RouteOptimizationResponse(
        optimized_route=[RouteStopModel(**asdict(stop)) for stop in result.stops],
        total_distance=result.total_distance,
        total_duration_minutes=result.total_duration_minutes,
        savings_percent=result.savings_percent,
    )


@router.post("/optimize/export", status_code=status.HTTP_200_OK)
def export(payload: RouteOptimizationRequest) -> Response:
    """Optimized route as a CSV download."""
    result = _run(payload)
    return Response(
        content=route_optimization_to_csv(result),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="route.csv"'},
    )
