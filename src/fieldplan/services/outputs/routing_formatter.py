"""Serializers for route optimization outputs."""

from __future__ import annotations

import csv
import io

from ..routing.models import RouteOptimization


def route_optimization_to_csv(result: RouteOptimization) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "job_id",
        "address",
        "arrival_time",
        "duration_minutes",
        "distance_from_previous",
        "total_distance",
        "total_duration_minutes",
        "savings_percent",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for stop in result.stops:
        writer.writerow(
            {
                "sequence": stop.sequence,
                "job_id": stop.job_id,
                "address": stop.address,
                "arrival_time": stop.arrival_time.isoformat(),
                "duration_minutes": stop.duration_minutes,
                "distance_from_previous": round(stop.distance_from_previous, 3),
                "total_distance": round(result.total_distance, 3),
                "total_duration_minutes": result.total_duration_minutes,
                "savings_percent": round(result.savings_percent, 2),
            }
        )
    return buffer.getvalue()
