"""Errors raised when an optimization request cannot produce any output."""

from __future__ import annotations


class SchedulingError(ValueError):
    """Base class for infeasible scheduling and routing requests."""


class NoValidJobsError(SchedulingError):
    def __init__(self, requested: int) -> None:
        super().__init__(f"No valid jobs found for optimization ({requested} requested).")
        self.requested = requested


class NoLocatedJobsError(SchedulingError):
    def __init__(self, requested: int) -> None:
        super().__init__(f"No jobs with valid locations found ({requested} provided).")
        self.requested = requested
