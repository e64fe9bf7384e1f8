"""Snapshot stores the scheduling service reads jobs and properties from."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol

from ..models.domain import Job, Property


class JobStore(Protocol):
    def get_job(self, job_id: str) -> Optional[Job]: ...

    def jobs_in_range(self, start: datetime, end: datetime, *, default_duration: int) -> list[Job]: ...


class PropertyStore(Protocol):
    def get_property(self, property_id: str) -> Optional[Property]: ...


class InMemoryJobStore:
    """Job lookups over a caller-supplied snapshot."""

    def __init__(self, jobs: Iterable[Job] = ()) -> None:
        self._jobs: dict[str, Job] = {}
        for job in jobs:
            self._jobs.setdefault(job.job_id, job)

    def get_job(self, job_id: str) -> Optional[Job]:
        return self._jobs.get(job_id)

    def jobs_in_range(self, start: datetime, end: datetime, *, default_duration: int) -> list[Job]:
        """Scheduled jobs whose booked interval overlaps ``[start, end]``."""

        matches: list[Job] = []
        for job in self._jobs.values():
            booked = job.booked_range(default_duration)
            if booked is None:
                continue
            if booked.start <= end and booked.end > start:
                matches.append(job)
        return matches


class InMemoryPropertyStore:
    def __init__(self, properties: Iterable[Property] = ()) -> None:
        self._properties = {prop.property_id: prop for prop in properties}

    def get_property(self, property_id: str) -> Optional[Property]:
        return self._properties.get(property_id)
