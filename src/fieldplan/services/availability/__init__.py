"""Resource availability computation."""

from .calculator import AvailabilityCalculator
from .models import (
    AvailabilityConflict,
    AvailabilityResponse,
    AvailabilityResult,
    AvailabilitySlot,
    ResourceAvailability,
)

__all__ = [
    "AvailabilityCalculator",
    "AvailabilityConflict",
    "AvailabilityResponse",
    "AvailabilityResult",
    "AvailabilitySlot",
    "ResourceAvailability",
]
