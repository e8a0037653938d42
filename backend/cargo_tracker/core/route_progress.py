"""Locate a shipment within its recorded route and measure what is left.

The current position is a location label looked up against the route
history. The first waypoint carrying that label wins, so a shipment that
passes through the same port twice is measured from its first visit.
Remaining distance follows the recorded waypoint sequence pair by pair,
not a straight line to the final waypoint.
"""

import datetime
import enum
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from cargo_tracker.core.geodesy import DistanceCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Waypoint:
    location: str
    coordinates: tuple[float, float]  # (lon, lat)
    timestamp: datetime.datetime | None = None


class NoProgressReason(str, enum.Enum):
    EMPTY_ROUTE = "empty_route"
    UNKNOWN_LOCATION = "unknown_location"
    AT_DESTINATION = "at_destination"
    BAD_GEOMETRY = "bad_geometry"


@dataclass(frozen=True)
class Resolved:
    distance_km: float
    start_index: int
    segments: int


@dataclass(frozen=True)
class NoProgress:
    reason: NoProgressReason


RouteProgress = Resolved | NoProgress


class RouteProgressResolver:
    """Sums remaining great-circle distance from the current waypoint."""

    def __init__(self, calculator: DistanceCalculator | None = None) -> None:
        self.calculator = calculator or DistanceCalculator()

    def find_index(self, route: Sequence[Waypoint], current_location: str) -> int | None:
        """Index of the first waypoint labelled current_location (exact match)."""
        for i, wp in enumerate(route):
            if wp.location == current_location:
                return i
        return None

    def remaining_distance(
        self, route: Sequence[Waypoint], current_location: str,
    ) -> RouteProgress:
        if not route:
            return NoProgress(NoProgressReason.EMPTY_ROUTE)

        start = self.find_index(route, current_location)
        if start is None:
            return NoProgress(NoProgressReason.UNKNOWN_LOCATION)
        if start >= len(route) - 1:
            return NoProgress(NoProgressReason.AT_DESTINATION)

        total = 0.0
        for i in range(start, len(route) - 1):
            a = route[i].coordinates
            b = route[i + 1].coordinates
            if len(a) != 2 or len(b) != 2:
                logger.debug("Malformed coordinates at segment %d: %r -> %r", i, a, b)
                return NoProgress(NoProgressReason.BAD_GEOMETRY)
            total += self.calculator.distance(a, b)
            if not math.isfinite(total):
                logger.debug("Non-finite distance at segment %d: %r -> %r", i, a, b)
                return NoProgress(NoProgressReason.BAD_GEOMETRY)

        return Resolved(distance_km=total, start_index=start, segments=len(route) - 1 - start)
