"""Estimate arrival time from remaining route distance and average speed."""

import datetime
import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from cargo_tracker.core.geodesy import EARTH_RADIUS_KM, DistanceCalculator
from cargo_tracker.core.route_progress import (
    NoProgress,
    RouteProgressResolver,
    Waypoint,
)

logger = logging.getLogger(__name__)

# Used when the stored average speed is missing, zero or negative (km/h)
DEFAULT_SPEED_KMH = 50.0


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def ensure_utc(value: datetime.datetime | None) -> datetime.datetime | None:
    """Attach UTC to naive datetimes; aware ones pass through."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


@dataclass(frozen=True)
class ShipmentSnapshot:
    route: Sequence[Waypoint]
    current_location: str
    average_speed_kmh: float | None = None
    current_eta: datetime.datetime | None = None


@dataclass(frozen=True)
class EtaResult:
    eta: datetime.datetime | None
    changed: bool
    remaining_km: float | None = None  # None when the stored ETA was kept

    @property
    def resolved(self) -> bool:
        return self.remaining_km is not None


class EtaEstimator:
    """Stateless ETA computation over a shipment snapshot.

    When no forward distance can be measured the previous ETA is returned
    untouched with changed=False.
    """

    def __init__(
        self,
        resolver: RouteProgressResolver | None = None,
        default_speed_kmh: float = DEFAULT_SPEED_KMH,
        clock: Callable[[], datetime.datetime] = utcnow,
    ) -> None:
        self.resolver = resolver or RouteProgressResolver()
        self.default_speed_kmh = default_speed_kmh
        self.clock = clock

    @classmethod
    def from_settings(cls, settings) -> "EtaEstimator":
        radius = getattr(settings, "earth_radius_km", EARTH_RADIUS_KM)
        speed = getattr(settings, "default_speed_kmh", DEFAULT_SPEED_KMH)
        return cls(
            resolver=RouteProgressResolver(DistanceCalculator(radius)),
            default_speed_kmh=speed,
        )

    def effective_speed(self, speed_kmh: float | None) -> float:
        # NaN fails the comparison and falls through to the default
        if speed_kmh is not None and speed_kmh > 0:
            return speed_kmh
        return self.default_speed_kmh

    def estimate(self, snapshot: ShipmentSnapshot) -> EtaResult:
        current_eta = ensure_utc(snapshot.current_eta)
        progress = self.resolver.remaining_distance(snapshot.route, snapshot.current_location)
        if isinstance(progress, NoProgress):
            logger.debug(
                "No forward progress from %r (%s), keeping ETA %s",
                snapshot.current_location, progress.reason.value, current_eta,
            )
            return EtaResult(eta=current_eta, changed=False)

        hours_needed = progress.distance_km / self.effective_speed(snapshot.average_speed_kmh)
        if not math.isfinite(hours_needed):
            return EtaResult(eta=current_eta, changed=False)

        try:
            eta = self.clock() + datetime.timedelta(hours=hours_needed)
        except OverflowError:
            logger.warning(
                "ETA out of range for %.1f km at %s km/h, keeping ETA %s",
                progress.distance_km, snapshot.average_speed_kmh, current_eta,
            )
            return EtaResult(eta=current_eta, changed=False)
        changed = current_eta is None or eta != current_eta
        return EtaResult(eta=eta, changed=changed, remaining_km=progress.distance_km)
