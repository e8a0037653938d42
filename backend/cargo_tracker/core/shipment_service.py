"""Shipment operations: create, append waypoint, refresh ETA.

Updates load the shipment with its row locked, so loading, estimating and
saving one shipment never interleave with another request doing the same.
"""

import logging

from cargo_tracker.core.eta_estimator import (
    EtaEstimator,
    EtaResult,
    ShipmentSnapshot,
    ensure_utc,
    utcnow,
)
from cargo_tracker.core.route_progress import Waypoint as RoutePoint
from cargo_tracker.models.tables import Shipment, Waypoint
from cargo_tracker.schemas.shipment import ShipmentCreate

logger = logging.getLogger(__name__)


def snapshot_of(shipment: Shipment) -> ShipmentSnapshot:
    """Read-only view of a stored shipment for the estimator."""
    return ShipmentSnapshot(
        route=tuple(
            RoutePoint(location=wp.location, coordinates=(wp.lon, wp.lat), timestamp=wp.timestamp)
            for wp in shipment.route
        ),
        current_location=shipment.current_location,
        average_speed_kmh=shipment.average_speed,
        current_eta=ensure_utc(shipment.current_eta),
    )


class ShipmentService:
    def __init__(self, repository, estimator: EtaEstimator) -> None:
        self.repository = repository
        self.estimator = estimator

    async def list_shipments(self) -> list[Shipment]:
        return await self.repository.list_all()

    async def create_shipment(self, payload: ShipmentCreate) -> Shipment:
        now = utcnow()
        shipment = Shipment(
            shipment_id=payload.shipment_id,
            container_id=payload.container_id,
            current_location=payload.current_location,
            status=payload.status,
            current_eta=payload.current_eta,
            average_speed=payload.average_speed,
            created_at=now,
        )
        for point in payload.route:
            lon, lat = point.coordinates
            shipment.route.append(Waypoint.at(point.location, lon, lat, now))

        shipment = await self.repository.add(shipment)
        logger.info(
            "Created shipment %s with %d waypoints, ETA %s",
            shipment.shipment_id, len(shipment.route), shipment.current_eta,
        )
        return shipment

    async def update_location(
        self, pk: int, location: str, coordinates: list[float],
    ) -> tuple[Shipment, EtaResult]:
        """Append a waypoint, move the shipment there and re-estimate.

        The shipment is saved whether or not the ETA moved, since the route
        itself changed.
        """
        shipment = await self.repository.get_for_update(pk)
        lon, lat = coordinates
        shipment.current_location = location
        shipment.route.append(Waypoint.at(location, lon, lat, utcnow()))

        result = self.estimator.estimate(snapshot_of(shipment))
        if not result.resolved:
            logger.debug("Shipment %s: keeping ETA after move to %r", shipment.shipment_id, location)
        shipment.current_eta = result.eta
        await self.repository.save(shipment)
        logger.info("Shipment %s now at %s, ETA %s", shipment.shipment_id, location, result.eta)
        return shipment, result

    async def fetch_eta(self, pk: int) -> tuple[Shipment, EtaResult]:
        """Re-estimate and persist only when the ETA instant moved."""
        shipment = await self.repository.get_for_update(pk)
        result = self.estimator.estimate(snapshot_of(shipment))
        if result.changed:
            shipment.current_eta = result.eta
            await self.repository.save(shipment)
            logger.info("Shipment %s ETA updated to %s", shipment.shipment_id, result.eta)
        else:
            await self.repository.release()
        return shipment, result
