"""Shipment persistence over an AsyncSession."""

import logging

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cargo_tracker.core.errors import DuplicateShipment, ShipmentNotFound
from cargo_tracker.models.tables import Shipment

logger = logging.getLogger(__name__)


def shipment_query(pk: int, lock: bool = False) -> Select:
    """Select one shipment with its route; lock=True takes a row lock until commit."""
    stmt = select(Shipment).where(Shipment.id == pk).options(selectinload(Shipment.route))
    if lock:
        stmt = stmt.with_for_update(of=Shipment)
    return stmt


class ShipmentRepository:
    """Load and store shipments together with their routes."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_all(self) -> list[Shipment]:
        """All shipments, newest first."""
        result = await self.session.execute(
            select(Shipment)
            .options(selectinload(Shipment.route))
            .order_by(Shipment.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_for_update(self, pk: int) -> Shipment:
        """Load a shipment holding its row lock until save() commits.

        Concurrent read-estimate-save cycles on the same shipment run one
        after another, so each one sees the waypoints the previous one added.
        """
        return await self._load(shipment_query(pk, lock=True))

    async def _load(self, stmt: Select) -> Shipment:
        result = await self.session.execute(stmt)
        shipment = result.scalar_one_or_none()
        if shipment is None:
            raise ShipmentNotFound()
        return shipment

    async def add(self, shipment: Shipment) -> Shipment:
        self.session.add(shipment)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if "shipment_id" in str(e.orig):
                raise DuplicateShipment() from e
            raise
        return shipment

    async def save(self, shipment: Shipment) -> Shipment:
        self.session.add(shipment)
        await self.session.commit()
        logger.debug("Saved shipment %s (%d waypoints)", shipment.shipment_id, len(shipment.route))
        return shipment

    async def release(self) -> None:
        """End the current transaction, dropping any row lock.

        Nothing is dirty here; commit rather than rollback keeps loaded
        instances from being expired.
        """
        await self.session.commit()
