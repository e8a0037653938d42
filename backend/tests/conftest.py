"""Shared fixtures: an in-memory shipment repository and a frozen-clock API client."""

import datetime

import pytest
from fastapi.testclient import TestClient

from cargo_tracker.api import shipments
from cargo_tracker.core.errors import DuplicateShipment, ShipmentNotFound
from cargo_tracker.core.eta_estimator import EtaEstimator
from cargo_tracker.main import app
from cargo_tracker.models.tables import Shipment

FROZEN_NOW = datetime.datetime(2030, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)


class FakeRepository:
    """Stores transient Shipment rows in a dict, counting saves and locks."""

    def __init__(self) -> None:
        self.shipments: dict[int, Shipment] = {}
        self.saves = 0
        self.locked: list[int] = []
        self.releases = 0
        self._next_id = 1

    async def list_all(self) -> list[Shipment]:
        return sorted(self.shipments.values(), key=lambda s: (s.created_at, s.id), reverse=True)

    async def _get(self, pk: int) -> Shipment:
        if pk not in self.shipments:
            raise ShipmentNotFound()
        return self.shipments[pk]

    async def get_for_update(self, pk: int) -> Shipment:
        shipment = await self._get(pk)
        self.locked.append(pk)
        return shipment

    async def add(self, shipment: Shipment) -> Shipment:
        if any(s.shipment_id == shipment.shipment_id for s in self.shipments.values()):
            raise DuplicateShipment()
        shipment.id = self._next_id
        self._next_id += 1
        self.shipments[shipment.id] = shipment
        return shipment

    async def save(self, shipment: Shipment) -> Shipment:
        self.saves += 1
        return shipment

    async def release(self) -> None:
        self.releases += 1


@pytest.fixture
def repo() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def frozen_now() -> datetime.datetime:
    return FROZEN_NOW


@pytest.fixture
def client(repo, frozen_now, monkeypatch):
    monkeypatch.setattr(shipments, "estimator", EtaEstimator(clock=lambda: frozen_now))
    app.dependency_overrides[shipments.get_repository] = lambda: repo
    yield TestClient(app)
    app.dependency_overrides.clear()
