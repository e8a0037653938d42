"""Shipment REST API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cargo_tracker.config import settings
from cargo_tracker.core.eta_estimator import EtaEstimator
from cargo_tracker.core.shipment_service import ShipmentService
from cargo_tracker.db.repository import ShipmentRepository
from cargo_tracker.db.session import get_session
from cargo_tracker.schemas.shipment import (
    ErrorBody,
    EtaInfo,
    LocationUpdateResult,
    ShipmentCreate,
    ShipmentEnvelope,
    ShipmentList,
    ShipmentOut,
    WaypointIn,
)

router = APIRouter(
    prefix="/api/shipments",
    tags=["shipments"],
    responses={500: {"model": ErrorBody, "description": "Server error"}},
)

estimator = EtaEstimator.from_settings(settings)


def get_repository(session: AsyncSession = Depends(get_session)) -> ShipmentRepository:
    return ShipmentRepository(session)


def get_service(repository: ShipmentRepository = Depends(get_repository)) -> ShipmentService:
    return ShipmentService(repository, estimator)


@router.get("", response_model=ShipmentList)
async def list_shipments(service: ShipmentService = Depends(get_service)):
    """Get all shipments, newest first."""
    shipments = await service.list_shipments()
    data = [ShipmentOut.model_validate(s) for s in shipments]
    return ShipmentList(count=len(data), data=data)


@router.post(
    "",
    response_model=ShipmentEnvelope,
    status_code=201,
    responses={400: {"model": ErrorBody, "description": "Validation error"}},
)
async def create_shipment(payload: ShipmentCreate, service: ShipmentService = Depends(get_service)):
    """Create a new shipment with its planned route."""
    shipment = await service.create_shipment(payload)
    return ShipmentEnvelope(data=ShipmentOut.model_validate(shipment))


@router.post(
    "/{shipment_pk}/update-location",
    response_model=LocationUpdateResult,
    responses={
        400: {"model": ErrorBody, "description": "Invalid coordinates"},
        404: {"model": ErrorBody, "description": "Shipment not found"},
    },
)
async def update_location(
    shipment_pk: int,
    point: WaypointIn,
    service: ShipmentService = Depends(get_service),
):
    """Record a new waypoint as the shipment's current location and re-estimate its ETA."""
    shipment, result = await service.update_location(shipment_pk, point.location, point.coordinates)
    return LocationUpdateResult(data=ShipmentOut.model_validate(shipment), new_eta=result.eta)


@router.get(
    "/{shipment_pk}/eta",
    response_model=EtaInfo,
    responses={404: {"model": ErrorBody, "description": "Shipment not found"}},
)
async def get_eta(shipment_pk: int, service: ShipmentService = Depends(get_service)):
    """Get the shipment's ETA, recomputed from its remaining route."""
    shipment, result = await service.fetch_eta(shipment_pk)
    return EtaInfo(
        eta=shipment.current_eta,
        calculation="dynamic" if result.resolved else "static",
    )
