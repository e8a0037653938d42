import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from cargo_tracker.core.eta_estimator import ensure_utc, utcnow
from cargo_tracker.models.tables import ShipmentStatus

# Strict: JSON booleans are not coordinates
Coordinate = Annotated[float, Field(strict=True, allow_inf_nan=False)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class InputModel(CamelModel):
    model_config = ConfigDict(extra="forbid")


class WaypointIn(InputModel):
    location: str = Field(min_length=1, examples=["Singapore"])
    coordinates: list[Coordinate] = Field(min_length=2, max_length=2, examples=[[103.8198, 1.3521]])

    @field_validator("coordinates")
    @classmethod
    def _check_range(cls, v: list[float]) -> list[float]:
        lon, lat = v
        if not -180.0 <= lon <= 180.0:
            raise ValueError("longitude must be between -180 and 180")
        if not -90.0 <= lat <= 90.0:
            raise ValueError("latitude must be between -90 and 90")
        return v


class ShipmentCreate(InputModel):
    shipment_id: str = Field(pattern=r"^SHIP-\d{4}$", examples=["SHIP-0001"])
    container_id: str = Field(pattern=r"^CNTR-\d{4}$", examples=["CNTR-2024"])
    route: list[WaypointIn] = Field(min_length=1)
    current_location: str = Field(min_length=1, examples=["Shanghai"])
    current_eta: datetime.datetime
    average_speed: float = Field(default=50.0, ge=10, le=100)  # km/h
    status: ShipmentStatus = ShipmentStatus.AT_PORT

    @field_validator("current_eta")
    @classmethod
    def _eta_in_future(cls, v: datetime.datetime) -> datetime.datetime:
        v = ensure_utc(v)
        if v <= utcnow():
            raise ValueError("currentEta must be in the future")
        return v


class WaypointOut(CamelModel):
    location: str
    coordinates: list[float]  # [lon, lat]
    timestamp: datetime.datetime


class ShipmentOut(CamelModel):
    id: int
    shipment_id: str
    container_id: str
    route: list[WaypointOut] = []
    current_location: str
    status: ShipmentStatus
    current_eta: datetime.datetime | None = None
    average_speed: float
    created_at: datetime.datetime


class ShipmentList(CamelModel):
    success: bool = True
    count: int
    data: list[ShipmentOut]


class ShipmentEnvelope(CamelModel):
    success: bool = True
    data: ShipmentOut


class LocationUpdateResult(CamelModel):
    success: bool = True
    data: ShipmentOut
    new_eta: datetime.datetime | None = None


class EtaInfo(CamelModel):
    success: bool = True
    eta: datetime.datetime | None = None
    calculation: Literal["dynamic", "static"]


class ErrorBody(CamelModel):
    success: bool = False
    message: str
