import datetime
import enum

from geoalchemy2 import Geometry
from geoalchemy2.shape import from_shape
from shapely.geometry import Point
from sqlalchemy import (
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cargo_tracker.models.base import Base


class ShipmentStatus(str, enum.Enum):
    IN_TRANSIT = "In Transit"
    DELIVERED = "Delivered"
    DELAYED = "Delayed"
    AT_PORT = "At Port"


class Shipment(Base):
    __tablename__ = "shipments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shipment_id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    container_id: Mapped[str] = mapped_column(String(32), nullable=False)
    current_location: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[ShipmentStatus] = mapped_column(
        Enum(ShipmentStatus, name="shipment_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ShipmentStatus.AT_PORT,
    )
    current_eta: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    average_speed: Mapped[float] = mapped_column(Float, nullable=False, default=50.0)  # km/h
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    route: Mapped[list["Waypoint"]] = relationship(
        back_populates="shipment",
        order_by="Waypoint.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )


class Waypoint(Base):
    __tablename__ = "waypoints"
    __table_args__ = (
        Index("ix_wp_shipment_position", "shipment_pk", "position", unique=True),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shipment_pk: Mapped[int] = mapped_column(Integer, ForeignKey("shipments.id"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)  # insertion order within the route
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    lon: Mapped[float] = mapped_column(Float, nullable=False)
    lat: Mapped[float] = mapped_column(Float, nullable=False)
    timestamp: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    geometry = mapped_column(Geometry("POINT", srid=4326, spatial_index=True), nullable=True)

    shipment: Mapped["Shipment"] = relationship(back_populates="route")

    @classmethod
    def at(cls, location: str, lon: float, lat: float, timestamp: datetime.datetime) -> "Waypoint":
        """Build a waypoint with its PostGIS point filled in."""
        return cls(
            location=location,
            lon=lon,
            lat=lat,
            timestamp=timestamp,
            geometry=from_shape(Point(lon, lat), srid=4326),
        )

    @property
    def coordinates(self) -> list[float]:
        return [self.lon, self.lat]
