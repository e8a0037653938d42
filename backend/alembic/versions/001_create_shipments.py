"""Create shipments and waypoints tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from geoalchemy2 import Geometry

revision = "001"
down_revision = None
branch_labels = None
depends_on = None

STATUSES = ("In Transit", "Delivered", "Delayed", "At Port")


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS postgis")
    op.create_table(
        "shipments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("shipment_id", sa.String(32), nullable=False, unique=True),
        sa.Column("container_id", sa.String(32), nullable=False),
        sa.Column("current_location", sa.String(255), nullable=False),
        sa.Column("status", sa.Enum(*STATUSES, name="shipment_status"), nullable=False),
        sa.Column("current_eta", sa.DateTime(timezone=True), nullable=False),
        sa.Column("average_speed", sa.Float, nullable=False, server_default="50"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "waypoints",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("shipment_pk", sa.Integer, sa.ForeignKey("shipments.id"), nullable=False),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("lon", sa.Float, nullable=False),
        sa.Column("lat", sa.Float, nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("geometry", Geometry("POINT", srid=4326, spatial_index=True), nullable=True),
    )
    op.create_index("ix_wp_shipment_position", "waypoints", ["shipment_pk", "position"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_wp_shipment_position", table_name="waypoints")
    op.drop_table("waypoints")
    op.drop_table("shipments")
    sa.Enum(name="shipment_status").drop(op.get_bind(), checkfirst=True)
