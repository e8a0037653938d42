"""Tests for shipment queries and table constraints."""

from sqlalchemy.dialects import postgresql

from cargo_tracker.db.repository import shipment_query
from cargo_tracker.models.tables import Waypoint


def compile_pg(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


def test_update_query_locks_shipment_row():
    sql = compile_pg(shipment_query(1, lock=True))
    assert "FOR UPDATE OF shipments" in sql


def test_plain_query_takes_no_lock():
    assert "FOR UPDATE" not in compile_pg(shipment_query(1))


def test_waypoint_position_unique_per_shipment():
    index = next(i for i in Waypoint.__table__.indexes if i.name == "ix_wp_shipment_position")
    assert index.unique
    assert [c.name for c in index.columns] == ["shipment_pk", "position"]
