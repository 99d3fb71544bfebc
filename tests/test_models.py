"""
Model and schema definitions load cleanly
"""

import pytest
from pydantic import ValidationError
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import configure_mappers
from sqlalchemy.schema import CreateTable

from hotel_events import schemas
from hotel_events.db.base import Base


def test_orm_mappings_are_valid():
    configure_mappers()


def test_tables_compile_for_postgres():
    ddl = {
        name: str(CreateTable(table).compile(dialect=postgresql.dialect()))
        for name, table in Base.metadata.tables.items()
    }
    assert "uq_venue_slot_bounds" in ddl["venue_availability"]
    assert {"users", "roles", "user_roles", "venues", "bookings", "decor_preferences",
            "catering_preferences", "notifications", "promotions"} <= set(ddl)


def test_schemas_validate():
    user = schemas.UserCreate(
        username="tess", email="tess@example.com", password="pw", first_name="Tess", last_name="Ng",
    )
    assert user.phone is None

    with pytest.raises(ValidationError):
        schemas.UserCreate(username="tess", email="not-an-email", password="pw", first_name="T", last_name="N")
    with pytest.raises(ValidationError):
        schemas.BookingCreate(
            venue_id=1, event_type="Gala", event_date="2030-06-15",
            start_time="18:00", end_time="17:00", guest_count=10,
        )
    with pytest.raises(ValidationError):
        schemas.SlotCreate(venue_id=1, date="2030-06-15", start_time="10:00", end_time="10:00")
