"""
Tests for booking reference codes and verification links
"""

import base64
from datetime import datetime

import pytest

from hotel_events.core.config import settings
from hotel_events.core.exceptions import ConflictError
from hotel_events.utils import reference_code
from hotel_events.utils.qr import generate_booking_qr_data_url, get_verification_url
from hotel_events.utils.reference_code import (
    generate_reference_code, is_valid_reference_code, make_unique_reference_code,
)
from hotel_events.services import bookings as booking_service

from conftest import EVENT_DATE, t


def test_generated_codes_are_valid():
    for _ in range(200):
        assert is_valid_reference_code(generate_reference_code())


def test_code_embeds_timestamp():
    code = generate_reference_code(datetime(2030, 6, 15, 9, 5, 7))
    assert code.startswith("20300615-090507-")
    assert len(code.split("-")[2]) == 6


@pytest.mark.parametrize("code", [
    None, "", "   ", "20300615-090507-abc123", "2030615-090507-ABC123",
    "20300615-090507-ABC12", "20300615090507ABC123", " 20300615-090507-ABC123",
])
def test_invalid_codes(code):
    assert not is_valid_reference_code(code)


def test_unique_code_retries_on_collision(db_session, guest, grand_hall, monkeypatch):
    taken = booking_service.create_booking(
        db_session, guest, grand_hall, "Meeting", EVENT_DATE, t("09:00"), t("10:00"), 5,
    ).reference_code
    fresh = "20300615-120000-FRESH1"
    codes = iter([taken, taken, fresh])
    monkeypatch.setattr(reference_code, "generate_reference_code", lambda: next(codes))

    assert make_unique_reference_code(db_session) == fresh


def test_unique_code_gives_up(db_session, guest, grand_hall, monkeypatch):
    taken = booking_service.create_booking(
        db_session, guest, grand_hall, "Meeting", EVENT_DATE, t("09:00"), t("10:00"), 5,
    ).reference_code
    monkeypatch.setattr(reference_code, "generate_reference_code", lambda: taken)

    with pytest.raises(ConflictError):
        make_unique_reference_code(db_session)


def test_verification_url_and_qr_payload():
    code = "20300615-090507-ABC123"
    assert get_verification_url(code) == f"{settings.BASE_URL}/verify-booking?ref={code}"

    data_url = generate_booking_qr_data_url(code)
    png = base64.b64decode(data_url.split(",", 1)[1])
    assert png.startswith(b"\x89PNG")
