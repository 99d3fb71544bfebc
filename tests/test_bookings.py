"""
Tests for the booking workflow
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from hotel_events.core.config import settings
from hotel_events.core.exceptions import (
    InvalidStateError, NotFoundError, ValidationError, VenueUnavailableError,
)
from hotel_events.models.availability import AvailabilityStatus
from hotel_events.models.booking import BookingStatus, MealType, ServingStyle
from hotel_events.models.notification import AlertType, Notification
from hotel_events.services import availability as availability_service
from hotel_events.services import bookings as booking_service
from hotel_events.services import venues as venue_service
from hotel_events.utils.reference_code import is_valid_reference_code

from conftest import EVENT_DATE, t


def _book(db, guest, venue, start, end, guest_count=50, day=EVENT_DATE, **kwargs):
    return booking_service.create_booking(
        db, guest, venue, "Wedding Reception", day, t(start), t(end), guest_count, **kwargs,
    )


def _booked_slots(db, venue, day=EVENT_DATE):
    return availability_service.list_for_venue(db, venue.id, day, AvailabilityStatus.BOOKED)


@pytest.fixture
def guard_on(monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_BOOKING_TRANSITIONS", True)


# ---------------------------------------------------------------------------
# Cost
# ---------------------------------------------------------------------------


def test_total_cost_counts_whole_hours(grand_hall):
    assert booking_service.calculate_total_cost(grand_hall, t("14:00"), t("17:00")) == Decimal("300.00")
    assert booking_service.calculate_total_cost(grand_hall, t("14:00"), t("16:30")) == Decimal("200.00")
    assert booking_service.whole_hours_between(t("14:00"), t("14:59")) == 0


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


def test_create_booking(db_session, guest, grand_hall):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")

    assert booking.status == BookingStatus.PENDING
    assert booking.total_cost == Decimal("300.00")
    assert is_valid_reference_code(booking.reference_code)
    assert booking.verification_url == f"{settings.BASE_URL}/verify-booking?ref={booking.reference_code}"
    assert booking.qr_code.startswith("data:image/png;base64,")

    slots = _booked_slots(db_session, grand_hall)
    assert len(slots) == 1
    assert slots[0].booking_id == booking.id
    assert (slots[0].start_time, slots[0].end_time) == (t("14:00"), t("17:00"))


def test_create_booking_saves_preferences(db_session, guest, grand_hall):
    booking = _book(
        db_session, guest, grand_hall, "18:00", "23:00",
        decor={"theme": "Rustic", "color_scheme": "Sage and cream"},
        catering={"meal_type": MealType.DINNER, "dietary_restrictions": "2 vegan"},
    )
    assert booking.decor_preferences.theme == "Rustic"
    assert booking.catering_preferences.meal_type == MealType.DINNER
    assert booking.catering_preferences.serving_style == ServingStyle.BUFFET


def test_booking_inside_open_slot_is_unavailable(db_session, guest, grand_hall):
    availability_service.populate_open_slots(
        db_session, grand_hall.id, EVENT_DATE, EVENT_DATE, t("09:00"), t("12:00"),
    )
    with pytest.raises(VenueUnavailableError):
        _book(db_session, guest, grand_hall, "10:00", "11:00")


def test_non_overlapping_bookings_both_succeed(db_session, guest, grand_hall):
    first = _book(db_session, guest, grand_hall, "09:00", "12:00")
    second = _book(db_session, guest, grand_hall, "12:00", "15:00")
    assert first.reference_code != second.reference_code
    assert len(_booked_slots(db_session, grand_hall)) == 2


def test_overlapping_booking_is_rejected(db_session, guest, make_user, grand_hall):
    _book(db_session, guest, grand_hall, "14:00", "17:00")
    other = make_user()
    with pytest.raises(VenueUnavailableError):
        _book(db_session, other, grand_hall, "16:00", "18:00")
    with pytest.raises(VenueUnavailableError):
        _book(db_session, other, grand_hall, "14:00", "17:00")
    assert len(_booked_slots(db_session, grand_hall)) == 1


def test_maintenance_and_blocked_time_cannot_be_booked(db_session, guest, grand_hall):
    availability_service.block_for_maintenance(
        db_session, grand_hall.id, EVENT_DATE, t("09:00"), t("12:00"), "Carpet replacement",
    )
    availability_service.create_slot(db_session, grand_hall.id, EVENT_DATE, t("18:00"), t("20:00"))
    with pytest.raises(VenueUnavailableError):
        _book(db_session, guest, grand_hall, "11:00", "13:00")
    with pytest.raises(VenueUnavailableError):
        _book(db_session, guest, grand_hall, "17:00", "19:00")


def test_slot_bounds_race_is_reported_as_unavailable(db_session, guest, grand_hall, monkeypatch):
    # Another transaction took identical bounds after the overlap check ran
    monkeypatch.setattr(booking_service, "_ensure_time_free", lambda *args, **kwargs: None)
    availability_service.create_slot(db_session, grand_hall.id, EVENT_DATE, t("14:00"), t("17:00"))

    with pytest.raises(VenueUnavailableError):
        _book(db_session, guest, grand_hall, "14:00", "17:00")

    assert booking_service.list_bookings(db_session) == []
    slots = availability_service.list_for_venue(db_session, grand_hall.id, EVENT_DATE)
    assert [s.status for s in slots] == [AvailabilityStatus.BLOCKED]


def test_same_window_on_another_venue_is_fine(db_session, guest, grand_hall, garden_room):
    _book(db_session, guest, grand_hall, "14:00", "17:00")
    booking = _book(db_session, guest, garden_room, "14:00", "17:00", guest_count=20)
    assert booking.total_cost == Decimal("136.50")


@pytest.mark.parametrize("kwargs", [
    {"event_type": "  "},
    {"guest_count": 0},
    {"guest_count": 201},
    {"start": "17:00", "end": "14:00"},
])
def test_create_booking_validation(db_session, guest, grand_hall, kwargs):
    params = {"event_type": "Party", "guest_count": 10, "start": "14:00", "end": "17:00"}
    params.update(kwargs)
    with pytest.raises(ValidationError):
        booking_service.create_booking(
            db_session, guest, grand_hall, params["event_type"], EVENT_DATE,
            t(params["start"]), t(params["end"]), params["guest_count"],
        )


def test_inactive_venue_cannot_be_booked(db_session, guest, grand_hall):
    venue = venue_service.deactivate_venue(db_session, grand_hall.id)
    with pytest.raises(ValidationError):
        _book(db_session, guest, venue, "14:00", "17:00")


def test_pending_booking_notifies_guest_and_staff(db_session, guest, manager, coordinator, grand_hall):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")

    to_guest = db_session.query(Notification).filter(Notification.recipient_id == guest.id).all()
    assert [n.alert_type for n in to_guest] == [AlertType.BOOKING_CONFIRMATION]
    assert "pending confirmation" in to_guest[0].message

    for staff in (manager, coordinator):
        alerts = db_session.query(Notification).filter(Notification.recipient_id == staff.id).all()
        assert [n.alert_type for n in alerts] == [AlertType.COORDINATION_ALERT]
        assert booking.reference_code in alerts[0].message


# ---------------------------------------------------------------------------
# Status changes
# ---------------------------------------------------------------------------


def test_confirm_notifies_coordinators_and_catering(db_session, guest, coordinator, catering_lead, grand_hall):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")
    booking = booking_service.confirm_booking(db_session, booking.id)

    assert booking.status == BookingStatus.CONFIRMED
    catering = db_session.query(Notification).filter(Notification.recipient_id == catering_lead.id).all()
    assert [n.alert_type for n in catering] == [AlertType.CATERING_CONFIRMED]
    coordination = db_session.query(Notification).filter(
        Notification.recipient_id == coordinator.id,
    ).count()
    assert coordination == 2


def test_cancel_releases_slot(db_session, guest, make_user, grand_hall):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")
    booking = booking_service.cancel_booking(db_session, booking.id)

    assert booking.status == BookingStatus.CANCELLED
    assert _booked_slots(db_session, grand_hall) == []

    other = _book(db_session, make_user(), grand_hall, "15:00", "16:00")
    assert other.status == BookingStatus.PENDING


def test_cancelled_booking_can_be_reconfirmed_without_guard(db_session, guest, grand_hall):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")
    booking_service.confirm_booking(db_session, booking.id)
    booking_service.cancel_booking(db_session, booking.id)

    booking = booking_service.confirm_booking(db_session, booking.id)

    assert booking.status == BookingStatus.CONFIRMED
    slots = _booked_slots(db_session, grand_hall)
    assert [s.booking_id for s in slots] == [booking.id]


def test_reconfirm_fails_when_time_was_taken(db_session, guest, make_user, grand_hall):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")
    booking_service.cancel_booking(db_session, booking.id)
    _book(db_session, make_user(), grand_hall, "13:00", "15:00")

    with pytest.raises(VenueUnavailableError):
        booking_service.confirm_booking(db_session, booking.id)
    assert booking_service.get_booking(db_session, booking.id).status == BookingStatus.CANCELLED


@pytest.mark.parametrize("open_window", [("13:00", "18:00"), ("14:00", "17:00")])
def test_reconfirm_fails_inside_open_slot(db_session, guest, grand_hall, open_window):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")
    booking_service.cancel_booking(db_session, booking.id)
    availability_service.populate_open_slots(
        db_session, grand_hall.id, EVENT_DATE, EVENT_DATE, t(open_window[0]), t(open_window[1]),
    )

    with pytest.raises(VenueUnavailableError):
        booking_service.confirm_booking(db_session, booking.id)

    assert booking_service.get_booking(db_session, booking.id).status == BookingStatus.CANCELLED
    slots = availability_service.list_for_venue(db_session, grand_hall.id, EVENT_DATE)
    assert [s.status for s in slots] == [AvailabilityStatus.AVAILABLE]


def test_guard_rejects_reconfirm(db_session, guest, grand_hall, guard_on):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")
    booking_service.confirm_booking(db_session, booking.id)
    booking_service.cancel_booking(db_session, booking.id)

    with pytest.raises(InvalidStateError):
        booking_service.confirm_booking(db_session, booking.id)


def test_guard_rejects_skipping_confirmation(db_session, guest, grand_hall, guard_on):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")
    with pytest.raises(InvalidStateError):
        booking_service.complete_booking(db_session, booking.id)

    booking_service.confirm_booking(db_session, booking.id)
    assert booking_service.complete_booking(db_session, booking.id).status == BookingStatus.COMPLETED


def test_update_status_unknown_booking(db_session):
    with pytest.raises(NotFoundError):
        booking_service.update_booking_status(db_session, 404, BookingStatus.CONFIRMED)


def test_guest_can_only_cancel_own_active_booking(db_session, guest, make_user, grand_hall):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")
    stranger = make_user()

    with pytest.raises(NotFoundError):
        booking_service.cancel_booking_for_guest(db_session, booking.id, stranger.id)

    booking_service.cancel_booking_for_guest(db_session, booking.id, guest.id)
    with pytest.raises(InvalidStateError):
        booking_service.cancel_booking_for_guest(db_session, booking.id, guest.id)


# ---------------------------------------------------------------------------
# Lookups and edits
# ---------------------------------------------------------------------------


def test_find_by_reference_code(db_session, guest, grand_hall):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")
    assert booking_service.find_by_reference_code(db_session, booking.reference_code).id == booking.id

    with pytest.raises(ValidationError):
        booking_service.find_by_reference_code(db_session, "not-a-code")
    with pytest.raises(NotFoundError):
        booking_service.find_by_reference_code(db_session, "20300615-120000-ABC123")


def test_list_bookings_filters(db_session, guest, make_user, grand_hall, garden_room):
    a = _book(db_session, guest, grand_hall, "09:00", "11:00",
              catering={"meal_type": MealType.BREAKFAST})
    b = _book(db_session, guest, garden_room, "09:00", "11:00", guest_count=10)
    c = _book(db_session, make_user(), grand_hall, "09:00", "11:00", day=EVENT_DATE + timedelta(days=7))
    booking_service.confirm_booking(db_session, b.id)

    assert [x.id for x in booking_service.list_bookings(db_session, guest_id=guest.id)] == [a.id, b.id]
    assert [x.id for x in booking_service.list_bookings(db_session, venue_id=grand_hall.id)] == [a.id, c.id]
    assert [x.id for x in booking_service.list_bookings(db_session, status=BookingStatus.CONFIRMED)] == [b.id]
    assert [x.id for x in booking_service.list_bookings(db_session, has_catering=True)] == [a.id]
    assert [x.id for x in booking_service.list_bookings(
        db_session, start_date=EVENT_DATE + timedelta(days=1),
    )] == [c.id]


def test_update_booking_details_while_pending(db_session, guest, grand_hall):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")
    updated = booking_service.update_booking_details(
        db_session, booking.id, guest.id,
        event_type="  Anniversary Dinner ", guest_count=80, special_requests="Stage by the window",
        decor={"theme": "Art deco"},
    )
    assert updated.event_type == "Anniversary Dinner"
    assert updated.guest_count == 80
    assert updated.special_requests == "Stage by the window"
    assert updated.decor_preferences.theme == "Art deco"

    with pytest.raises(ValidationError):
        booking_service.update_booking_details(db_session, booking.id, guest.id, guest_count=500)

    booking_service.confirm_booking(db_session, booking.id)
    with pytest.raises(InvalidStateError):
        booking_service.update_booking_details(db_session, booking.id, guest.id, guest_count=60)


# ---------------------------------------------------------------------------
# Staff updates
# ---------------------------------------------------------------------------


def test_assign_coordinator(db_session, guest, coordinator, grand_hall):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")

    with pytest.raises(ValidationError):
        booking_service.assign_coordinator(db_session, booking.id, guest.id)

    booking = booking_service.assign_coordinator(db_session, booking.id, coordinator.id)
    assert booking.assigned_coordinator_id == coordinator.id
    assert [b.id for b in booking_service.list_bookings(db_session, coordinator_id=coordinator.id)] == [booking.id]


def test_record_setup_and_catering(db_session, guest, coordinator, catering_lead, grand_hall):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")

    booking = booking_service.record_setup(db_session, booking.id, coordinator, "Round tables", "READY")
    assert (booking.coordinator_notes, booking.setup_status) == ("Round tables", "READY")

    booking = booking_service.record_catering(db_session, booking.id, catering_lead, "Menu B", "CONFIRMED")
    assert (booking.catering_notes, booking.catering_status) == ("Menu B", "CONFIRMED")

    alert_types = {
        n.alert_type for n in db_session.query(Notification).filter(
            Notification.recipient_id.in_([coordinator.id, catering_lead.id]),
        )
    }
    assert {AlertType.SETUP_COMPLETE, AlertType.CATERING_CONFIRMED} <= alert_types


def test_check_in_requires_confirmed_booking(db_session, guest, coordinator, receptionist, grand_hall):
    booking = _book(db_session, guest, grand_hall, "14:00", "17:00")

    with pytest.raises(InvalidStateError):
        booking_service.check_in(db_session, booking.id, receptionist)

    booking_service.confirm_booking(db_session, booking.id)
    booking = booking_service.check_in(db_session, booking.id, receptionist)

    assert booking.checked_in_at is not None
    arrival = db_session.query(Notification).filter(
        Notification.recipient_id == coordinator.id,
        Notification.alert_type == AlertType.GUEST_ARRIVAL,
    ).one()
    assert arrival.sender_id == receptionist.id
