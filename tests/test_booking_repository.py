import pytest
from fastapi import HTTPException

from barbermatch.domain.booking_state import BookingStatus, StaleBookingError
from barbermatch.services.booking_repository import booking_repository as repo

from conftest import future_appointment


def _create(db, booking_data, **overrides):
    data = booking_data(**overrides)
    data.setdefault("status", BookingStatus.pending_customer_request.value)
    return repo.create(db, data)


def test_create_and_find(db, booking_data):
    booking_id = _create(db, booking_data, notes="Bring photo")

    booking = repo.find_by_id(db, booking_id)
    assert booking is not None
    assert booking.customer_name == "Carol"
    assert booking.status == BookingStatus.pending_customer_request.value
    assert booking.notes == "Bring photo"
    assert booking.version == 1
    assert booking.proposed_price_by_barber is None
    assert booking.created_at is not None


def test_find_missing_booking(db):
    assert repo.find_by_id(db, "does-not-exist") is None


def test_update_status_bumps_version(db, booking_data):
    booking_id = _create(db, booking_data)

    repo.update_status(db, booking_id, BookingStatus.cancelled_by_customer)

    booking = repo.find_by_id(db, booking_id)
    assert booking.status == BookingStatus.cancelled_by_customer.value
    assert booking.version == 2


def test_update_status_compare_and_swap(db, booking_data):
    booking_id = _create(db, booking_data)

    with pytest.raises(StaleBookingError):
        repo.update_status(
            db,
            booking_id,
            BookingStatus.completed,
            expected_status=BookingStatus.confirmed,
        )

    booking = repo.find_by_id(db, booking_id)
    assert booking.status == BookingStatus.pending_customer_request.value
    assert booking.version == 1


def test_update_missing_booking_is_not_found(db):
    with pytest.raises(HTTPException) as exc_info:
        repo.update_status(db, "does-not-exist", BookingStatus.confirmed)
    assert exc_info.value.status_code == 404


def test_update_proposed_price_writes_all_fields(db, booking_data):
    booking_id = _create(db, booking_data)

    repo.update_proposed_price(
        db,
        booking_id,
        40.0,
        BookingStatus.pending_customer_approval,
        expected_status=BookingStatus.pending_customer_request,
    )

    booking = repo.find_by_id(db, booking_id)
    assert booking.proposed_price_by_barber == 40.0
    assert booking.service_price == 40.0
    assert booking.status == BookingStatus.pending_customer_approval.value
    assert booking.version == 2


def test_stale_price_proposal_leaves_no_partial_state(db, booking_data):
    booking_id = _create(db, booking_data, status=BookingStatus.confirmed.value, service_price=30.0)

    with pytest.raises(StaleBookingError):
        repo.update_proposed_price(
            db,
            booking_id,
            55.0,
            BookingStatus.pending_customer_approval,
            expected_status=BookingStatus.pending_customer_request,
        )

    booking = repo.find_by_id(db, booking_id)
    assert booking.proposed_price_by_barber is None
    assert booking.service_price == 30.0
    assert booking.status == BookingStatus.confirmed.value


def test_list_for_customer_latest_first(db, booking_data):
    early = _create(db, booking_data, appointment_datetime=future_appointment(days=1))
    late = _create(db, booking_data, appointment_datetime=future_appointment(days=9))
    _create(db, booking_data, customer_id="someone-else")

    bookings = repo.list_for_customer(db, "customer-1")
    assert [b.id for b in bookings] == [late, early]


def test_list_for_barber_filters_and_sorts(db, booking_data):
    later = _create(db, booking_data, appointment_datetime=future_appointment(days=5))
    sooner = _create(
        db,
        booking_data,
        appointment_datetime=future_appointment(days=2),
        status=BookingStatus.confirmed.value,
    )
    _create(db, booking_data, status=BookingStatus.completed.value)
    _create(db, booking_data, barber_id="barber-2")

    open_statuses = [BookingStatus.pending_customer_request, BookingStatus.confirmed]
    bookings = repo.list_for_barber(db, "barber-1", statuses=open_statuses)
    assert [b.id for b in bookings] == [sooner, later]

    assert len(repo.list_for_barber(db, "barber-1")) == 3


def test_list_pagination(db, booking_data):
    for days in range(1, 5):
        _create(db, booking_data, appointment_datetime=future_appointment(days=days))

    assert len(repo.list_for_customer(db, "customer-1", skip=1, limit=2)) == 2
    assert len(repo.list_for_customer(db, "customer-1", skip=3, limit=2)) == 1
