from unittest.mock import Mock

import pytest
from fastapi import HTTPException

from barbermatch.domain.booking_state import BookingStatus
from barbermatch.models.booking_model import Booking
from barbermatch.schemas.booking_schema import BookingCreate
from barbermatch.schemas.user_schema import OfferedHaircutIn, ProfileUpdate, Role, UserCreate
from barbermatch.services.booking_repository import BookingRepository, booking_repository
from barbermatch.services.booking_service import BookingService
from barbermatch.services.user_crud import user_crud

from conftest import future_appointment


@pytest.fixture
def service(db):
    return BookingService(db)


def _status(db, booking_id):
    db.expire_all()
    return db.query(Booking).filter(Booking.id == booking_id).first()


def test_priced_booking_waits_on_barber(service, booking_data):
    booking_id, status = service.create_booking(booking_data(service_name="Fade", service_price=25.0))

    assert status is BookingStatus.pending_barber_proposal
    assert service.get_booking(booking_id).status == BookingStatus.pending_barber_proposal.value


def test_custom_booking_waits_on_price(service, booking_data):
    booking_id, status = service.create_booking(booking_data())

    assert status is BookingStatus.pending_customer_request
    booking = service.get_booking(booking_id)
    assert booking.status == BookingStatus.pending_customer_request.value
    assert booking.proposed_price_by_barber is None


@pytest.mark.parametrize("price", [0, -5.0, None, float("nan"), float("inf"), float("-inf")])
def test_non_positive_price_proposal_writes_nothing(db, price):
    repo = Mock(spec=BookingRepository)
    service = BookingService(db, repo=repo)

    with pytest.raises(HTTPException) as exc_info:
        service.propose_price("booking-1", price)

    assert exc_info.value.status_code == 422
    repo.find_by_id.assert_not_called()
    repo.update_proposed_price.assert_not_called()
    repo.update_status.assert_not_called()


def test_service_uses_the_shared_repository(service):
    assert service.repo is booking_repository


def test_rejected_price_proposal_keeps_stored_booking(db, service, booking_data):
    booking_id, _ = service.create_booking(booking_data())

    with pytest.raises(HTTPException):
        service.propose_price(booking_id, 0)
    with pytest.raises(HTTPException):
        service.propose_price(booking_id, float("nan"))

    booking = _status(db, booking_id)
    assert booking.status == BookingStatus.pending_customer_request.value
    assert booking.proposed_price_by_barber is None
    assert booking.service_price is None
    assert booking.version == 1


def test_price_proposal_updates_price_and_status_together(db, service, booking_data):
    booking_id, _ = service.create_booking(booking_data())

    service.propose_price(booking_id, 45.0)

    booking = _status(db, booking_id)
    assert booking.proposed_price_by_barber == 45.0
    assert booking.service_price == 45.0
    assert booking.status == BookingStatus.pending_customer_approval.value
    assert booking.version == 2


def test_price_proposal_on_priced_booking_conflicts(service, booking_data):
    booking_id, _ = service.create_booking(booking_data(service_price=25.0))

    with pytest.raises(HTTPException) as exc_info:
        service.propose_price(booking_id, 30.0)
    assert exc_info.value.status_code == 409


def test_price_proposal_for_missing_booking(service):
    with pytest.raises(HTTPException) as exc_info:
        service.propose_price("does-not-exist", 30.0)
    assert exc_info.value.status_code == 404


def test_accept_requires_pending_approval(db, service, booking_data):
    booking_id, _ = service.create_booking(booking_data())

    with pytest.raises(HTTPException) as exc_info:
        service.accept_proposed_price(booking_id)

    assert exc_info.value.status_code == 409
    assert _status(db, booking_id).status == BookingStatus.pending_customer_request.value


def test_reject_proposed_price(db, service, booking_data):
    booking_id, _ = service.create_booking(booking_data())
    service.propose_price(booking_id, 60.0)

    assert service.reject_proposed_price(booking_id) is BookingStatus.rejected_by_customer
    assert _status(db, booking_id).status == BookingStatus.rejected_by_customer.value

    with pytest.raises(HTTPException) as exc_info:
        service.accept_proposed_price(booking_id)
    assert exc_info.value.status_code == 409


def test_custom_request_negotiation_flow(db, service, booking_data):
    booking_id, status = service.create_booking(booking_data(style="Curly mohawk"))
    assert status is BookingStatus.pending_customer_request

    service.propose_price(booking_id, 50.0)
    booking = _status(db, booking_id)
    assert booking.status == BookingStatus.pending_customer_approval.value
    assert booking.proposed_price_by_barber == 50.0
    assert booking.service_price == 50.0

    assert service.accept_proposed_price(booking_id) is BookingStatus.confirmed
    assert _status(db, booking_id).status == BookingStatus.confirmed.value


def test_listed_service_booking(db, service):
    barber = user_crud.create_user(
        db,
        UserCreate(email="bob@example.com", display_name="Bob", password="password123", role=Role.barber),
    )
    user_crud.update_profile(
        db,
        barber.id,
        ProfileUpdate(services_offered=[
            OfferedHaircutIn(id="svc-fade", haircut_option_id="men-fade", price=25.0, duration=30),
        ]),
    )
    customer = user_crud.create_user(
        db, UserCreate(email="carol@example.com", display_name="Carol", password="password123")
    )

    booking_id, status = service.request_booking(
        BookingCreate(
            barber_id=barber.id,
            appointment_datetime=future_appointment(),
            haircut_id="svc-fade",
        ),
        customer,
    )

    assert status is BookingStatus.pending_barber_proposal
    booking = _status(db, booking_id)
    assert booking.service_price == 25.0
    assert booking.service_name == "Fade"
    assert booking.service_duration == 30
    assert booking.proposed_price_by_barber is None
    assert booking.customer_name == "Carol"
    assert booking.barber_name == "Bob"


def test_request_booking_rejects_unknown_haircut(db, service):
    barber = user_crud.create_user(
        db,
        UserCreate(email="bob@example.com", display_name="Bob", password="password123", role=Role.barber),
    )
    customer = user_crud.create_user(
        db, UserCreate(email="carol@example.com", display_name="Carol", password="password123")
    )

    with pytest.raises(HTTPException) as exc_info:
        service.request_booking(
            BookingCreate(barber_id=barber.id, appointment_datetime=future_appointment(), haircut_id="nope"),
            customer,
        )
    assert exc_info.value.status_code == 404


def test_status_updates_follow_the_table(db, service, booking_data):
    booking_id, _ = service.create_booking(booking_data(service_price=25.0))

    assert service.update_booking_status(booking_id, BookingStatus.confirmed) is BookingStatus.confirmed
    assert service.update_booking_status(booking_id, "completed") is BookingStatus.completed

    with pytest.raises(HTTPException) as exc_info:
        service.update_booking_status(booking_id, BookingStatus.cancelled_by_customer)
    assert exc_info.value.status_code == 409
    assert _status(db, booking_id).status == BookingStatus.completed.value


def test_status_update_cannot_target_negotiation_states(service, booking_data):
    booking_id, _ = service.create_booking(booking_data())

    with pytest.raises(HTTPException) as exc_info:
        service.update_booking_status(booking_id, BookingStatus.pending_customer_approval)
    assert exc_info.value.status_code == 400


def test_concurrent_change_is_reported_as_conflict(app, db, booking_data):
    booking_id, _ = BookingService(db).create_booking(booking_data(service_price=25.0))

    class RacingRepository(BookingRepository):
        """Lets another session cancel the booking right after it is read"""

        @staticmethod
        def find_by_id(session, booking_id):
            booking = BookingRepository.find_by_id(session, booking_id)
            other = app.state.session_factory()
            try:
                BookingRepository.update_status(other, booking_id, BookingStatus.cancelled_by_customer)
            finally:
                other.close()
            return booking

    racing = BookingService(db, repo=RacingRepository())
    with pytest.raises(HTTPException) as exc_info:
        racing.update_booking_status(booking_id, BookingStatus.confirmed)

    assert exc_info.value.status_code == 409
    assert _status(db, booking_id).status == BookingStatus.cancelled_by_customer.value


def test_barber_request_list(service, booking_data):
    open_id, _ = service.create_booking(booking_data(appointment_datetime=future_appointment(days=4)))
    confirmed_id, _ = service.create_booking(
        booking_data(appointment_datetime=future_appointment(days=1), service_price=20.0)
    )
    service.update_booking_status(confirmed_id, BookingStatus.confirmed)
    done_id, _ = service.create_booking(booking_data(service_price=20.0))
    service.update_booking_status(done_id, BookingStatus.rejected_by_barber)

    requests = service.list_barber_requests("barber-1")
    assert [b.id for b in requests] == [confirmed_id, open_id]
