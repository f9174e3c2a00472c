"""Booking lifecycle: creation, status transitions and price negotiation."""

import math
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional, Tuple
from barbermatch.domain.booking_state import (
    BookingStatus,
    InvalidTransitionError,
    OPEN_REQUEST_STATUSES,
    StaleBookingError,
    STATUS_UPDATE_TARGETS,
    assert_transition,
    initial_status,
    is_terminal,
)
from barbermatch.models.booking_model import Booking
from barbermatch.models.user_model import User
from barbermatch.schemas.booking_schema import BookingCreate
from barbermatch.services.booking_repository import BookingRepository, booking_repository
from barbermatch.services.user_crud import user_crud
from barbermatch.logger import get_logger

logger = get_logger(__name__)

BOOKING_FIELDS = (
    "customer_id",
    "customer_name",
    "barber_id",
    "barber_name",
    "appointment_datetime",
    "time",
    "style",
    "service_name",
    "service_price",
    "service_duration",
    "notes",
)


def _conflict(e: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


class BookingService:
    """Service layer for the booking state machine.

    Every transition reads the current status, checks it against the
    transition table, and writes with a compare-and-swap on that status, so a
    booking that moved in between is reported as a conflict instead of being
    overwritten.
    """

    def __init__(self, db: Session, repo: Optional[BookingRepository] = None):
        self.db = db
        self.repo = repo or booking_repository

    def create_booking(self, data: Dict[str, Any]) -> Tuple[str, BookingStatus]:
        """Persist a new booking and return (id, initial status)"""
        booking_data = {key: data.get(key) for key in BOOKING_FIELDS}
        start_status = initial_status(booking_data["service_price"])
        booking_data["status"] = start_status.value
        booking_data["proposed_price_by_barber"] = None

        booking_id = self.repo.create(self.db, booking_data)
        return booking_id, start_status

    def request_booking(self, booking: BookingCreate, customer: User) -> Tuple[str, BookingStatus]:
        """Create a booking from a customer's request against a barber profile"""
        barber = user_crud.get_barber(self.db, booking.barber_id)
        if not barber:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Barber not found",
            )
        if barber.id == customer.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot book yourself",
            )

        data = booking.model_dump(exclude={"haircut_id"})
        if booking.haircut_id:
            offered = user_crud.find_offered_service(barber, booking.haircut_id)
            if offered is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Haircut not offered by this barber",
                )
            # Snapshot of the offering at booking time
            data["service_name"] = offered["haircut_name"]
            data["service_price"] = offered["price"]
            data["service_duration"] = offered.get("duration")

        data.update(
            customer_id=customer.id,
            customer_name=customer.display_name or "Anonymous",
            barber_id=barber.id,
            barber_name=barber.display_name,
        )
        logger.info(f"Customer {customer.id} requesting booking with barber {barber.id}")
        return self.create_booking(data)

    def get_booking_by_id(self, booking_id: str) -> Optional[Booking]:
        return self.repo.find_by_id(self.db, booking_id)

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.get_booking_by_id(booking_id)
        if not booking:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found"
            )
        return booking

    def propose_price(self, booking_id: str, proposed_price: float) -> None:
        if proposed_price is None or not math.isfinite(proposed_price) or proposed_price <= 0:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Proposed price must be greater than zero.",
            )

        booking = self.get_booking(booking_id)
        try:
            assert_transition(booking.status, BookingStatus.pending_customer_approval)
            self.repo.update_proposed_price(
                self.db,
                booking.id,
                proposed_price,
                BookingStatus.pending_customer_approval,
                expected_status=BookingStatus(booking.status),
            )
        except (InvalidTransitionError, StaleBookingError) as e:
            raise _conflict(e)

    def accept_proposed_price(self, booking_id: str) -> BookingStatus:
        return self._respond_to_proposal(booking_id, BookingStatus.confirmed)

    def reject_proposed_price(self, booking_id: str) -> BookingStatus:
        return self._respond_to_proposal(booking_id, BookingStatus.rejected_by_customer)

    def update_booking_status(self, booking_id: str, new_status: BookingStatus) -> BookingStatus:
        """Generic status change used by the accept/reject/complete/cancel actions"""
        new_status = BookingStatus(new_status)
        if new_status not in STATUS_UPDATE_TARGETS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Status cannot be set directly to {new_status.value}",
            )
        return self._move(self.get_booking(booking_id), new_status)

    def list_customer_bookings(self, customer_id: str, skip: int = 0, limit: int = 100) -> List[Booking]:
        return self.repo.list_for_customer(self.db, customer_id, skip=skip, limit=limit)

    def list_barber_requests(self, barber_id: str, skip: int = 0, limit: int = 100) -> List[Booking]:
        """Requests a barber still has to handle, earliest appointment first"""
        return self.repo.list_for_barber(
            self.db, barber_id, statuses=OPEN_REQUEST_STATUSES, skip=skip, limit=limit
        )

    def _respond_to_proposal(self, booking_id: str, target: BookingStatus) -> BookingStatus:
        booking = self.get_booking(booking_id)
        if booking.status != BookingStatus.pending_customer_approval.value:
            raise _conflict(InvalidTransitionError(booking.status, target))
        return self._move(booking, target)

    def _move(self, booking: Booking, target: BookingStatus) -> BookingStatus:
        current = BookingStatus(booking.status)
        if is_terminal(current):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Booking is already {current.value}",
            )
        try:
            assert_transition(current, target)
            self.repo.update_status(self.db, booking.id, target, expected_status=current)
        except (InvalidTransitionError, StaleBookingError) as e:
            logger.warning(f"Rejected transition for booking {booking.id}: {e}")
            raise _conflict(e)
        return target
