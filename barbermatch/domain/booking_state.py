"""Booking status state machine."""

from enum import Enum
from typing import Dict, FrozenSet


class BookingStatus(str, Enum):
    pending_customer_request = "pending_customer_request"
    pending_barber_proposal = "pending_barber_proposal"
    pending_customer_approval = "pending_customer_approval"
    confirmed = "confirmed"
    completed = "completed"
    cancelled_by_customer = "cancelled_by_customer"
    cancelled_by_barber = "cancelled_by_barber"
    rejected_by_barber = "rejected_by_barber"
    rejected_by_customer = "rejected_by_customer"


BOOKING_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.pending_customer_request: frozenset({
        BookingStatus.pending_customer_approval,
        BookingStatus.rejected_by_barber,
        BookingStatus.cancelled_by_customer,
    }),
    BookingStatus.pending_barber_proposal: frozenset({
        BookingStatus.confirmed,
        BookingStatus.rejected_by_barber,
        BookingStatus.cancelled_by_customer,
    }),
    BookingStatus.pending_customer_approval: frozenset({
        BookingStatus.confirmed,
        BookingStatus.rejected_by_customer,
        BookingStatus.cancelled_by_customer,
    }),
    BookingStatus.confirmed: frozenset({
        BookingStatus.completed,
        BookingStatus.cancelled_by_barber,
        BookingStatus.cancelled_by_customer,
    }),
    BookingStatus.completed: frozenset(),
    BookingStatus.cancelled_by_customer: frozenset(),
    BookingStatus.cancelled_by_barber: frozenset(),
    BookingStatus.rejected_by_barber: frozenset(),
    BookingStatus.rejected_by_customer: frozenset(),
}

# Statuses a barber still has to act on (or serve)
OPEN_REQUEST_STATUSES = frozenset({
    BookingStatus.pending_barber_proposal,
    BookingStatus.pending_customer_request,
    BookingStatus.pending_customer_approval,
    BookingStatus.confirmed,
})

BARBER_STATUS_UPDATES = frozenset({
    BookingStatus.confirmed,
    BookingStatus.rejected_by_barber,
    BookingStatus.completed,
    BookingStatus.cancelled_by_barber,
})

CUSTOMER_STATUS_UPDATES = frozenset({
    BookingStatus.cancelled_by_customer,
})

STATUS_UPDATE_TARGETS = BARBER_STATUS_UPDATES | CUSTOMER_STATUS_UPDATES


class InvalidTransitionError(ValueError):
    def __init__(self, current: BookingStatus, target: BookingStatus):
        self.current = BookingStatus(current)
        self.target = BookingStatus(target)
        super().__init__(
            f"Invalid booking transition: {self.current.value} -> {self.target.value}"
        )


class StaleBookingError(RuntimeError):
    """The booking changed between read and write"""

    def __init__(self, booking_id: str):
        self.booking_id = booking_id
        super().__init__(f"Booking {booking_id} was modified concurrently")


def initial_status(service_price) -> BookingStatus:
    # A priced service waits on the barber; a custom request waits on a price proposal
    if service_price is not None:
        return BookingStatus.pending_barber_proposal
    return BookingStatus.pending_customer_request


def is_terminal(status: BookingStatus) -> bool:
    return not BOOKING_TRANSITIONS[BookingStatus(status)]


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return BookingStatus(target) in BOOKING_TRANSITIONS[BookingStatus(current)]


def assert_transition(current: BookingStatus, target: BookingStatus) -> BookingStatus:
    """Return the target status, or raise InvalidTransitionError"""
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target)
    return BookingStatus(target)
