import pytest

from barbermatch.domain.booking_state import (
    BOOKING_TRANSITIONS,
    BookingStatus,
    InvalidTransitionError,
    OPEN_REQUEST_STATUSES,
    STATUS_UPDATE_TARGETS,
    assert_transition,
    can_transition,
    initial_status,
    is_terminal,
)

TERMINAL = {
    BookingStatus.completed,
    BookingStatus.cancelled_by_customer,
    BookingStatus.cancelled_by_barber,
    BookingStatus.rejected_by_barber,
    BookingStatus.rejected_by_customer,
}

ALLOWED = [
    (BookingStatus.pending_customer_request, BookingStatus.pending_customer_approval),
    (BookingStatus.pending_customer_request, BookingStatus.rejected_by_barber),
    (BookingStatus.pending_customer_request, BookingStatus.cancelled_by_customer),
    (BookingStatus.pending_barber_proposal, BookingStatus.confirmed),
    (BookingStatus.pending_barber_proposal, BookingStatus.rejected_by_barber),
    (BookingStatus.pending_barber_proposal, BookingStatus.cancelled_by_customer),
    (BookingStatus.pending_customer_approval, BookingStatus.confirmed),
    (BookingStatus.pending_customer_approval, BookingStatus.rejected_by_customer),
    (BookingStatus.pending_customer_approval, BookingStatus.cancelled_by_customer),
    (BookingStatus.confirmed, BookingStatus.completed),
    (BookingStatus.confirmed, BookingStatus.cancelled_by_barber),
    (BookingStatus.confirmed, BookingStatus.cancelled_by_customer),
]


def test_every_status_has_an_entry():
    assert set(BOOKING_TRANSITIONS) == set(BookingStatus)


def test_transition_table_matches_allowed_pairs():
    pairs = {
        (current, target)
        for current, targets in BOOKING_TRANSITIONS.items()
        for target in targets
    }
    assert pairs == set(ALLOWED)


@pytest.mark.parametrize("current,target", ALLOWED)
def test_allowed_transitions(current, target):
    assert can_transition(current, target)
    assert assert_transition(current, target) is target


@pytest.mark.parametrize("status", sorted(TERMINAL, key=lambda s: s.value))
def test_terminal_statuses_have_no_way_out(status):
    assert is_terminal(status)
    for target in BookingStatus:
        assert not can_transition(status, target)


def test_non_terminal_statuses():
    for status in set(BookingStatus) - TERMINAL:
        assert not is_terminal(status)


def test_accept_requires_a_pending_proposal():
    with pytest.raises(InvalidTransitionError) as exc_info:
        assert_transition(BookingStatus.pending_customer_request, BookingStatus.confirmed)
    assert exc_info.value.current is BookingStatus.pending_customer_request
    assert exc_info.value.target is BookingStatus.confirmed
    assert "pending_customer_request -> confirmed" in str(exc_info.value)


def test_string_values_are_accepted():
    assert can_transition("confirmed", "completed")
    assert not can_transition("completed", "confirmed")


def test_initial_status_depends_on_price():
    assert initial_status(25.0) is BookingStatus.pending_barber_proposal
    assert initial_status(0) is BookingStatus.pending_barber_proposal
    assert initial_status(None) is BookingStatus.pending_customer_request


def test_open_requests_exclude_terminal_statuses():
    assert not OPEN_REQUEST_STATUSES & TERMINAL


def test_status_update_targets():
    assert BookingStatus.pending_customer_approval not in STATUS_UPDATE_TARGETS
    assert BookingStatus.rejected_by_customer not in STATUS_UPDATE_TARGETS
    assert BookingStatus.cancelled_by_customer in STATUS_UPDATE_TARGETS
    assert BookingStatus.completed in STATUS_UPDATE_TARGETS
