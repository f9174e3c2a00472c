from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List
from barbermatch.database import get_db
from barbermatch.domain.booking_state import BARBER_STATUS_UPDATES, BookingStatus
from barbermatch.models.booking_model import Booking
from barbermatch.models.user_model import User
from barbermatch.schemas.booking_schema import (
    BookingCreate,
    BookingCreated,
    BookingResponse,
    BookingStatusUpdate,
    ProposePriceRequest,
)
from barbermatch.security.auth import get_current_active_user, get_current_barber, get_current_customer
from barbermatch.services.booking_service import BookingService
from barbermatch.logger import get_logger

booking_router = APIRouter()
logger = get_logger(__name__)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


def _require_barber_of(booking: Booking, user: User) -> None:
    if booking.barber_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the booked barber can do this",
        )


def _require_customer_of(booking: Booking, user: User) -> None:
    if booking.customer_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the customer who made the booking can do this",
        )


# CUSTOMER ENDPOINTS


@booking_router.post(
    "/bookings", response_model=BookingCreated, status_code=status.HTTP_201_CREATED
)
def create_booking(
    booking: BookingCreate,
    current_user: User = Depends(get_current_customer),
    service: BookingService = Depends(get_booking_service),
):
    """Request an appointment with a barber"""
    try:
        booking_id, initial_status = service.request_booking(booking, current_user)
        return BookingCreated(booking_id=booking_id, status=initial_status)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating booking: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create booking. Please try again.",
        )


@booking_router.get(
    "/bookings", response_model=List[BookingResponse], status_code=status.HTTP_200_OK
)
def get_my_bookings(
    skip: int = Query(0, ge=0, description="Number of bookings to skip"),
    limit: int = Query(100, ge=1, le=100, description="Number of bookings to retrieve"),
    current_user: User = Depends(get_current_active_user),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings the current user made as a customer"""
    bookings = service.list_customer_bookings(current_user.id, skip=skip, limit=limit)
    return [BookingResponse.model_validate(booking) for booking in bookings]


@booking_router.post(
    "/bookings/{booking_id}/accept-price",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
)
def accept_proposed_price(
    booking_id: str,
    current_user: User = Depends(get_current_active_user),
    service: BookingService = Depends(get_booking_service),
):
    """Customer accepts the barber's proposed price"""
    _require_customer_of(service.get_booking(booking_id), current_user)
    service.accept_proposed_price(booking_id)
    logger.info(f"Customer {current_user.id} accepted price for booking {booking_id}")
    return BookingResponse.model_validate(service.get_booking(booking_id))


@booking_router.post(
    "/bookings/{booking_id}/reject-price",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
)
def reject_proposed_price(
    booking_id: str,
    current_user: User = Depends(get_current_active_user),
    service: BookingService = Depends(get_booking_service),
):
    """Customer rejects the barber's proposed price"""
    _require_customer_of(service.get_booking(booking_id), current_user)
    service.reject_proposed_price(booking_id)
    logger.info(f"Customer {current_user.id} rejected price for booking {booking_id}")
    return BookingResponse.model_validate(service.get_booking(booking_id))


# BARBER ENDPOINTS


@booking_router.get(
    "/bookings/requests",
    response_model=List[BookingResponse],
    status_code=status.HTTP_200_OK,
)
def get_booking_requests(
    skip: int = Query(0, ge=0, description="Number of bookings to skip"),
    limit: int = Query(100, ge=1, le=100, description="Number of bookings to retrieve"),
    current_user: User = Depends(get_current_barber),
    service: BookingService = Depends(get_booking_service),
):
    """Open requests and upcoming appointments for the current barber"""
    bookings = service.list_barber_requests(current_user.id, skip=skip, limit=limit)
    return [BookingResponse.model_validate(booking) for booking in bookings]


@booking_router.post(
    "/bookings/{booking_id}/propose-price",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
)
def propose_price(
    booking_id: str,
    proposal: ProposePriceRequest,
    current_user: User = Depends(get_current_barber),
    service: BookingService = Depends(get_booking_service),
):
    """Barber proposes a price for a custom request"""
    _require_barber_of(service.get_booking(booking_id), current_user)
    service.propose_price(booking_id, proposal.price)
    logger.info(f"Barber {current_user.id} proposed {proposal.price} for booking {booking_id}")
    return BookingResponse.model_validate(service.get_booking(booking_id))


# SHARED ENDPOINTS


@booking_router.get(
    "/bookings/{booking_id}",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
)
def get_booking(
    booking_id: str,
    current_user: User = Depends(get_current_active_user),
    service: BookingService = Depends(get_booking_service),
):
    """Get a booking (its customer or barber only)"""
    booking = service.get_booking(booking_id)
    if current_user.id not in (booking.customer_id, booking.barber_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this booking",
        )
    return BookingResponse.model_validate(booking)


@booking_router.patch(
    "/bookings/{booking_id}/status",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
)
def update_booking_status(
    booking_id: str,
    status_update: BookingStatusUpdate,
    current_user: User = Depends(get_current_active_user),
    service: BookingService = Depends(get_booking_service),
):
    """Accept, reject, complete or cancel a booking"""
    booking = service.get_booking(booking_id)
    if status_update.status in BARBER_STATUS_UPDATES:
        _require_barber_of(booking, current_user)
    elif status_update.status == BookingStatus.cancelled_by_customer:
        _require_customer_of(booking, current_user)

    logger.info(
        f"User {current_user.id} updating booking {booking_id} status to {status_update.status.value}"
    )
    service.update_booking_status(booking_id, status_update.status)
    return BookingResponse.model_validate(service.get_booking(booking_id))
