from fastapi import HTTPException, status
from sqlalchemy import update
from sqlalchemy.orm import Session
from typing import Any, Dict, Iterable, List, Optional
from barbermatch.models.booking_model import Booking
from barbermatch.domain.booking_state import BookingStatus, StaleBookingError
from barbermatch.logger import get_logger

logger = get_logger(__name__)


class BookingRepository:
    """Persistence for booking documents.

    Every write is a single UPDATE statement, so the fields it touches change
    together or not at all. Passing ``expected_status`` turns the write into a
    compare-and-swap on the stored status.
    """

    @staticmethod
    def create(db: Session, data: Dict[str, Any]) -> str:
        """Insert a booking and return its generated ID"""
        try:
            db_booking = Booking(**data)
            db.add(db_booking)
            db.commit()
            db.refresh(db_booking)
            logger.info(f"Booking created: {db_booking.id} ({db_booking.status})")
            return db_booking.id

        except Exception as e:
            db.rollback()
            logger.error(f"Error creating booking: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error occurred while creating booking",
            )

    @staticmethod
    def find_by_id(db: Session, booking_id: str) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == str(booking_id)).first()

    @staticmethod
    def update_status(
            db: Session,
            booking_id: str,
            new_status: BookingStatus,
            expected_status: Optional[BookingStatus] = None,
    ) -> None:
        BookingRepository._apply_update(
            db,
            booking_id,
            {"status": BookingStatus(new_status).value},
            expected_status,
        )
        logger.info(f"Booking {booking_id} status -> {BookingStatus(new_status).value}")

    @staticmethod
    def update_proposed_price(
            db: Session,
            booking_id: str,
            price: float,
            new_status: BookingStatus,
            expected_status: Optional[BookingStatus] = None,
    ) -> None:
        """Write the proposed price, mirror it into service_price and set the status"""
        BookingRepository._apply_update(
            db,
            booking_id,
            {
                "proposed_price_by_barber": price,
                "service_price": price,
                "status": BookingStatus(new_status).value,
            },
            expected_status,
        )
        logger.info(f"Booking {booking_id} price proposed: {price}")

    @staticmethod
    def list_for_customer(db: Session, customer_id: str, skip: int = 0, limit: int = 100) -> List[Booking]:
        """A customer's bookings, latest appointment first"""
        return (
            db.query(Booking)
            .filter(Booking.customer_id == str(customer_id))
            .order_by(Booking.appointment_datetime.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    @staticmethod
    def list_for_barber(
            db: Session,
            barber_id: str,
            statuses: Optional[Iterable[BookingStatus]] = None,
            skip: int = 0,
            limit: int = 100,
    ) -> List[Booking]:
        """A barber's bookings, earliest appointment first"""
        query = db.query(Booking).filter(Booking.barber_id == str(barber_id))
        if statuses is not None:
            query = query.filter(Booking.status.in_([BookingStatus(s).value for s in statuses]))
        return query.order_by(Booking.appointment_datetime.asc()).offset(skip).limit(limit).all()

    @staticmethod
    def _apply_update(
            db: Session,
            booking_id: str,
            values: Dict[str, Any],
            expected_status: Optional[BookingStatus],
    ) -> None:
        booking_id = str(booking_id)
        stmt = update(Booking).where(Booking.id == booking_id)
        if expected_status is not None:
            stmt = stmt.where(Booking.status == BookingStatus(expected_status).value)
        stmt = stmt.values(version=Booking.version + 1, **values).execution_options(
            synchronize_session=False
        )

        try:
            result = db.execute(stmt)
            matched = result.rowcount
            if matched:
                db.commit()
            else:
                db.rollback()
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating booking {booking_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error occurred while updating booking",
            )

        if matched:
            return
        if BookingRepository.find_by_id(db, booking_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found"
            )
        logger.warning(f"Stale write rejected for booking {booking_id}")
        raise StaleBookingError(booking_id)


booking_repository = BookingRepository()
