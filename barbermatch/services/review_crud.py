from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional
from barbermatch.domain.booking_state import BookingStatus
from barbermatch.models.review_model import Review
from barbermatch.models.booking_model import Booking
from barbermatch.models.user_model import User
from barbermatch.schemas.review_schema import ReviewCreate, ReviewStats
from barbermatch.logger import get_logger

logger = get_logger(__name__)


class ReviewCRUD:
    @staticmethod
    def create_review(db: Session, review: ReviewCreate, customer: User) -> Review:
        """Create a review for a completed booking, at most one per customer and booking"""
        booking_id_str = str(review.booking_id)

        booking = db.query(Booking).filter(Booking.id == booking_id_str).first()
        if not booking:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Booking not found"
            )

        if booking.customer_id != customer.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You are not authorized to review this booking"
            )

        if booking.status != BookingStatus.completed.value:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You can only review completed appointments"
            )

        # Point-in-time check, there is no unique constraint behind it
        if ReviewCRUD.get_customer_review_for_booking(db, booking_id_str, customer.id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="You have already submitted a review for this appointment"
            )

        try:
            db_review = Review(
                booking_id=booking_id_str,
                customer_id=customer.id,
                customer_name=customer.display_name or "Anonymous",
                barber_id=booking.barber_id,
                rating=review.rating,
                comment=review.comment,
            )
            db.add(db_review)
            db.commit()
            db.refresh(db_review)
            logger.info(f"Review created: {db_review.id} for booking {booking_id_str}")
            return db_review

        except Exception as e:
            db.rollback()
            logger.error(f"Error creating review: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error occurred while creating review"
            )

    @staticmethod
    def get_review_by_id(db: Session, review_id: str) -> Optional[Review]:
        return db.query(Review).filter(Review.id == str(review_id)).first()

    @staticmethod
    def get_customer_review_for_booking(db: Session, booking_id: str, customer_id: str) -> Optional[Review]:
        return db.query(Review).filter(
            Review.booking_id == str(booking_id),
            Review.customer_id == str(customer_id),
        ).first()

    @staticmethod
    def get_barber_reviews(db: Session, barber_id: str, skip: int = 0, limit: int = 100) -> List[Review]:
        """Reviews received by a barber, newest first"""
        return (
            db.query(Review)
            .filter(Review.barber_id == str(barber_id))
            .order_by(Review.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_barber_review_stats(db: Session, barber_id: str) -> ReviewStats:
        stats = db.query(
            func.count(Review.id).label('total_reviews'),
            func.avg(Review.rating).label('average_rating'),
            func.min(Review.rating).label('min_rating'),
            func.max(Review.rating).label('max_rating')
        ).filter(Review.barber_id == str(barber_id)).first()

        return ReviewStats(
            total_reviews=stats.total_reviews or 0,
            average_rating=round(float(stats.average_rating), 2) if stats.average_rating else 0.0,
            min_rating=stats.min_rating or 0,
            max_rating=stats.max_rating or 0,
        )


review_crud = ReviewCRUD()
