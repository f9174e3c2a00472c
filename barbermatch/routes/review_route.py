from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from barbermatch.services.review_crud import review_crud
from barbermatch.schemas.review_schema import ReviewCreate, ReviewResponse
from barbermatch.database import get_db
from barbermatch.security.auth import get_current_active_user, get_current_customer
from barbermatch.models.user_model import User
from barbermatch.logger import get_logger

review_router = APIRouter()
logger = get_logger(__name__)


@review_router.post(
    "/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED
)
def create_review(
    review: ReviewCreate,
    current_user: User = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    """Review a completed appointment (once per booking)"""
    logger.info(
        f"User {current_user.email} creating review for booking {review.booking_id}"
    )
    db_review = review_crud.create_review(db, review, current_user)
    return ReviewResponse.model_validate(db_review)


@review_router.get(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    status_code=status.HTTP_200_OK,
)
def get_review(
    review_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Get review by ID"""
    review = review_crud.get_review_by_id(db, review_id)
    if not review:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Review not found"
        )
    return ReviewResponse.model_validate(review)
