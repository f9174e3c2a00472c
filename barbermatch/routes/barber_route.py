from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from barbermatch.catalog import list_haircut_options
from barbermatch.database import get_db
from barbermatch.schemas.review_schema import ReviewResponse
from barbermatch.schemas.user_schema import BarberDetail, BarberOut, Gender
from barbermatch.services.review_crud import review_crud
from barbermatch.services.user_crud import user_crud
from barbermatch.utils.availability import AvailabilityError, available_days, parse_availability
from barbermatch.logger import get_logger

barber_router = APIRouter()
logger = get_logger(__name__)


@barber_router.get("/barbers", response_model=List[BarberOut], status_code=status.HTTP_200_OK)
def list_barbers(
    search: Optional[str] = Query(None, description="Match against name, specialties or bio"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Browse the barber directory"""
    barbers = user_crud.search_barbers(db, search=search, skip=skip, limit=limit)
    return [BarberOut.model_validate(barber) for barber in barbers]


@barber_router.get("/barbers/{barber_id}", response_model=BarberDetail, status_code=status.HTTP_200_OK)
def get_barber(barber_id: str, db: Session = Depends(get_db)):
    """Barber profile with weekly availability and review statistics"""
    barber = user_crud.get_barber(db, barber_id)
    if not barber:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Barber not found")

    detail = BarberDetail.model_validate(barber)
    try:
        detail.availability_by_day = parse_availability(barber.availability)
        detail.available_days = available_days(barber.availability)
    except AvailabilityError as e:
        # Profile is still shown, without hours
        logger.warning(f"Unreadable availability for barber {barber_id}: {e}")
    detail.review_stats = review_crud.get_barber_review_stats(db, barber_id)
    return detail


@barber_router.get(
    "/barbers/{barber_id}/reviews",
    response_model=List[ReviewResponse],
    status_code=status.HTTP_200_OK,
)
def get_barber_reviews(
    barber_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Reviews a barber has received, newest first"""
    if not user_crud.get_barber(db, barber_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Barber not found")
    reviews = review_crud.get_barber_reviews(db, barber_id, skip=skip, limit=limit)
    return [ReviewResponse.model_validate(review) for review in reviews]


@barber_router.get("/hairstyle-options", status_code=status.HTTP_200_OK)
def get_hairstyle_options(gender: Optional[Gender] = Query(None)):
    """Haircut catalog barbers pick their offered services from"""
    options = list_haircut_options(gender.value if gender else None)
    return [asdict(option) for option in options]
