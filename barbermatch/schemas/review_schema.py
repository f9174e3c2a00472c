from pydantic import BaseModel, Field, field_validator
from datetime import datetime


class ReviewCreate(BaseModel):
    booking_id: str
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: str = Field(..., min_length=10, max_length=1000, description="Review comment")

    @field_validator('comment')
    @classmethod
    def comment_must_not_be_blank(cls, v):
        if len(v.strip()) < 10:
            raise ValueError('Comment must be at least 10 characters')
        return v.strip()


class ReviewResponse(BaseModel):
    id: str
    booking_id: str
    customer_id: str
    customer_name: str
    barber_id: str
    rating: int
    comment: str
    created_at: datetime

    class Config:
        from_attributes = True


class ReviewStats(BaseModel):
    total_reviews: int = 0
    average_rating: float = 0.0
    min_rating: int = 0
    max_rating: int = 0
