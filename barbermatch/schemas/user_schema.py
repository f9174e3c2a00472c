from pydantic import BaseModel, EmailStr, Field, field_validator
from enum import Enum
from typing import Dict, List, Optional, Union
from datetime import datetime
from uuid import uuid4
from barbermatch.utils.availability import AvailabilityError, normalize_availability
from barbermatch.schemas.review_schema import ReviewStats


class Role(str, Enum):
    customer = "customer"
    barber = "barber"


class Gender(str, Enum):
    men = "men"
    women = "women"


class OfferedHaircutIn(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    haircut_option_id: str
    price: float = Field(..., gt=0, allow_inf_nan=False)
    duration: Optional[int] = Field(None, gt=0, description="Duration in minutes")
    portfolio_image_urls: List[str] = Field(default_factory=list)


class OfferedHaircut(OfferedHaircutIn):
    haircut_name: str
    gender: Gender


class UserBase(BaseModel):
    email: EmailStr
    display_name: str = Field(..., min_length=2)
    role: Role = Role.customer


class UserCreate(UserBase):
    password: str = Field(..., min_length=8)


class UserOut(UserBase):
    id: str
    photo_url: Optional[str] = None
    status: str
    is_active: bool
    created_at: datetime

    # Barber profile fields, null for customers
    bio: Optional[str] = None
    specialties: Optional[List[str]] = None
    experience_years: Optional[int] = None
    availability: Optional[str] = None
    subscription_active: Optional[bool] = None
    services_offered: Optional[List[OfferedHaircut]] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, min_length=2)
    photo_url: Optional[str] = None
    password: Optional[str] = Field(None, min_length=8)

    # Barber only
    bio: Optional[str] = Field(None, max_length=500)
    specialties: Optional[Union[List[str], str]] = None
    experience_years: Optional[int] = Field(None, ge=0)
    availability: Optional[str] = None
    subscription_active: Optional[bool] = None
    services_offered: Optional[List[OfferedHaircutIn]] = None
    location: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator('specialties')
    @classmethod
    def split_specialties(cls, v):
        # Accept "Fades, Beard trims" as well as a list
        if v is None:
            return v
        items = v.split(",") if isinstance(v, str) else v
        return [item.strip() for item in items if item and item.strip()]

    @field_validator('availability')
    @classmethod
    def availability_must_be_valid(cls, v):
        if v is None:
            return v
        try:
            return normalize_availability(v)
        except AvailabilityError as e:
            raise ValueError(str(e))

    class Config:
        from_attributes = True


BARBER_ONLY_FIELDS = frozenset({
    "bio",
    "specialties",
    "experience_years",
    "availability",
    "subscription_active",
    "services_offered",
    "location",
    "latitude",
    "longitude",
})


class BarberOut(BaseModel):
    id: str
    display_name: str
    photo_url: Optional[str] = None
    bio: Optional[str] = None
    specialties: Optional[List[str]] = None
    experience_years: Optional[int] = None
    availability: Optional[str] = None
    subscription_active: Optional[bool] = None
    services_offered: Optional[List[OfferedHaircut]] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    class Config:
        from_attributes = True


class BarberDetail(BarberOut):
    availability_by_day: Dict[str, List[str]] = Field(default_factory=dict)
    available_days: List[str] = Field(default_factory=list)
    review_stats: ReviewStats = Field(default_factory=ReviewStats)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    user: UserOut


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class RefreshTokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str


class LogoutResponse(BaseModel):
    message: str
