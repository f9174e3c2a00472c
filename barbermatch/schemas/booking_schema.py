from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime, timezone
from barbermatch.domain.booking_state import BookingStatus


TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class BookingCreate(BaseModel):
    """A customer's request.

    Service name, price and duration are never taken from the caller; they are
    copied from the barber's offering named by ``haircut_id``.
    """

    barber_id: str = Field(..., description="ID of the barber being booked")
    appointment_datetime: datetime = Field(..., description="Appointment date and time")
    time: Optional[str] = Field(None, pattern=TIME_PATTERN, description="Appointment time (HH:MM)")
    style: Optional[str] = Field(None, max_length=200, description="Custom or AI-suggested style")
    haircut_id: Optional[str] = Field(None, description="ID of one of the barber's offered haircuts")
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator('appointment_datetime')
    @classmethod
    def appointment_must_be_in_future(cls, v):
        now = datetime.now(timezone.utc)
        # If v is timezone-naive, assume it's UTC
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        if v <= now:
            raise ValueError('appointment_datetime must be in the future')
        return v

    @model_validator(mode='after')
    def check_service_and_time(self):
        if not (self.style or self.haircut_id):
            raise ValueError('Either a style or a haircut_id is required')
        # time is the wall-clock time the customer picked, in their own offset
        appointment_time = self.appointment_datetime.strftime("%H:%M")
        if self.time is None:
            self.time = appointment_time
        elif self.time != appointment_time:
            raise ValueError('time must match the time of appointment_datetime')
        self.appointment_datetime = self.appointment_datetime.astimezone(timezone.utc)
        return self

    class Config:
        extra = "forbid"


class ProposePriceRequest(BaseModel):
    price: float = Field(..., gt=0, allow_inf_nan=False, description="Price proposed by the barber")


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingCreated(BaseModel):
    booking_id: str
    status: BookingStatus


class BookingResponse(BaseModel):
    id: str
    customer_id: str
    customer_name: str
    barber_id: str
    barber_name: str
    appointment_datetime: datetime
    time: str
    style: Optional[str] = None
    service_name: Optional[str] = None
    service_price: Optional[float] = None
    service_duration: Optional[int] = None
    proposed_price_by_barber: Optional[float] = None
    notes: Optional[str] = None
    status: BookingStatus
    version: int
    created_at: datetime

    class Config:
        from_attributes = True
