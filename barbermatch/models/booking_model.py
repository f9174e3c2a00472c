from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Integer, Numeric, Text
import uuid
from barbermatch.database import Base
from barbermatch.domain.booking_state import BookingStatus


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)

    # Parties, display names copied at creation time
    customer_id = Column(String(36), nullable=False, index=True)
    customer_name = Column(String, nullable=False)
    barber_id = Column(String(36), nullable=False, index=True)
    barber_name = Column(String, nullable=False)

    appointment_datetime = Column(DateTime(timezone=True), nullable=False)
    time = Column(String(5), nullable=False)  # HH:MM

    # Either a custom style or a snapshot of one of the barber's offered services
    style = Column(String, nullable=True)
    service_name = Column(String, nullable=True)
    service_price = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    service_duration = Column(Integer, nullable=True)

    proposed_price_by_barber = Column(Numeric(10, 2, asdecimal=False), nullable=True)

    notes = Column(Text, nullable=True)
    status = Column(String, nullable=False, default=BookingStatus.pending_customer_request.value, index=True)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
