from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Boolean, Integer, Float, Text, JSON
import uuid
from barbermatch.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    display_name = Column(String, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String, nullable=False, default="customer")
    photo_url = Column(String, nullable=True)
    status = Column(String, default="active")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Barber profile
    bio = Column(Text, nullable=True)
    specialties = Column(JSON, nullable=True)
    experience_years = Column(Integer, nullable=True)
    availability = Column(Text, nullable=True)  # JSON-encoded weekly map
    subscription_active = Column(Boolean, nullable=True)
    services_offered = Column(JSON, nullable=True)
    location = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    @property
    def is_barber(self) -> bool:
        return self.role == "barber"
