from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime
import uuid
from barbermatch.database import Base


class TokenBlacklist(Base):
    __tablename__ = "token_blacklist"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    jti = Column(String, unique=True, nullable=False, index=True)  # JWT ID
    token = Column(String, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    blacklisted_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
