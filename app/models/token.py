"""Personal access token model."""
from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.core.database import Base, utcnow

ACCESS_ABILITY = "*"
REFRESH_ABILITY = "refresh"


class PersonalAccessToken(Base):
    """Hashed bearer token issued to a user."""

    __tablename__ = "personal_access_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    token = Column(String(64), unique=True, nullable=False)
    abilities = Column(JSON, default=lambda: [ACCESS_ABILITY])
    last_used_at = Column(DateTime)
    expires_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)

    user = relationship("User", back_populates="tokens")

    def can(self, ability: str) -> bool:
        abilities = self.abilities or []
        return ACCESS_ABILITY in abilities or ability in abilities

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or utcnow())

    def __repr__(self):
        return f"<PersonalAccessToken {self.id} user={self.user_id}>"
