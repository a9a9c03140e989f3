"""
Session Model

A session binds an opaque bearer token to a user for a fixed window. The token
is never modified after it is issued; signing out deletes the row.
"""

import uuid

from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from estateiq.models import Base
from estateiq.utils.dates import utcnow


class UserSession(Base):
    """
    Attributes:
        id: Primary key
        user_id: Owning user; sessions are deleted with the user
        token: Opaque 256-bit hex token sent in the session cookie
        expires_at: Naive UTC expiry; the session is valid while now < expires_at
        created_at: When the session was issued
        ip_address: Client IP at sign-in, if known
        user_agent: Client user agent at sign-in, if known
    """
    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(255), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)

    user = relationship("User", back_populates="sessions")

    def is_expired(self, now=None) -> bool:
        return (now or utcnow()) >= self.expires_at
