"""Newsletter subscriber model."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String

from .base import Base, UTCDateTime


class NewsletterMember(Base):
    __tablename__ = "newsletter_members"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, nullable=False)  # stored lower-cased
    created_at = Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))
