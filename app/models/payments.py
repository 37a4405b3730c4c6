"""Payment request model.

Rows are recorded as ``pending``; charging the card token is handled
outside this service.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import relationship

from .base import Base, UTCDateTime


class PaymentRequest(Base):
    __tablename__ = "payment_requests"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"))  # NULL for anonymous callers
    token = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="usd")

    # Status workflow: pending → paid | failed
    status = Column(String(20), default="pending", nullable=False)

    created_at = Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="payment_requests")

    __table_args__ = (
        Index("ix_payment_requests_user_created", "user_id", "created_at"),
    )
