"""General service — newsletter membership and payment requests.

Routers hand over payloads that have already passed field-presence
checks; everything that touches the database lives here.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import settings
from ..exceptions import NotFoundError, ValidationError
from ..models import NewsletterMember, PaymentRequest
from ..schemas.general import (
    NewsletterMemberOut,
    NewsletterMemberPayload,
    NewsletterMemberRemoved,
    PaymentRequestOut,
    PaymentRequestPayload,
)

CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal(10) ** 10  # payment_requests.amount is Numeric(12, 2)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _member_out(member: NewsletterMember, created: bool) -> dict:
    return NewsletterMemberOut(
        id=member.id,
        email=member.email,
        subscribed=True,
        created=created,
        created_at=member.created_at.isoformat() if member.created_at else None,
    ).model_dump()


# ── Newsletter ───────────────────────────────────────────────────────


def create_newsletter_member(db: Session, payload: NewsletterMemberPayload) -> dict:
    """Subscribe an email. Subscribing twice returns the existing member."""
    email = _normalize_email(payload.email)
    member = db.query(NewsletterMember).filter_by(email=email).first()
    if member:
        return _member_out(member, created=False)

    member = NewsletterMember(email=email)
    db.add(member)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same address
        db.rollback()
        member = db.query(NewsletterMember).filter_by(email=email).one()
        return _member_out(member, created=False)

    db.refresh(member)
    logger.info("Newsletter member #{} subscribed", member.id)
    return _member_out(member, created=True)


def delete_newsletter_member(db: Session, payload: NewsletterMemberPayload) -> dict:
    """Unsubscribe an email. Raises NotFoundError if it was never subscribed."""
    email = _normalize_email(payload.email)
    member = db.query(NewsletterMember).filter_by(email=email).first()
    if not member:
        raise NotFoundError("Newsletter member not found")

    member_id = member.id
    db.delete(member)
    db.commit()
    logger.info("Newsletter member #{} unsubscribed", member_id)
    return NewsletterMemberRemoved(email=email).model_dump()


# ── Payments ─────────────────────────────────────────────────────────


def payment_request(db: Session, user_id: int | None, payload: PaymentRequestPayload) -> dict:
    """Record a pending payment request for the caller. The card token is never echoed."""
    try:
        amount = Decimal(str(payload.amount)).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError("amount", "range", "amount is out of range")
    if abs(amount) >= MAX_AMOUNT:
        raise ValidationError("amount", "range", "amount is out of range")

    row = PaymentRequest(
        user_id=user_id,
        token=payload.token.strip(),
        amount=amount,
        currency=settings.payment_currency,
        status="pending",
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(
        "Payment request #{} recorded: {} {} (user={})",
        row.id, amount, row.currency, user_id if user_id is not None else "anonymous",
    )
    return PaymentRequestOut(
        id=row.id,
        user_id=row.user_id,
        amount=float(row.amount),
        currency=row.currency,
        status=row.status,
        created_at=row.created_at.isoformat() if row.created_at else None,
    ).model_dump()
