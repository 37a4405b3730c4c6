"""General API — newsletter membership, site feedback and payment requests.

Each route trims and presence-checks its payload, then hands off to the
service layer (or the mailer, for feedback). Errors are raised, never
returned: error_handlers.error_response turns them into JSON replies.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from .. import email_service
from ..database import get_db
from ..dependencies import get_user_id
from ..rate_limit import PAYMENT_LIMIT, PUBLIC_WRITE_LIMIT, limiter
from ..schemas.general import FeedbackPayload, NewsletterMemberPayload, PaymentRequestPayload
from ..services import general_service
from ..utils.validation import create_validation_error, first_issue, required, trim_string

router = APIRouter(tags=["general"])


def _require_email(body: NewsletterMemberPayload) -> None:
    body.email = trim_string(body.email)
    issue = required(body.email, "email")
    if issue is not None:
        raise create_validation_error(issue)


# ── Newsletter ───────────────────────────────────────────────────────


@router.post("/api/newsletter/members")
@limiter.limit(PUBLIC_WRITE_LIMIT)
def create_newsletter_member(
    request: Request,
    body: NewsletterMemberPayload,
    db: Session = Depends(get_db),
):
    """Subscribe an email address to the newsletter."""
    _require_email(body)
    return general_service.create_newsletter_member(db, body)


@router.post("/api/newsletter/members/remove")
@router.delete("/api/newsletter/members")
@limiter.limit(PUBLIC_WRITE_LIMIT)
def delete_newsletter_member(
    request: Request,
    body: NewsletterMemberPayload,
    db: Session = Depends(get_db),
):
    """Unsubscribe an email address."""
    _require_email(body)
    return general_service.delete_newsletter_member(db, body)


# ── Feedback ─────────────────────────────────────────────────────────


@router.post("/api/feedback")
@limiter.limit(PUBLIC_WRITE_LIMIT)
async def send_feedback(
    request: Request,
    body: FeedbackPayload,
    background_tasks: BackgroundTasks,
):
    """Mail feedback to the team. Delivery happens after the response is sent."""
    issue = required(body.content, "content")
    if issue is not None:
        raise create_validation_error(issue)

    background_tasks.add_task(email_service.feedback_email, body.content)
    return Response(status_code=200)


# ── Payments ─────────────────────────────────────────────────────────


@router.post("/api/payments/requests")
@limiter.limit(PAYMENT_LIMIT)
def payment_request(
    request: Request,
    body: PaymentRequestPayload,
    db: Session = Depends(get_db),
    user_id: int | None = Depends(get_user_id),
):
    """Record a payment request for the caller."""
    issue = first_issue(
        required(body.token, "token"),
        required(body.amount, "amount"),
    )
    if issue is not None:
        raise create_validation_error(issue)
    return general_service.payment_request(db, user_id, body)
