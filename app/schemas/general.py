"""
schemas/general.py — Pydantic models for newsletter, feedback and payment routes

Payload fields are all optional at the parse level: a missing or null
field is reported by utils/validation.py as a 400, while a body of the
wrong shape or JSON type fails parsing (422).

Business Rules:
- Newsletter email is required (trimmed before the check)
- Feedback content is required (sent as written)
- Payment token and amount are required; the amount storage bound is
  checked by services/general_service.py

Called by: routers/general.py, services/general_service.py
Depends on: pydantic
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# ── Payloads ─────────────────────────────────────────────────────────


class NewsletterMemberPayload(BaseModel):
    email: str | None = None


class FeedbackPayload(BaseModel):
    content: str | None = None


class PaymentRequestPayload(BaseModel):
    token: str | None = None
    amount: float | None = Field(default=None, allow_inf_nan=False)


# ── Responses ────────────────────────────────────────────────────────


class NewsletterMemberOut(BaseModel):
    id: int
    email: str
    subscribed: bool = True
    created: bool = False
    created_at: str | None = None


class NewsletterMemberRemoved(BaseModel):
    email: str
    subscribed: bool = False
    deleted: bool = True


class PaymentRequestOut(BaseModel):
    id: int
    user_id: int | None = None
    amount: float
    currency: str
    status: str
    created_at: str | None = None
