"""
email_service.py — Outbound notification mail

Sends site feedback to the team mailbox through Microsoft Graph
sendMail, using the application (client-credentials) token.

Business Rules:
- Fire-and-forget: callers schedule it as a background task; it never raises
- Returns False (and logs) when mail is not configured or delivery fails
- Feedback text is sent as plain text, exactly as submitted

Called by: routers/general.py (BackgroundTasks)
Depends on: utils/graph_client.py, config.py
"""

import httpx
from loguru import logger

from .config import settings
from .utils.graph_client import GraphClient, get_app_token

FEEDBACK_SUBJECT = "Feedback received"


def build_feedback_message(content: str, recipient: str) -> dict:
    """Graph sendMail payload for a feedback submission."""
    return {
        "message": {
            "subject": FEEDBACK_SUBJECT,
            "body": {"contentType": "Text", "content": content},
            "toRecipients": [{"emailAddress": {"address": recipient}}],
        },
        "saveToSentItems": False,
    }


async def feedback_email(content: str) -> bool:
    """Mail a feedback submission to the configured recipient."""
    if not settings.mail_configured:
        logger.warning("Feedback mail not configured — dropping feedback ({} chars)", len(content))
        return False

    payload = build_feedback_message(content, settings.feedback_recipient)
    try:
        token = await get_app_token()
        if not token:
            logger.error("Feedback mail skipped — no Graph app token")
            return False
        result = await GraphClient(token).post_json(
            f"/users/{settings.mail_sender}/sendMail", payload
        )
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Feedback mail failed: {}", e)
        return False

    if isinstance(result, dict) and result.get("error"):
        logger.error("Feedback mail rejected by Graph: {}", result.get("detail"))
        return False

    logger.info("Feedback mail sent to {}", settings.feedback_recipient)
    return True
