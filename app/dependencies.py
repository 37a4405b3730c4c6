"""
dependencies.py — Shared FastAPI Dependencies

Reusable dependency functions for resolving the caller. Routers import
from here instead of reading the session themselves.

Business Rules:
- get_user returns None if not logged in (non-throwing)
- A valid x-agent-key header authenticates as the agent service user
- Deactivated users resolve to None and their session is cleared
- get_user_id is the identity passed to the service layer (None = anonymous)

Called by: routers/general.py
Depends on: models, database, config
"""

from fastapi import Depends, Request
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db
from .models import User

AGENT_EMAIL = "agent@general.local"


def get_user(request: Request, db: Session) -> User | None:
    """Return current user from session or agent key, or None if not logged in."""
    user = None
    uid = request.session.get("user_id")
    if uid:
        try:
            user = db.get(User, uid)
        except (SQLAlchemyError, ValueError, TypeError):
            db.rollback()
        if user is None:
            logger.info("Session references unknown user {}; clearing", uid)
            request.session.clear()
    if user is None:
        agent_key = request.headers.get("x-agent-key")
        if agent_key and settings.agent_api_key and agent_key == settings.agent_api_key:
            user = db.query(User).filter_by(email=AGENT_EMAIL).first()
    if user is not None and not getattr(user, "is_active", True):
        request.session.clear()
        return None
    return user


def get_user_id(request: Request, db: Session = Depends(get_db)) -> int | None:
    """Dependency: caller's user id, or None for anonymous requests."""
    user = get_user(request, db)
    return user.id if user else None
