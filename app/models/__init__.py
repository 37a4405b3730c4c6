"""Database models — re-exports all models.

Import from here:  from app.models import User, NewsletterMember, ...
Or from submodules: from app.models.auth import User
"""

from .base import Base, UTCDateTime  # noqa: F401

# Auth & Users
from .auth import User  # noqa: F401

# Newsletter
from .newsletter import NewsletterMember  # noqa: F401

# Payments
from .payments import PaymentRequest  # noqa: F401
