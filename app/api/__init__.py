# app/api/__init__.py
# This file makes the api directory a Python package.

from . import auth
from . import bookings
from . import payments
from . import review
from . import session
from . import users

__all__ = [
    "auth",
    "users",
    "payments",
    "bookings",
    "session",
    "review",
]
