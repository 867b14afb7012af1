# app/models/__init__.py
# Import models in dependency order
from .user import User, UserProfile, UserStats
from .session import Session
from .booking import Booking
from .review import Review

__all__ = ["User", "UserProfile", "UserStats", "Session", "Booking", "Review"]
