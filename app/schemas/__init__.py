# app/schemas/__init__.py

# User schemas
from .user import (
    CamelModel,
    User,
    UserDisplay,
    UserProfile,
    UserProfileUpdate,
    UserStats,
    TrainerSummary,
)

# Auth schemas
from .auth import Token, TokenData, LoginRequest, RegisterRequest

# Workflow schemas
from .booking import BookingCreate, BookingResponse, PaymentStatusUpdate
from .payment import PaymentIntentCreate, PaymentIntentResponse, FakePaymentRequest, FakePaymentResponse
from .session import SessionCreate, SessionResponse, SessionStatusUpdate
from .review import ReviewCreate, ReviewResponse, TrainerRatingSummary

__all__ = [
    "CamelModel",
    "User",
    "UserDisplay",
    "UserProfile",
    "UserProfileUpdate",
    "UserStats",
    "TrainerSummary",
    "Token",
    "TokenData",
    "LoginRequest",
    "RegisterRequest",
    "BookingCreate",
    "BookingResponse",
    "PaymentStatusUpdate",
    "PaymentIntentCreate",
    "PaymentIntentResponse",
    "FakePaymentRequest",
    "FakePaymentResponse",
    "SessionCreate",
    "SessionResponse",
    "SessionStatusUpdate",
    "ReviewCreate",
    "ReviewResponse",
    "TrainerRatingSummary",
]
