# app/api/bookings.py
"""
Booking API

Endpoints:
- POST /bookings - Create a pending booking with a trainer
- PUT /bookings/{booking_id}/payment - Settle the booking's payment (verified with the processor)
- GET /bookings/my-bookings - Student's bookings
- GET /bookings/trainer-bookings - Trainer's bookings
- GET /bookings/{booking_id} - Single booking for one of its participants
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas import BookingCreate, BookingResponse, PaymentStatusUpdate
from app.services import booking_service
from app.services.errors import ServiceError, http_error
from app.utils.security import get_current_user, require_student, require_trainer

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    booking: BookingCreate,
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
):
    try:
        return booking_service.create_booking(
            db,
            student=current_user,
            trainer_id=booking.trainer_id,
            student_name=booking.student_name,
            payment_method=booking.payment_method,
            amount=booking.amount,
            notes=booking.notes,
        )
    except ServiceError as e:
        raise http_error(e)


@router.put("/{booking_id}/payment", response_model=BookingResponse)
def update_payment_status(
    booking_id: int,
    update: PaymentStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return booking_service.mark_payment_status(
            db,
            booking_id=booking_id,
            actor=current_user,
            payment_status=update.payment_status,
            payment_id=update.payment_id,
        )
    except ServiceError as e:
        raise http_error(e)


@router.get("/my-bookings", response_model=List[BookingResponse])
def my_bookings(
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
):
    return booking_service.list_for_student(db, current_user.id)


@router.get("/trainer-bookings", response_model=List[BookingResponse])
def trainer_bookings(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    return booking_service.list_for_trainer(db, current_user.id)


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return booking_service.get_booking_for_user(db, booking_id, current_user)
    except ServiceError as e:
        raise http_error(e)
