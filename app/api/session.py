# app/api/session.py
"""
Session Management API

Trainers group paid bookings into scheduled video sessions and move them
through scheduled -> active -> completed (or cancelled).
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.session import Session as SessionModel
from app.models.user import User
from app.schemas import SessionCreate, SessionResponse, SessionStatusUpdate
from app.services import session_service
from app.services.errors import ServiceError, http_error
from app.utils.security import get_current_user, require_trainer

router = APIRouter(prefix="/sessions", tags=["sessions"])


# ======================
# HELPER FUNCTIONS
# ======================
def serialize_session(session: SessionModel) -> dict:
    students = {}
    for booking in session.bookings:
        if booking.student_id not in students:
            students[booking.student_id] = {
                "id": booking.student_id,
                "name": booking.student.name if booking.student else booking.student_name,
            }
    return {
        "id": session.id,
        "trainer_id": session.trainer_id,
        "trainer": {"id": session.trainer.id, "name": session.trainer.name} if session.trainer else None,
        "title": session.title,
        "description": session.description,
        "meeting_link": session.meeting_link,
        "meeting_room_id": session.meeting_room_id,
        "status": session.status,
        "duration": session.duration,
        "max_students": session.max_students,
        "scheduled_date": session.scheduled_date,
        "language": session.language,
        "level": session.level,
        "students": list(students.values()),
        "bookings": session.booking_ids,
        "created_at": session.created_at,
        "updated_at": session.updated_at,
    }


# ======================
# CREATE
# ======================
@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_session(
    payload: SessionCreate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    try:
        session = session_service.create_session(
            db,
            trainer=current_user,
            booking_ids=payload.booking_ids,
            title=payload.title,
            description=payload.description,
            duration=payload.duration,
            language=payload.language,
            level=payload.level,
            scheduled_date=payload.scheduled_date,
            max_students=payload.max_students,
        )
    except ServiceError as e:
        raise http_error(e)
    return serialize_session(session)


# ======================
# STATUS
# ======================
@router.put("/{session_id}/status", response_model=SessionResponse)
def update_session_status(
    session_id: int,
    payload: SessionStatusUpdate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
):
    try:
        session = session_service.set_status(db, session_id, current_user, payload.status)
    except ServiceError as e:
        raise http_error(e)
    return serialize_session(session)


# ======================
# READ
# ======================
@router.get("/my-sessions", response_model=List[SessionResponse])
def my_sessions(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [serialize_session(s) for s in session_service.list_for_user(db, current_user)]


@router.get("/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        session = session_service.get_session_for_user(db, session_id, current_user)
    except ServiceError as e:
        raise http_error(e)
    return serialize_session(session)
