# tests/test_session_scheduler.py
"""
Session scheduling: grouping paid bookings, meeting rooms, status machine.
"""

import pytest

from app.config import settings
from app.crud import user as user_crud
from app.models.booking import Booking
from app.models.session import Session as SessionModel
from app.services import session_service
from app.services.errors import (
    ForbiddenError,
    InvalidStateTransition,
    NotFoundError,
    ValidationError,
)


def schedule(db, trainer, bookings, **kwargs):
    kwargs.setdefault("title", "Spanish conversation")
    return session_service.create_session(db, trainer=trainer, booking_ids=[b.id for b in bookings], **kwargs)


# ======================
# CREATE
# ======================

class TestCreateSession:

    def test_attaches_paid_bookings(self, db_session, student, trainer, make_user, make_paid_booking):
        other_student = make_user("student")
        first = make_paid_booking(student, trainer)
        second = make_paid_booking(other_student, trainer)

        session = schedule(db_session, trainer, [first, second], language="Spanish", level="Intermediate")

        assert session.status == "scheduled"
        assert session.level == "intermediate"
        assert session.duration == settings.SESSION_DEFAULT_DURATION
        assert session.max_students == settings.SESSION_DEFAULT_MAX_STUDENTS
        assert session.booking_ids == [first.id, second.id]
        assert session.student_ids == [student.id, other_student.id]

        for booking in (first, second):
            db_session.refresh(booking)
            assert booking.session_id == session.id
            assert booking.status == "confirmed"

    def test_meeting_room_is_unique_and_linked(self, db_session, student, trainer, make_paid_booking):
        one = schedule(db_session, trainer, [make_paid_booking(student, trainer)])
        two = schedule(db_session, trainer, [make_paid_booking(student, trainer)])

        assert one.meeting_room_id != two.meeting_room_id
        assert one.meeting_room_id.startswith(f"{settings.MEETING_ROOM_PREFIX}-{one.id}-")
        assert one.meeting_link == f"{settings.MEETING_BASE_URL.rstrip('/')}/{one.meeting_room_id}"

    def test_trainer_and_students_session_counts(self, db_session, student, trainer, make_paid_booking):
        schedule(db_session, trainer, [make_paid_booking(student, trainer), make_paid_booking(student, trainer)])

        assert user_crud.get_user_stats(db_session, trainer.id).total_sessions == 1
        assert user_crud.get_user_stats(db_session, student.id).total_sessions == 1

    def test_foreign_booking_rejected_without_mutation(
        self, db_session, student, trainer, make_user, make_paid_booking
    ):
        other_trainer = make_user("trainer")
        mine = make_paid_booking(student, trainer)
        theirs = make_paid_booking(student, other_trainer)

        with pytest.raises(ForbiddenError):
            schedule(db_session, trainer, [mine, theirs])

        assert db_session.query(SessionModel).count() == 0
        for booking in (mine, theirs):
            db_session.refresh(booking)
            assert booking.session_id is None
            assert booking.status == "pending"
        assert user_crud.get_user_stats(db_session, trainer.id).total_sessions == 0

    def test_unpaid_booking_rejected(self, db_session, student, trainer, make_paid_booking):
        paid = make_paid_booking(student, trainer)
        unpaid = make_paid_booking(student, trainer)
        unpaid.payment_status = "pending"
        unpaid.payment_id = None
        db_session.commit()

        with pytest.raises(ValidationError):
            schedule(db_session, trainer, [paid, unpaid])

        db_session.refresh(paid)
        assert paid.session_id is None

    def test_booking_cannot_join_two_sessions(self, db_session, student, trainer, make_paid_booking):
        booking = make_paid_booking(student, trainer)
        schedule(db_session, trainer, [booking])

        with pytest.raises(ValidationError):
            schedule(db_session, trainer, [booking])
        assert db_session.query(SessionModel).count() == 1

    def test_missing_booking(self, db_session, student, trainer, make_paid_booking):
        booking = make_paid_booking(student, trainer)
        with pytest.raises(NotFoundError):
            session_service.create_session(db_session, trainer, [booking.id, 999], title="Lesson")

    def test_capacity_counts_distinct_students(self, db_session, trainer, make_user, make_paid_booking):
        students = [make_user("student") for _ in range(3)]
        bookings = [make_paid_booking(s, trainer) for s in students]

        with pytest.raises(ValidationError):
            schedule(db_session, trainer, bookings, max_students=2)

        # Two bookings from one student take a single seat.
        repeat = make_paid_booking(students[0], trainer)
        session = schedule(db_session, trainer, [bookings[0], repeat], max_students=1)
        assert session.student_ids == [students[0].id]

    def test_duplicate_ids_are_collapsed(self, db_session, student, trainer, make_paid_booking):
        booking = make_paid_booking(student, trainer)
        session = session_service.create_session(db_session, trainer, [booking.id, booking.id], title="Lesson")
        assert session.booking_ids == [booking.id]

    @pytest.mark.parametrize("kwargs", [
        {"title": "  "},
        {"duration": 0},
        {"level": "expert"},
        {"max_students": 0},
    ])
    def test_field_validation(self, db_session, student, trainer, make_paid_booking, kwargs):
        booking = make_paid_booking(student, trainer)
        with pytest.raises(ValidationError):
            schedule(db_session, trainer, [booking], **kwargs)

    def test_empty_booking_list(self, db_session, trainer):
        with pytest.raises(ValidationError):
            session_service.create_session(db_session, trainer, [], title="Lesson")

    def test_students_cannot_create_sessions(self, db_session, student, trainer, make_paid_booking):
        booking = make_paid_booking(student, trainer)
        with pytest.raises(ForbiddenError):
            schedule(db_session, student, [booking])


# ======================
# STATUS
# ======================

@pytest.fixture
def scheduled(db_session, student, trainer, make_paid_booking):
    return schedule(db_session, trainer, [make_paid_booking(student, trainer)])


class TestSessionStatus:

    def test_full_lifecycle(self, db_session, student, trainer, scheduled):
        session = session_service.set_status(db_session, scheduled.id, trainer, "active")
        assert session.status == "active"
        assert session.bookings[0].status == "confirmed"

        session = session_service.set_status(db_session, scheduled.id, trainer, "completed")
        assert session.status == "completed"
        assert session.bookings[0].status == "completed"
        assert user_crud.get_user_stats(db_session, trainer.id).completed_sessions == 1
        assert user_crud.get_user_stats(db_session, student.id).completed_sessions == 1

    def test_cancel_from_scheduled(self, db_session, trainer, scheduled):
        session = session_service.set_status(db_session, scheduled.id, trainer, "cancelled")
        assert session.status == "cancelled"
        assert session.bookings[0].status == "cancelled"

    @pytest.mark.parametrize("path", [
        ["completed"],
        ["scheduled"],
        ["active", "scheduled"],
        ["active", "completed", "cancelled"],
        ["cancelled", "active"],
    ])
    def test_disallowed_transitions(self, db_session, trainer, scheduled, path):
        *allowed, rejected = path
        for step in allowed:
            session_service.set_status(db_session, scheduled.id, trainer, step)

        before = db_session.get(SessionModel, scheduled.id).status
        with pytest.raises(InvalidStateTransition):
            session_service.set_status(db_session, scheduled.id, trainer, rejected)
        assert db_session.get(SessionModel, scheduled.id).status == before

    def test_unknown_status(self, db_session, trainer, scheduled):
        with pytest.raises(ValidationError):
            session_service.set_status(db_session, scheduled.id, trainer, "paused")

    def test_only_owner_changes_status(self, db_session, make_user, scheduled):
        with pytest.raises(ForbiddenError):
            session_service.set_status(db_session, scheduled.id, make_user("trainer"), "active")

    def test_missing_session(self, db_session, trainer):
        with pytest.raises(NotFoundError):
            session_service.set_status(db_session, 404, trainer, "active")


# ======================
# READ
# ======================

class TestSessionReads:

    def test_list_for_trainer_and_student(self, db_session, student, trainer, make_user, make_paid_booking, scheduled):
        outsider = make_user("student")
        other_trainer = make_user("trainer")
        schedule(db_session, other_trainer, [make_paid_booking(outsider, other_trainer)])

        assert [s.id for s in session_service.list_for_user(db_session, trainer)] == [scheduled.id]
        assert [s.id for s in session_service.list_for_user(db_session, student)] == [scheduled.id]
        assert scheduled.id not in [s.id for s in session_service.list_for_user(db_session, outsider)]

    def test_get_session_participants_only(self, db_session, student, trainer, make_user, scheduled):
        assert session_service.get_session_for_user(db_session, scheduled.id, student).id == scheduled.id
        assert session_service.get_session_for_user(db_session, scheduled.id, trainer).id == scheduled.id
        with pytest.raises(ForbiddenError):
            session_service.get_session_for_user(db_session, scheduled.id, make_user("student"))


# ======================
# ATOMIC ATTACHMENT
# ======================

def test_booking_attached_mid_creation_rolls_everything_back(
    db_session, student, trainer, make_user, make_paid_booking, monkeypatch
):
    other_student = make_user("student")
    first = make_paid_booking(student, trainer)
    second = make_paid_booking(other_student, trainer)
    first_id, second_id = first.id, second.id
    real_generate = session_service.generate_meeting_room

    def attach_second_elsewhere(session_id):
        # Another request claims the second booking after validation passed.
        db_session.query(Booking).filter(Booking.id == second_id).update(
            {Booking.session_id: session_id}, synchronize_session=False,
        )
        return real_generate(session_id)

    monkeypatch.setattr(session_service, "generate_meeting_room", attach_second_elsewhere)

    with pytest.raises(InvalidStateTransition):
        schedule(db_session, trainer, [first, second])

    assert db_session.query(SessionModel).count() == 0
    assert db_session.get(Booking, first_id).session_id is None
    assert db_session.get(Booking, first_id).status == "pending"
    for user in (trainer, student, other_student):
        assert user_crud.get_user_stats(db_session, user.id).total_sessions == 0
