"""Attendance submissions from the self-service and manual paths.

Self-service submissions are single-shot: a second submission for the same
(session, student) pair is rejected. Manual entries are authoritative and
overwrite the existing record in place.
"""
import logging
from datetime import date, datetime
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from edutrack import db
from edutrack.errors import DuplicateSubmission, InternalError, SessionNotFound, StudentNotFound, ValidationError
from edutrack.models.attendance import AttendanceMethod, AttendanceRecord, AttendanceStatus
from edutrack.models.attendance_session import AttendanceSession
from edutrack.models.student import Student
from edutrack.models.user import User
from edutrack.services.session_service import SessionService
from edutrack.utils.decorators import translate_store_errors

logger = logging.getLogger(__name__)


class AttendanceService:
    """Creates and reconciles attendance records."""

    @staticmethod
    @translate_store_errors
    def submit_self_service(
        session_id: int,
        student_id: Optional[int],
        full_name: str,
        student_number: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
        now: Optional[datetime] = None
    ) -> AttendanceRecord:
        now = now or datetime.now()
        full_name = (full_name or '').strip()
        if not full_name:
            raise ValidationError("Session ID and student name are required")

        session = AttendanceSession.get_by_id(session_id)
        if session is None or not session.is_open(now):
            raise SessionNotFound("Attendance session not found or expired")

        if student_id is not None:
            student = Student.find_active(session.teacher_id, student_id)
            if student is None:
                raise StudentNotFound()
        else:
            student = Student.find_by_name(session.teacher_id, full_name)
            if student is None:
                student = AttendanceService._register_student(session, full_name, student_number)

        if AttendanceRecord.find_for(session.id, student.id) is not None:
            db.session.rollback()
            raise DuplicateSubmission()

        record = AttendanceRecord(
            session_id=session.id,
            student=student,
            status=status or AttendanceStatus.PRESENT,
            method=AttendanceMethod.QR_SCAN,
            submitted_at=now
        )
        try:
            db.session.add(record)
            db.session.commit()
        except IntegrityError:
            # A concurrent submission for the same pair committed first
            db.session.rollback()
            logger.info("Rejected concurrent duplicate submission for session %s", session_id)
            raise DuplicateSubmission()

        logger.info("Recorded self-service attendance %s for student %s in session %s",
                    record.id, record.student_id, session.id)
        return record

    @staticmethod
    @translate_store_errors
    def submit_manual(
        teacher_id: int,
        student_id: int,
        status: AttendanceStatus,
        reason: Optional[str],
        notes: Optional[str],
        today: date,
        now: Optional[datetime] = None
    ) -> AttendanceRecord:
        """Create or overwrite today's record for a student of the teacher.

        Absent ``reason``/``notes`` clear any previous value.
        """
        now = now or datetime.now()
        session = SessionService.issue_manual_session(teacher_id, today, now)

        student = Student.find_active(teacher_id, student_id)
        if student is None:
            raise StudentNotFound()

        record = AttendanceRecord.find_for(session.id, student.id)
        if record is not None:
            return AttendanceService._overwrite(record, status, reason, notes, now)

        record = AttendanceRecord(
            session_id=session.id,
            student_id=student.id,
            status=status,
            method=AttendanceMethod.MANUAL,
            reason=reason,
            notes=notes,
            submitted_at=now
        )
        try:
            db.session.add(record)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            existing = AttendanceRecord.find_for(session.id, student.id)
            if existing is None:
                raise InternalError()
            return AttendanceService._overwrite(existing, status, reason, notes, now)

        logger.info("Recorded manual attendance %s for student %s in session %s",
                    record.id, student.id, session.id)
        return record

    @staticmethod
    @translate_store_errors
    def todays_records(teacher_id: int, today: date) -> List[AttendanceRecord]:
        """Records in the teacher's sessions for ``today``, newest first."""
        return AttendanceRecord.query.join(AttendanceSession).filter(
            AttendanceSession.teacher_id == teacher_id,
            AttendanceSession.session_date == today
        ).order_by(AttendanceRecord.submitted_at.desc(), AttendanceRecord.id.desc()).all()

    @staticmethod
    @translate_store_errors
    def session_roster(session_id: int):
        """The session and the active students of its teacher, by name."""
        session = SessionService.get_session(session_id)
        students = Student.active_for_teacher(session.teacher_id).order_by(Student.full_name).all()
        return session, students

    @staticmethod
    def _register_student(session: AttendanceSession, full_name: str,
                          student_number: Optional[str]) -> Student:
        teacher = db.session.get(User, session.teacher_id)
        school_name = (teacher.school_name if teacher else None) or \
            current_app.config.get('DEFAULT_SCHOOL_NAME', 'Unknown')

        student = Student(
            teacher_id=session.teacher_id,
            full_name=full_name,
            student_number=(student_number or '').strip() or None,
            class_name=session.class_name,
            school_name=school_name,
            is_active=True
        )
        db.session.add(student)
        db.session.flush()
        logger.info("Registered student %s (%s) for teacher %s from self-service",
                    student.id, full_name, session.teacher_id)
        return student

    @staticmethod
    def _overwrite(record: AttendanceRecord, status: AttendanceStatus, reason: Optional[str],
                   notes: Optional[str], now: datetime) -> AttendanceRecord:
        record.status = status
        record.reason = reason
        record.notes = notes
        record.submitted_at = now
        db.session.commit()
        logger.info("Overwrote attendance %s for student %s in session %s",
                    record.id, record.student_id, record.session_id)
        return record
