"""Session lifecycle: daily get-or-create, redemption and deactivation."""
import logging
from datetime import date, datetime
from typing import Optional, Tuple

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from edutrack import db
from edutrack.errors import ExpiredToken, InternalError, SessionNotFound, ValidationError
from edutrack.models.attendance_session import MANUAL_TOKEN_PREFIX, AttendanceSession
from edutrack.services.token_codec import TokenCodec
from edutrack.utils.decorators import translate_store_errors
from edutrack.utils.helpers import end_of_day

logger = logging.getLogger(__name__)

MAX_CLASS_NAME_LENGTH = 100


class SessionService:
    """Owns every mutation of attendance sessions."""

    @staticmethod
    def codec() -> TokenCodec:
        return TokenCodec.from_config(current_app.config)

    @staticmethod
    @translate_store_errors
    def create_or_get_daily_session(
        teacher_id: int,
        class_name: str,
        today: date,
        now: Optional[datetime] = None
    ) -> Tuple[AttendanceSession, bool]:
        """Return today's QR session for the teacher, creating it on first call.

        Returns ``(session, created)``. Repeated calls on the same day return
        the same session and token unchanged.
        """
        class_name = (class_name or '').strip()
        if not class_name:
            raise ValidationError("Class name is required")
        if len(class_name) > MAX_CLASS_NAME_LENGTH:
            raise ValidationError(f"Class name must be at most {MAX_CLASS_NAME_LENGTH} characters")

        now = now or datetime.now()
        codec = SessionService.codec()

        session = AttendanceSession.find_active(teacher_id, today)
        if session is not None:
            if session.is_manual_entry:
                SessionService._promote_manual_session(session, class_name, codec, now)
            return session, False

        session = AttendanceSession(
            teacher_id=teacher_id,
            class_name=class_name,
            session_date=today,
            is_active=True,
            expires_at=end_of_day(today)
        )
        try:
            db.session.add(session)
            db.session.flush()
            session.qr_code = codec.encode(session.id, teacher_id, class_name, today, now)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return SessionService._reread_winner(teacher_id, today), False

        logger.info("Created session %s for teacher %s on %s (%s)", session.id, teacher_id, today, class_name)
        return session, True

    @staticmethod
    @translate_store_errors
    def issue_manual_session(
        teacher_id: int,
        today: date,
        now: Optional[datetime] = None
    ) -> AttendanceSession:
        """Get-or-create today's session for manual marking (no QR token)."""
        now = now or datetime.now()

        session = AttendanceSession.find_active(teacher_id, today)
        if session is not None:
            return session

        session = AttendanceSession(
            teacher_id=teacher_id,
            class_name=current_app.config.get('MANUAL_SESSION_CLASS_NAME', 'Manual Entry'),
            session_date=today,
            qr_code=TokenCodec.manual_placeholder(now),
            is_active=True,
            expires_at=end_of_day(today)
        )
        try:
            db.session.add(session)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return SessionService._reread_winner(teacher_id, today)

        logger.info("Created manual entry session %s for teacher %s on %s", session.id, teacher_id, today)
        return session

    @staticmethod
    @translate_store_errors
    def resolve_redemption(
        token: str,
        today: date,
        now: Optional[datetime] = None
    ) -> AttendanceSession:
        """Validate a scanned token and return the session it redeems."""
        payload = SessionService.codec().decode(token)

        # Cheap filter first; the stored expiry below is the authoritative bound
        if payload.session_date != today:
            raise ExpiredToken("QR code expired")

        session = AttendanceSession.find_active(payload.teacher_id, today)
        if session is None:
            raise SessionNotFound("Attendance session not found")

        if session.is_expired(now):
            raise ExpiredToken("QR code expired")

        return session

    @staticmethod
    @translate_store_errors
    def get_session(session_id: int) -> AttendanceSession:
        session = AttendanceSession.get_by_id(session_id)
        if session is None:
            raise SessionNotFound("Session not found")
        return session

    @staticmethod
    @translate_store_errors
    def deactivate_session(
        teacher_id: int,
        session_id: int,
        now: Optional[datetime] = None
    ) -> AttendanceSession:
        """Administrative close. Terminal: a deactivated session never reopens."""
        session = AttendanceSession.query.filter_by(id=session_id, teacher_id=teacher_id).first()
        if session is None:
            raise SessionNotFound("Session not found")

        if session.is_active:
            session.is_active = False
            session.deactivated_at = now or datetime.now()
            db.session.commit()
            logger.info("Deactivated session %s for teacher %s", session.id, teacher_id)

        return session

    @staticmethod
    def _promote_manual_session(
        session: AttendanceSession,
        class_name: str,
        codec: TokenCodec,
        now: datetime
    ) -> None:
        token = codec.encode(session.id, session.teacher_id, class_name, session.session_date, now)

        # Only the first concurrent request replaces the placeholder
        promoted = AttendanceSession.query.filter(
            AttendanceSession.id == session.id,
            or_(
                AttendanceSession.qr_code.is_(None),
                AttendanceSession.qr_code.startswith(MANUAL_TOKEN_PREFIX, autoescape=True)
            )
        ).update({'class_name': class_name, 'qr_code': token}, synchronize_session=False)
        db.session.commit()
        db.session.refresh(session)

        if promoted:
            logger.info("Promoted manual session %s to QR session (%s)", session.id, class_name)
        else:
            logger.info("Manual session %s was already promoted; using its token", session.id)

    @staticmethod
    def _reread_winner(teacher_id: int, today: date) -> AttendanceSession:
        winner = AttendanceSession.find_active(teacher_id, today)
        if winner is None:
            raise InternalError()
        logger.info("Lost session creation race for teacher %s on %s; using session %s",
                    teacher_id, today, winner.id)
        return winner
