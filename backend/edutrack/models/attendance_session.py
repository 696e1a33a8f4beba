"""Daily attendance session with its redemption token."""
from datetime import date, datetime
from typing import Optional

from edutrack import db
from edutrack.models.base import BaseModel

MANUAL_TOKEN_PREFIX = 'MANUAL_'


class AttendanceSession(BaseModel):
    """Teacher-scoped, date-scoped attendance window.

    At most one row per (teacher_id, session_date) may be active. The
    partial unique index is the store-side guard for concurrent
    first-requests of the day.
    """

    __tablename__ = 'attendance_sessions'

    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    class_name = db.Column(db.String(100), nullable=False)
    session_date = db.Column(db.Date, nullable=False, index=True)
    qr_code = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    deactivated_at = db.Column(db.DateTime, nullable=True)

    # Relationships
    records = db.relationship('AttendanceRecord', backref='session', lazy='dynamic')

    __table_args__ = (
        db.Index(
            'uq_active_session_per_teacher_day',
            'teacher_id', 'session_date',
            unique=True,
            sqlite_where=db.text('is_active = 1'),
            postgresql_where=db.text('is_active'),
        ),
    )

    @classmethod
    def find_active(cls, teacher_id: int, session_date: date) -> Optional['AttendanceSession']:
        """The active session of ``teacher_id`` for ``session_date``, if any."""
        return cls.query.filter_by(
            teacher_id=teacher_id,
            session_date=session_date,
            is_active=True
        ).first()

    @property
    def is_manual_entry(self) -> bool:
        """True while the session only carries a placeholder token."""
        return not self.qr_code or self.qr_code.startswith(MANUAL_TOKEN_PREFIX)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check if session is expired."""
        return (now or datetime.now()) > self.expires_at

    def is_open(self, now: Optional[datetime] = None) -> bool:
        return self.is_active and not self.is_expired(now)

    def summary(self) -> dict:
        return {
            'class_name': self.class_name,
            'session_date': self.session_date.isoformat()
        }

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'id': self.id,
            'teacher_id': self.teacher_id,
            'class_name': self.class_name,
            'session_date': self.session_date.isoformat(),
            'qr_code': self.qr_code,
            'is_active': self.is_active,
            'expires_at': self.expires_at.isoformat(),
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
