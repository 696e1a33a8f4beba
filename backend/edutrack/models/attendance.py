"""Attendance records and their enumerations."""
import enum
from datetime import datetime
from typing import Optional

from edutrack import db
from edutrack.models.base import BaseModel


class AttendanceStatus(enum.Enum):
    """Closed set of attendance statuses."""
    PRESENT = 'present'
    ABSENT = 'absent'
    LATE = 'late'
    EXCUSED = 'excused'


class AttendanceMethod(enum.Enum):
    """How a record entered the store."""
    QR_SCAN = 'qr_scan'
    MANUAL = 'manual'


class AttendanceRecord(BaseModel):
    """One student's attendance in one session."""

    __tablename__ = 'attendance_records'

    session_id = db.Column(db.Integer, db.ForeignKey('attendance_sessions.id'), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False, index=True)
    status = db.Column(db.Enum(AttendanceStatus), nullable=False, default=AttendanceStatus.PRESENT)
    method = db.Column(db.Enum(AttendanceMethod), nullable=False)

    # Only meaningful for manual entries
    reason = db.Column(db.Text, nullable=True)
    notes = db.Column(db.Text, nullable=True)

    submitted_at = db.Column(db.DateTime, default=datetime.now, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('session_id', 'student_id', name='uq_record_per_session_student'),
    )

    @classmethod
    def find_for(cls, session_id: int, student_id: int) -> Optional['AttendanceRecord']:
        return cls.query.filter_by(session_id=session_id, student_id=student_id).first()

    def to_dict(self, include_session: bool = False):
        """Convert to dictionary joined with student display fields."""
        data = {
            'id': self.id,
            'session_id': self.session_id,
            'student_id': self.student_id,
            'status': self.status.value,
            'method': self.method.value,
            'reason': self.reason,
            'notes': self.notes,
            'submitted_at': self.submitted_at.isoformat(),
            'students': self.student.display_fields() if self.student else None
        }
        if include_session and self.session is not None:
            data['attendance_sessions'] = self.session.summary()
        return data

    def __repr__(self):
        return f'<AttendanceRecord {self.session_id}-{self.student_id}>'
