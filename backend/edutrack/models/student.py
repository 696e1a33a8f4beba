"""Student roster entries owned by a teacher."""
from typing import Optional

from edutrack import db
from edutrack.models.base import BaseModel


class Student(BaseModel):
    """Student model. Soft-deleted through ``is_active``, never removed."""

    __tablename__ = 'students'

    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    full_name = db.Column(db.String(255), nullable=False)
    student_number = db.Column(db.String(50), nullable=True)
    class_name = db.Column(db.String(100), nullable=True)
    school_name = db.Column(db.String(255), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Relationships
    attendance_records = db.relationship('AttendanceRecord', backref='student', lazy='dynamic')

    # (teacher, full_name) is the merge key for self-service lookups; not unique in storage
    __table_args__ = (
        db.Index('ix_students_teacher_name', 'teacher_id', 'full_name'),
    )

    @classmethod
    def active_for_teacher(cls, teacher_id: int):
        return cls.query.filter_by(teacher_id=teacher_id, is_active=True)

    @classmethod
    def find_active(cls, teacher_id: int, student_id: int) -> Optional['Student']:
        """Active student owned by ``teacher_id``."""
        return cls.active_for_teacher(teacher_id).filter_by(id=student_id).first()

    @classmethod
    def find_by_name(cls, teacher_id: int, full_name: str) -> Optional['Student']:
        """Oldest active student of ``teacher_id`` with exactly this name."""
        return cls.active_for_teacher(teacher_id).filter_by(
            full_name=full_name
        ).order_by(cls.id).first()

    def display_fields(self) -> dict:
        return {
            'full_name': self.full_name,
            'student_number': self.student_number
        }

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'id': self.id,
            'full_name': self.full_name,
            'student_number': self.student_number,
            'class_name': self.class_name,
            'school_name': self.school_name,
            'is_active': self.is_active
        }
