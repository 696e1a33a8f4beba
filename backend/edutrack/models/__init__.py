"""Models package with all models."""
from .base import BaseModel
from .user import User
from .student import Student
from .attendance_session import AttendanceSession, MANUAL_TOKEN_PREFIX
from .attendance import AttendanceRecord, AttendanceStatus, AttendanceMethod

__all__ = [
    'BaseModel', 'User', 'Student',
    'AttendanceSession', 'MANUAL_TOKEN_PREFIX',
    'AttendanceRecord', 'AttendanceStatus', 'AttendanceMethod'
]
