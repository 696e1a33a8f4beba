"""Error taxonomy for attendance operations.

Every core operation either returns a value or raises one of these. The
HTTP layer renders them through ``register_error_handlers`` in the
application factory.
"""
from typing import Any, Dict, Optional


class AttendanceError(Exception):
    """Base class for typed, user-facing failures."""

    status_code = 500
    code = 'internal_error'
    retryable = False
    default_message = 'Internal server error'

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            'error': True,
            'message': self.message,
            'code': self.code,
            'status_code': self.status_code
        }
        if self.retryable:
            payload['retryable'] = True
        return payload


class Unauthenticated(AttendanceError):
    status_code = 401
    code = 'unauthenticated'
    default_message = 'Authentication required'


class ValidationError(AttendanceError):
    status_code = 400
    code = 'validation_error'
    default_message = 'Invalid request'


class SessionNotFound(AttendanceError):
    status_code = 404
    code = 'session_not_found'
    default_message = 'Attendance session not found or expired'


class ExpiredToken(AttendanceError):
    status_code = 400
    code = 'expired_token'
    default_message = 'QR code expired'


class MalformedToken(AttendanceError):
    status_code = 400
    code = 'malformed_token'
    default_message = 'Invalid QR code'


class StudentNotFound(AttendanceError):
    status_code = 404
    code = 'student_not_found'
    default_message = 'Student not found'


class DuplicateSubmission(AttendanceError):
    status_code = 409
    code = 'duplicate_submission'
    default_message = 'Attendance already recorded for this student'


class TransientStoreError(AttendanceError):
    """Timeout or lost connection; the caller may retry."""

    status_code = 503
    code = 'transient_store_error'
    retryable = True
    default_message = 'Attendance store temporarily unavailable, please retry'


class InternalError(AttendanceError):
    pass
