"""Attendance API: sessions, QR redemption, self-service and manual marking."""
from flask import Blueprint, Response, current_app, request

from edutrack import limiter
from edutrack.errors import SessionNotFound
from edutrack.models.attendance import AttendanceStatus
from edutrack.services.attendance_service import AttendanceService
from edutrack.services.qr_service import QRService
from edutrack.services.session_service import SessionService
from edutrack.utils.decorators import teacher_required
from edutrack.utils.helpers import local_now, success_response
from edutrack.utils.validators import Validator

attendance_bp = Blueprint('attendance', __name__)


def _scan_limit():
    return current_app.config.get('SCAN_RATE_LIMIT', '30 per minute')


def _submit_limit():
    return current_app.config.get('SUBMIT_RATE_LIMIT', '20 per minute')


@attendance_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Attendance service is running')


@attendance_bp.route('/sessions', methods=['POST'])
@teacher_required
def create_session(teacher_id):
    """Generate (or return) today's QR attendance session."""
    data = Validator.require_json(request.get_json(silent=True))
    Validator.require_fields(data, ['class_name'], message='Class name is required')

    now = local_now()
    session, created = SessionService.create_or_get_daily_session(
        teacher_id, data['class_name'], now.date(), now
    )

    return success_response(
        data={
            'session': session.to_dict(),
            'qr_data': session.qr_code
        },
        message='Attendance session created successfully' if created else 'Session already exists for today',
        status_code=201 if created else 200
    )


@attendance_bp.route('/sessions/<int:session_id>/qr-code', methods=['GET'])
def session_qr_code(session_id):
    """Render the session's redemption token as a PNG."""
    session = SessionService.get_session(session_id)
    if session.is_manual_entry:
        raise SessionNotFound("Session has no QR code")

    png = QRService.render_png(
        session.qr_code,
        box_size=current_app.config.get('QR_BOX_SIZE', 10),
        border=current_app.config.get('QR_BORDER', 2)
    )
    response = Response(png, mimetype='image/png')
    response.headers['Cache-Control'] = 'no-cache, no-store, must-revalidate'
    return response


@attendance_bp.route('/sessions/<int:session_id>/deactivate', methods=['POST'])
@teacher_required
def deactivate_session(session_id, teacher_id):
    """Close a session before its natural expiry."""
    session = SessionService.deactivate_session(teacher_id, session_id, local_now())
    return success_response(data={'session': session.to_dict()}, message='Session deactivated')


@attendance_bp.route('/scan', methods=['POST'])
@limiter.limit(_scan_limit)
def scan():
    """Validate scanned QR data and point the student at the attendance form."""
    data = Validator.require_json(request.get_json(silent=True))
    Validator.require_fields(data, ['qr_data'], message='QR data required')

    now = local_now()
    session = SessionService.resolve_redemption(data['qr_data'], now.date(), now)

    form_path = current_app.config.get('STUDENT_FORM_PATH', '/student-attendance.html')
    redirect_url = f"{request.host_url.rstrip('/')}{form_path}?session={session.id}"

    return success_response(
        data={
            'redirect_url': redirect_url,
            'session_id': session.id,
            'session': session.summary()
        },
        message='QR code validated successfully'
    )


@attendance_bp.route('/sessions/<int:session_id>/students', methods=['GET'])
def session_students(session_id):
    """Students of the session's teacher, for the self-service form."""
    session, students = AttendanceService.session_roster(session_id)
    return success_response(data={
        'session': session.summary(),
        'students': [student.to_dict() for student in students]
    })


@attendance_bp.route('/submit', methods=['POST'])
@limiter.limit(_submit_limit)
def submit():
    """Self-service attendance submission (unauthenticated)."""
    data = Validator.require_json(request.get_json(silent=True))
    Validator.require_fields(data, ['session_id', 'full_name'],
                             message='Session ID and student name are required')

    record = AttendanceService.submit_self_service(
        session_id=Validator.parse_int(data['session_id'], 'session_id'),
        student_id=Validator.parse_int(data.get('student_id'), 'student_id'),
        full_name=str(data['full_name']),
        student_number=Validator.clean_optional(data.get('student_number')),
        status=Validator.parse_status(data.get('status'), default=AttendanceStatus.PRESENT),
        now=local_now()
    )

    return success_response(
        data={'attendance': record.to_dict()},
        message='Attendance recorded successfully',
        status_code=201
    )


@attendance_bp.route('/manual', methods=['POST'])
@teacher_required
def manual(teacher_id):
    """Teacher marks (or corrects) a student's attendance for today."""
    data = Validator.require_json(request.get_json(silent=True))
    Validator.require_fields(data, ['student_id', 'status'], message='Student ID and status required')

    now = local_now()
    record = AttendanceService.submit_manual(
        teacher_id=teacher_id,
        student_id=Validator.parse_int(data['student_id'], 'student_id'),
        status=Validator.parse_status(data['status']),
        reason=Validator.clean_optional(data.get('reason')),
        notes=Validator.clean_optional(data.get('notes')),
        today=now.date(),
        now=now
    )

    return success_response(data={'attendance': record.to_dict()}, message='Attendance recorded successfully')


@attendance_bp.route('/today', methods=['GET'])
@teacher_required
def today(teacher_id):
    """Today's records across the caller's sessions."""
    records = AttendanceService.todays_records(teacher_id, local_now().date())
    return success_response(data={
        'attendance': [record.to_dict(include_session=True) for record in records]
    })
