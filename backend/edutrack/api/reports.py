"""Reports API: daily statistics, trends and grouped reports."""
from flask import Blueprint, request

from edutrack.services.report_service import ReportService
from edutrack.utils.decorators import teacher_required
from edutrack.utils.helpers import local_today, success_response
from edutrack.utils.validators import Validator

reports_bp = Blueprint('reports', __name__)


@reports_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Reports service is running')


@reports_bp.route('/stats', methods=['GET'])
@teacher_required
def stats(teacher_id):
    period = request.args.get('period', 'week')
    return success_response(data=ReportService.stats(teacher_id, local_today(), period))


@reports_bp.route('/daily', methods=['GET'])
@teacher_required
def daily(teacher_id):
    day = Validator.parse_date(request.args.get('date')) or local_today()
    return success_response(data={'stats': ReportService.daily_stats(teacher_id, day)})


@reports_bp.route('/report', methods=['GET'])
@teacher_required
def report(teacher_id):
    """Attendance report grouped by date or by student."""
    student_id = request.args.get('student_id')
    class_name = request.args.get('class_name')

    result = ReportService.report(
        teacher_id,
        start_date=Validator.parse_date(request.args.get('start_date'), 'start_date'),
        end_date=Validator.parse_date(request.args.get('end_date'), 'end_date'),
        student_id=None if student_id in (None, '', 'all') else Validator.parse_int(student_id, 'student_id'),
        class_name=None if class_name in (None, '', 'all') else class_name,
        group_by=request.args.get('group_by', 'date')
    )
    return success_response(data={'report': result})
