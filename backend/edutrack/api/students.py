"""Student roster API, scoped to the signed-in teacher."""
from flask import Blueprint, request

from edutrack.services.student_service import StudentService
from edutrack.utils.decorators import teacher_required
from edutrack.utils.helpers import success_response
from edutrack.utils.validators import Validator

students_bp = Blueprint('students', __name__)


@students_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Students service is running')


@students_bp.route('/', methods=['GET'])
@teacher_required
def get_students(teacher_id):
    """Active students of the caller, sorted by name."""
    students = StudentService.list_students(teacher_id)
    return success_response(data={'students': [s.to_dict() for s in students]})


@students_bp.route('/<int:student_id>', methods=['GET'])
@teacher_required
def get_student(student_id, teacher_id):
    """Get single student details."""
    student = StudentService.get_student(teacher_id, student_id)
    return success_response(data={'student': student.to_dict()})


@students_bp.route('/', methods=['POST'])
@teacher_required
def create_student(teacher_id):
    """Create single student."""
    data = Validator.require_json(request.get_json(silent=True))
    Validator.require_fields(data, ['full_name'], message='Student full name is required')

    student = StudentService.create_student(
        teacher_id,
        full_name=str(data['full_name']),
        student_number=data.get('student_number'),
        class_name=data.get('class_name')
    )
    return success_response(data={'student': student.to_dict()},
                            message='Student added successfully', status_code=201)


@students_bp.route('/<int:student_id>', methods=['PUT'])
@teacher_required
def update_student(student_id, teacher_id):
    """Update the supplied student fields."""
    data = Validator.require_json(request.get_json(silent=True))
    student = StudentService.update_student(teacher_id, student_id, data)
    return success_response(data={'student': student.to_dict()}, message='Student updated successfully')


@students_bp.route('/<int:student_id>', methods=['DELETE'])
@teacher_required
def delete_student(student_id, teacher_id):
    """Soft delete."""
    StudentService.deactivate_student(teacher_id, student_id)
    return success_response(message='Student deleted successfully')
