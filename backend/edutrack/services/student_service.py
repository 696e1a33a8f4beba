"""Student roster management scoped to the owning teacher."""
import logging
from typing import Any, Dict, List, Optional

from flask import current_app

from edutrack import db
from edutrack.errors import StudentNotFound, ValidationError
from edutrack.models.student import Student
from edutrack.models.user import User
from edutrack.utils.decorators import translate_store_errors
from edutrack.utils.validators import Validator

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('full_name', 'student_number', 'class_name', 'is_active')


class StudentService:
    """Service for managing students."""

    @staticmethod
    @translate_store_errors
    def list_students(teacher_id: int) -> List[Student]:
        return Student.active_for_teacher(teacher_id).order_by(Student.full_name).all()

    @staticmethod
    @translate_store_errors
    def get_student(teacher_id: int, student_id: int) -> Student:
        student = Student.query.filter_by(id=student_id, teacher_id=teacher_id).first()
        if student is None:
            raise StudentNotFound()
        return student

    @staticmethod
    @translate_store_errors
    def create_student(
        teacher_id: int,
        full_name: str,
        student_number: Optional[str] = None,
        class_name: Optional[str] = None
    ) -> Student:
        """Create a student; the school label comes from the teacher profile."""
        full_name = (full_name or '').strip()
        if not full_name:
            raise ValidationError("Student full name is required")

        teacher = db.session.get(User, teacher_id)
        school_name = (teacher.school_name if teacher else None) or \
            current_app.config.get('DEFAULT_SCHOOL_NAME', 'Unknown')

        student = Student(
            teacher_id=teacher_id,
            full_name=full_name,
            student_number=Validator.clean_optional(student_number),
            class_name=Validator.clean_optional(class_name),
            school_name=school_name,
            is_active=True
        )
        student.save()
        logger.info("Teacher %s added student %s", teacher_id, student.id)
        return student

    @staticmethod
    @translate_store_errors
    def update_student(teacher_id: int, student_id: int, changes: Dict[str, Any]) -> Student:
        """Apply the supplied fields only; absent fields are left untouched."""
        student = StudentService.get_student(teacher_id, student_id)

        updates = {}
        for field in UPDATABLE_FIELDS:
            if field not in changes:
                continue
            value = changes[field]
            if field == 'full_name':
                value = (value or '').strip()
                if not value:
                    raise ValidationError("Student full name cannot be empty")
            elif field == 'is_active':
                if not isinstance(value, bool):
                    raise ValidationError("is_active must be a boolean")
            else:
                value = Validator.clean_optional(value)
            updates[field] = value

        if updates:
            student.update(**updates)
        return student

    @staticmethod
    @translate_store_errors
    def deactivate_student(teacher_id: int, student_id: int) -> Student:
        """Soft delete; records keep pointing at the student."""
        student = StudentService.get_student(teacher_id, student_id)
        if student.is_active:
            student.update(is_active=False)
            logger.info("Teacher %s deactivated student %s", teacher_id, student.id)
        return student
