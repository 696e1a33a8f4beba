"""Shared fixtures for the EduTrack test suite."""
from datetime import date, datetime

import pytest

from edutrack import create_app, db
from edutrack.models.student import Student
from edutrack.models.user import User

TODAY = date(2024, 1, 10)
NOW = datetime(2024, 1, 10, 9, 30)


@pytest.fixture
def app():
    """Create test app."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


def make_teacher(email='teacher@example.com', name='Teacher A', school='Springfield High'):
    user = User(
        email=email,
        full_name=name,
        school_name=school
    )
    user.set_password('password123')
    return user.save()


def make_student(teacher, full_name='Jane Doe', student_number=None, class_name='Math101'):
    student = Student(
        teacher_id=teacher.id,
        full_name=full_name,
        student_number=student_number,
        class_name=class_name,
        school_name=teacher.school_name,
        is_active=True
    )
    return student.save()


@pytest.fixture
def teacher(app):
    return make_teacher()


@pytest.fixture
def other_teacher(app):
    return make_teacher(email='other@example.com', name='Teacher B', school='Shelbyville High')


@pytest.fixture
def auth_headers(client, teacher):
    response = client.post('/api/auth/login', json={
        'email': 'teacher@example.com',
        'password': 'password123'
    })
    token = response.get_json()['data']['access_token']
    return {'Authorization': f'Bearer {token}'}
