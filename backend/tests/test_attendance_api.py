"""End-to-end attendance flow through the HTTP API."""
import json
from datetime import timedelta

from sqlalchemy.exc import OperationalError

from edutrack.models.attendance import AttendanceRecord
from edutrack.models.attendance_session import AttendanceSession
from edutrack.services.token_codec import TokenCodec
from edutrack.utils.helpers import local_now, local_today
from tests.conftest import make_student


def create_session(client, headers, class_name='Math101'):
    response = client.post('/api/attendance/sessions', headers=headers, json={'class_name': class_name})
    return response, json.loads(response.data)


def test_create_session_is_idempotent(client, auth_headers):
    first, first_data = create_session(client, auth_headers)
    second, second_data = create_session(client, auth_headers)

    assert first.status_code == 201
    assert second.status_code == 200
    assert second_data['message'] == 'Session already exists for today'
    assert first_data['data']['session']['id'] == second_data['data']['session']['id']
    assert first_data['data']['qr_data'] == second_data['data']['qr_data']


def test_create_session_requires_class_name(client, auth_headers):
    response = client.post('/api/attendance/sessions', headers=auth_headers, json={})

    assert response.status_code == 400
    assert json.loads(response.data)['message'] == 'Class name is required'


def test_qr_code_image(client, auth_headers):
    _, data = create_session(client, auth_headers)
    session_id = data['data']['session']['id']

    response = client.get(f'/api/attendance/sessions/{session_id}/qr-code')

    assert response.status_code == 200
    assert response.mimetype == 'image/png'
    assert response.data[:8] == b'\x89PNG\r\n\x1a\n'
    assert 'no-store' in response.headers['Cache-Control']


def test_manual_session_has_no_qr_image(client, auth_headers, teacher):
    student = make_student(teacher)
    client.post('/api/attendance/manual', headers=auth_headers, json={'student_id': student.id, 'status': 'present'})
    session = AttendanceSession.query.filter_by(teacher_id=teacher.id).one()

    response = client.get(f'/api/attendance/sessions/{session.id}/qr-code')

    assert response.status_code == 404


def test_scan_returns_student_form_url(client, auth_headers):
    _, data = create_session(client, auth_headers)
    session_id = data['data']['session']['id']

    response = client.post('/api/attendance/scan', json={'qr_data': data['data']['qr_data']})

    assert response.status_code == 200
    body = json.loads(response.data)['data']
    assert body['redirect_url'] == f'http://localhost/student-attendance.html?session={session_id}'
    assert body['session'] == {'class_name': 'Math101', 'session_date': local_today().isoformat()}


def test_scan_yesterdays_token_is_expired(client, auth_headers, teacher):
    _, data = create_session(client, auth_headers)
    stale = TokenCodec().encode(
        data['data']['session']['id'], teacher.id, 'Math101',
        local_today() - timedelta(days=1), local_now() - timedelta(days=1)
    )

    response = client.post('/api/attendance/scan', json={'qr_data': stale})

    assert response.status_code == 400
    assert json.loads(response.data)['code'] == 'expired_token'


def test_scan_rejects_malformed_and_missing_payloads(client):
    response = client.post('/api/attendance/scan', json={'qr_data': 'hello'})
    assert response.status_code == 400
    assert json.loads(response.data)['code'] == 'malformed_token'

    response = client.post('/api/attendance/scan', json={})
    assert response.status_code == 400
    assert json.loads(response.data)['code'] == 'validation_error'


def test_scan_rejects_deeply_nested_payload(client):
    response = client.post('/api/attendance/scan', json={'qr_data': '[' * 100000 + ']' * 100000})

    assert response.status_code == 400
    assert json.loads(response.data)['code'] == 'malformed_token'


def test_scan_after_deactivation(client, auth_headers):
    _, data = create_session(client, auth_headers)
    session_id = data['data']['session']['id']

    response = client.post(f'/api/attendance/sessions/{session_id}/deactivate', headers=auth_headers)
    assert response.status_code == 200
    assert json.loads(response.data)['data']['session']['is_active'] is False

    response = client.post('/api/attendance/scan', json={'qr_data': data['data']['qr_data']})
    assert response.status_code == 404
    assert json.loads(response.data)['code'] == 'session_not_found'


def test_session_students_for_form(client, auth_headers, teacher, other_teacher):
    make_student(teacher, 'Zoe Zed')
    make_student(teacher, 'Adam Ant')
    make_student(other_teacher, 'Not Mine')
    _, data = create_session(client, auth_headers)

    response = client.get(f"/api/attendance/sessions/{data['data']['session']['id']}/students")

    body = json.loads(response.data)['data']
    assert [s['full_name'] for s in body['students']] == ['Adam Ant', 'Zoe Zed']
    assert body['session']['class_name'] == 'Math101'

    assert client.get('/api/attendance/sessions/999/students').status_code == 404


def test_submit_then_duplicate(client, auth_headers):
    _, data = create_session(client, auth_headers)
    session_id = data['data']['session']['id']

    response = client.post('/api/attendance/submit', json={'session_id': session_id, 'full_name': 'Jane Doe'})
    assert response.status_code == 201
    attendance = json.loads(response.data)['data']['attendance']
    assert attendance['status'] == 'present'
    assert attendance['method'] == 'qr_scan'
    assert attendance['students']['full_name'] == 'Jane Doe'

    response = client.post('/api/attendance/submit', json={'session_id': session_id, 'full_name': 'Jane Doe'})
    assert response.status_code == 409
    assert json.loads(response.data)['code'] == 'duplicate_submission'
    assert AttendanceRecord.query.count() == 1


def test_submit_validation(client, auth_headers):
    _, data = create_session(client, auth_headers)
    session_id = data['data']['session']['id']

    response = client.post('/api/attendance/submit', json={'session_id': session_id})
    assert response.status_code == 400
    assert json.loads(response.data)['message'] == 'Session ID and student name are required'

    response = client.post('/api/attendance/submit', json={
        'session_id': session_id, 'full_name': 'Jane Doe', 'status': 'sleeping'
    })
    assert response.status_code == 400
    assert json.loads(response.data)['code'] == 'validation_error'

    response = client.post('/api/attendance/submit', json={'session_id': 999, 'full_name': 'Jane Doe'})
    assert response.status_code == 404
    assert AttendanceRecord.query.count() == 0


def test_submit_rejects_non_integer_and_out_of_range_ids(client, auth_headers):
    _, data = create_session(client, auth_headers)
    session_id = data['data']['session']['id']

    for bad_id in (session_id + 0.9, 10 ** 30, '9' * 40, True):
        response = client.post('/api/attendance/submit', json={'session_id': bad_id, 'full_name': 'Jane Doe'})
        assert response.status_code == 400, bad_id
        assert json.loads(response.data)['code'] == 'validation_error'

    assert AttendanceRecord.query.count() == 0

    response = client.post('/api/attendance/submit', json={'session_id': str(session_id), 'full_name': 'Jane Doe'})
    assert response.status_code == 201


def test_manual_mark_then_correct(client, auth_headers, teacher):
    student = make_student(teacher, 'Jane Doe')

    response = client.post('/api/attendance/manual', headers=auth_headers, json={
        'student_id': student.id, 'status': 'absent', 'reason': 'sick'
    })
    assert response.status_code == 200
    first = json.loads(response.data)['data']['attendance']
    assert first['status'] == 'absent'
    assert first['reason'] == 'sick'
    assert first['method'] == 'manual'

    response = client.post('/api/attendance/manual', headers=auth_headers, json={
        'student_id': student.id, 'status': 'present'
    })
    second = json.loads(response.data)['data']['attendance']
    assert second['id'] == first['id']
    assert second['status'] == 'present'
    assert second['reason'] is None
    assert AttendanceRecord.query.count() == 1


def test_manual_validation(client, auth_headers, teacher):
    student = make_student(teacher)

    response = client.post('/api/attendance/manual', headers=auth_headers, json={'student_id': student.id})
    assert response.status_code == 400

    response = client.post('/api/attendance/manual', headers=auth_headers, json={
        'student_id': student.id, 'status': 'maybe'
    })
    assert response.status_code == 400

    response = client.post('/api/attendance/manual', headers=auth_headers, json={
        'student_id': 999, 'status': 'present'
    })
    assert response.status_code == 404
    assert json.loads(response.data)['code'] == 'student_not_found'


def test_manual_rejects_out_of_range_student_id(client, auth_headers):
    response = client.post('/api/attendance/manual', headers=auth_headers, json={
        'student_id': 10 ** 30, 'status': 'present'
    })

    assert response.status_code == 400
    assert json.loads(response.data)['code'] == 'validation_error'


def test_today_lists_callers_records(client, auth_headers, teacher):
    jane = make_student(teacher, 'Jane Doe')
    _, data = create_session(client, auth_headers)
    client.post('/api/attendance/submit', json={
        'session_id': data['data']['session']['id'], 'student_id': jane.id, 'full_name': 'Jane Doe'
    })

    response = client.get('/api/attendance/today', headers=auth_headers)

    records = json.loads(response.data)['data']['attendance']
    assert len(records) == 1
    assert records[0]['attendance_sessions']['class_name'] == 'Math101'
    assert records[0]['students']['full_name'] == 'Jane Doe'


def test_reports_endpoints(client, auth_headers, teacher):
    jane = make_student(teacher, 'Jane Doe')
    client.post('/api/attendance/manual', headers=auth_headers, json={'student_id': jane.id, 'status': 'present'})

    stats = json.loads(client.get('/api/reports/stats?period=month', headers=auth_headers).data)['data']
    assert stats['stats']['present'] == 1
    assert stats['stats']['attendance_rate'] == 100.0

    daily = client.get(f'/api/reports/daily?date={local_today().isoformat()}', headers=auth_headers)
    assert json.loads(daily.data)['data']['stats']['total_students'] == 1

    report = json.loads(client.get(
        '/api/reports/report?group_by=student&student_id=all', headers=auth_headers
    ).data)['data']['report']
    assert report['rows'][0]['student_name'] == 'Jane Doe'

    assert client.get('/api/reports/daily?date=yesterday', headers=auth_headers).status_code == 400
    assert client.get('/api/reports/stats?period=decade', headers=auth_headers).status_code == 400


def test_transient_store_failure_is_retryable(client, auth_headers, monkeypatch):
    def unavailable(cls, teacher_id, session_date):
        raise OperationalError('SELECT 1', {}, Exception('database is locked'))

    monkeypatch.setattr(AttendanceSession, 'find_active', classmethod(unavailable))

    response, data = create_session(client, auth_headers)

    assert response.status_code == 503
    assert data['code'] == 'transient_store_error'
    assert data['retryable'] is True


def test_unclassified_failure_does_not_leak_detail(client, auth_headers, monkeypatch):
    def broken(cls, teacher_id, session_date):
        raise RuntimeError('secret connection string')

    monkeypatch.setattr(AttendanceSession, 'find_active', classmethod(broken))

    response, data = create_session(client, auth_headers)

    assert response.status_code == 500
    assert data['code'] == 'internal_error'
    assert 'secret' not in data['message']


def test_swagger_spec_is_served(client):
    response = client.get('/api/swagger.json')

    assert response.status_code == 200
    paths = json.loads(response.data)['paths']
    for path in ('/attendance/submit', '/auth/refresh', '/auth/me', '/reports/daily'):
        assert path in paths
