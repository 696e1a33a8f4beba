"""Reporting view aggregation."""
from datetime import date, timedelta

import pytest

from edutrack.errors import ValidationError
from edutrack.models.attendance import AttendanceStatus
from edutrack.services.attendance_service import AttendanceService
from edutrack.services.report_service import ReportService
from edutrack.services.session_service import SessionService
from tests.conftest import NOW, TODAY, make_student

YESTERDAY = TODAY - timedelta(days=1)


@pytest.fixture
def roster(teacher):
    return [
        make_student(teacher, 'Adam Ant', class_name='Math101'),
        make_student(teacher, 'Beth Bee', class_name='Math101'),
        make_student(teacher, 'Carl Cee', class_name=None),
        make_student(teacher, 'Dina Dee', class_name='Math101'),
    ]


def mark(teacher, student, status, day):
    return AttendanceService.submit_manual(
        teacher.id, student.id, status, None, None, day, NOW - (TODAY - day)
    )


@pytest.fixture
def history(teacher, roster):
    adam, beth, carl, _ = roster
    mark(teacher, adam, AttendanceStatus.PRESENT, YESTERDAY)
    mark(teacher, beth, AttendanceStatus.ABSENT, YESTERDAY)

    session, _ = SessionService.create_or_get_daily_session(teacher.id, 'Math101', TODAY, NOW)
    AttendanceService.submit_self_service(session.id, adam.id, 'Adam Ant', now=NOW)
    AttendanceService.submit_self_service(session.id, beth.id, 'Beth Bee', now=NOW)
    mark(teacher, carl, AttendanceStatus.LATE, TODAY)
    return roster


def test_daily_stats(teacher, history):
    stats = ReportService.daily_stats(teacher.id, TODAY)

    assert stats == {
        'date': TODAY.isoformat(),
        'total_students': 4,
        'present': 2,
        'absent': 2,
        'attendance_rate': 50.0
    }


def test_daily_stats_without_students(teacher):
    stats = ReportService.daily_stats(teacher.id, TODAY)

    assert stats['total_students'] == 0
    assert stats['attendance_rate'] == 0.0


def test_stats_trends_per_date(teacher, history):
    result = ReportService.stats(teacher.id, TODAY, 'week')

    assert result['period']['start_date'] == (TODAY - timedelta(weeks=1)).isoformat()
    assert result['trends'] == {
        YESTERDAY.isoformat(): {'present': 1, 'total': 2},
        TODAY.isoformat(): {'present': 2, 'total': 3},
    }


def test_stats_rejects_unknown_period(teacher):
    with pytest.raises(ValidationError):
        ReportService.stats(teacher.id, TODAY, 'fortnight')


def test_report_grouped_by_date(teacher, history):
    report = ReportService.report(teacher.id, group_by='date')

    assert report['total_records'] == 5
    assert [row['date'] for row in report['rows']] == [TODAY.isoformat(), YESTERDAY.isoformat()]
    today_row = report['rows'][0]
    assert today_row['class_name'] == 'Math101'
    assert today_row['total_students'] == 3
    assert today_row['present'] == 2
    assert today_row['absent'] == 1
    assert today_row['attendance_rate'] == pytest.approx(66.7)


def test_report_grouped_by_student(teacher, history):
    adam, beth, carl, _ = history

    report = ReportService.report(teacher.id, group_by='student')

    rows = {row['student_id']: row for row in report['rows']}
    assert [row['student_name'] for row in report['rows']] == ['Adam Ant', 'Beth Bee', 'Carl Cee']
    assert rows[adam.id]['present_days'] == 2
    assert rows[adam.id]['attendance_rate'] == 100.0
    assert rows[beth.id]['absent_days'] == 1
    assert rows[carl.id]['class_name'] == 'Math101'


def test_report_filters(teacher, history):
    adam = history[0]

    by_date = ReportService.report(teacher.id, start_date=TODAY, end_date=TODAY)
    assert by_date['total_records'] == 3

    by_student = ReportService.report(teacher.id, student_id=adam.id)
    assert by_student['total_records'] == 2

    by_class = ReportService.report(teacher.id, class_name='Manual Entry')
    assert by_class['total_records'] == 2


def test_report_is_scoped_to_teacher(teacher, other_teacher, history):
    assert ReportService.report(other_teacher.id)['total_records'] == 0
    assert ReportService.report(other_teacher.id)['rows'] == []


def test_report_validation(teacher):
    with pytest.raises(ValidationError):
        ReportService.report(teacher.id, group_by='week')

    with pytest.raises(ValidationError):
        ReportService.report(teacher.id, start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))
