"""Read-only aggregation over sessions, records and students."""
from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd

from edutrack import db
from edutrack.errors import ValidationError
from edutrack.models.attendance import AttendanceRecord, AttendanceStatus
from edutrack.models.attendance_session import AttendanceSession
from edutrack.models.student import Student
from edutrack.utils.decorators import translate_store_errors

PERIOD_OFFSETS = {
    'day': pd.DateOffset(days=1),
    'week': pd.DateOffset(weeks=1),
    'month': pd.DateOffset(months=1),
    'year': pd.DateOffset(years=1),
}

GROUP_BY_CHOICES = ('date', 'student')

RECORD_COLUMNS = [
    'id', 'session_id', 'student_id', 'status', 'method', 'reason', 'notes',
    'submitted_at', 'session_date', 'class_name', 'student_name',
    'student_number', 'student_class_name'
]


def _rate(present: int, total: int) -> float:
    return round(present / total * 100, 1) if total > 0 else 0.0


class ReportService:
    """Daily statistics, trends and grouped attendance reports."""

    @staticmethod
    @translate_store_errors
    def daily_stats(teacher_id: int, day: date) -> Dict[str, Any]:
        total_students = Student.active_for_teacher(teacher_id).count()

        present = AttendanceRecord.query.join(AttendanceSession).filter(
            AttendanceSession.teacher_id == teacher_id,
            AttendanceSession.session_date == day,
            AttendanceRecord.status == AttendanceStatus.PRESENT
        ).count()

        return {
            'date': day.isoformat(),
            'total_students': total_students,
            'present': present,
            'absent': max(total_students - present, 0),
            'attendance_rate': _rate(present, total_students)
        }

    @staticmethod
    @translate_store_errors
    def stats(teacher_id: int, today: date, period: str = 'week') -> Dict[str, Any]:
        """Today's statistics plus per-date trends since ``today - period``."""
        offset = PERIOD_OFFSETS.get(period)
        if offset is None:
            raise ValidationError(f"Invalid period '{period}'. Allowed: {', '.join(PERIOD_OFFSETS)}")

        start_date = (pd.Timestamp(today) - offset).date()
        frame = ReportService._records_frame(teacher_id, start_date=start_date)

        trends = {}
        if not frame.empty:
            grouped = frame.groupby('session_date').agg(
                present=('is_present', 'sum'),
                total=('id', 'count')
            )
            for session_date, row in grouped.iterrows():
                trends[session_date] = {'present': int(row['present']), 'total': int(row['total'])}

        return {
            'stats': ReportService.daily_stats(teacher_id, today),
            'period': {'name': period, 'start_date': start_date.isoformat(), 'end_date': today.isoformat()},
            'trends': trends
        }

    @staticmethod
    @translate_store_errors
    def report(
        teacher_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        student_id: Optional[int] = None,
        class_name: Optional[str] = None,
        group_by: str = 'date'
    ) -> Dict[str, Any]:
        if group_by not in GROUP_BY_CHOICES:
            raise ValidationError(f"Invalid group_by '{group_by}'. Allowed: {', '.join(GROUP_BY_CHOICES)}")

        if start_date and end_date and start_date > end_date:
            raise ValidationError("start_date must not be after end_date")

        frame = ReportService._records_frame(
            teacher_id,
            start_date=start_date,
            end_date=end_date,
            student_id=student_id,
            class_name=class_name
        )

        if group_by == 'date':
            rows = ReportService._group_by_date(frame)
        else:
            rows = ReportService._group_by_student(frame)

        return {
            'period': {
                'start_date': start_date.isoformat() if start_date else None,
                'end_date': end_date.isoformat() if end_date else None
            },
            'filters': {'student_id': student_id, 'class_name': class_name, 'group_by': group_by},
            'total_records': int(len(frame)),
            'rows': rows,
            'raw_data': [
                {key: row[key] for key in RECORD_COLUMNS}
                for row in frame.to_dict(orient='records')
            ] if not frame.empty else []
        }

    @staticmethod
    def _records_frame(
        teacher_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        student_id: Optional[int] = None,
        class_name: Optional[str] = None
    ) -> pd.DataFrame:
        query = db.session.query(AttendanceRecord, AttendanceSession, Student).join(
            AttendanceSession, AttendanceRecord.session_id == AttendanceSession.id
        ).join(
            Student, AttendanceRecord.student_id == Student.id
        ).filter(AttendanceSession.teacher_id == teacher_id)

        if start_date:
            query = query.filter(AttendanceSession.session_date >= start_date)
        if end_date:
            query = query.filter(AttendanceSession.session_date <= end_date)
        if student_id is not None:
            query = query.filter(AttendanceRecord.student_id == student_id)
        if class_name:
            query = query.filter(AttendanceSession.class_name == class_name)

        query = query.order_by(AttendanceSession.session_date.desc(), AttendanceRecord.submitted_at.desc())

        rows = [
            {
                'id': record.id,
                'session_id': session.id,
                'student_id': student.id,
                'status': record.status.value,
                'method': record.method.value,
                'reason': record.reason,
                'notes': record.notes,
                'submitted_at': record.submitted_at.isoformat(),
                'session_date': session.session_date.isoformat(),
                'class_name': session.class_name,
                'student_name': student.full_name,
                'student_number': student.student_number,
                'student_class_name': student.class_name
            }
            for record, session, student in query.all()
        ]

        frame = pd.DataFrame(rows, columns=RECORD_COLUMNS)
        frame['is_present'] = frame['status'] == AttendanceStatus.PRESENT.value
        return frame

    @staticmethod
    def _group_by_date(frame: pd.DataFrame) -> List[Dict[str, Any]]:
        if frame.empty:
            return []

        grouped = frame.groupby('session_date').agg(
            class_name=('class_name', 'first'),
            total_students=('id', 'count'),
            present=('is_present', 'sum')
        ).sort_index(ascending=False)

        return [
            {
                'date': session_date,
                'class_name': row['class_name'],
                'total_students': int(row['total_students']),
                'present': int(row['present']),
                'absent': int(row['total_students'] - row['present']),
                'attendance_rate': _rate(int(row['present']), int(row['total_students']))
            }
            for session_date, row in grouped.iterrows()
        ]

    @staticmethod
    def _group_by_student(frame: pd.DataFrame) -> List[Dict[str, Any]]:
        if frame.empty:
            return []

        frame = frame.assign(
            report_class_name=frame['student_class_name'].fillna(frame['class_name'])
        )
        grouped = frame.groupby('student_id').agg(
            student_name=('student_name', 'first'),
            class_name=('report_class_name', 'first'),
            total_days=('id', 'count'),
            present_days=('is_present', 'sum')
        ).sort_values('student_name')

        return [
            {
                'student_id': int(student_id),
                'student_name': row['student_name'],
                'class_name': row['class_name'],
                'total_days': int(row['total_days']),
                'present_days': int(row['present_days']),
                'absent_days': int(row['total_days'] - row['present_days']),
                'attendance_rate': _rate(int(row['present_days']), int(row['total_days']))
            }
            for student_id, row in grouped.iterrows()
        ]
