"""Helper functions for the application."""
from datetime import date, datetime, time
from typing import Any

from flask import jsonify


def handle_error(error, status_code: int):
    """Handle application errors with consistent format."""
    return jsonify({
        'error': True,
        'message': getattr(error, 'description', None) or str(error),
        'status_code': status_code
    }), status_code


def success_response(data: Any = None, message: str = "Success", status_code: int = 200):
    """Return consistent success response."""
    response = {
        'error': False,
        'message': message
    }

    if data is not None:
        response['data'] = data

    return jsonify(response), status_code


def local_now() -> datetime:
    """Current wall-clock instant in server local time."""
    return datetime.now()


def local_today() -> date:
    """Current calendar day in server local time."""
    return local_now().date()


def end_of_day(day: date) -> datetime:
    """Last instant of ``day`` (calendar day semantics, not a rolling window)."""
    return datetime.combine(day, time.max)
