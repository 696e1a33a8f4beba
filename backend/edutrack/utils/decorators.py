"""Custom decorators for authorization and store error translation."""
import logging
from functools import wraps

from flask import g
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from sqlalchemy.exc import DisconnectionError, OperationalError, TimeoutError as PoolTimeoutError

from edutrack import db
from edutrack.errors import TransientStoreError, Unauthenticated

logger = logging.getLogger(__name__)


def teacher_required(f):
    """Decorator to require a verified, active teacher.

    The verified teacher id is handed to the view as the ``teacher_id``
    keyword argument so that no service reads ambient request state.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from edutrack.models.user import User

        verify_jwt_in_request()
        identity = get_jwt_identity()
        try:
            teacher_id = int(identity)
        except (TypeError, ValueError):
            raise Unauthenticated("Invalid token")

        user = db.session.get(User, teacher_id)
        if not user or not user.is_active:
            raise Unauthenticated("Invalid token")

        g.current_teacher = user
        kwargs['teacher_id'] = teacher_id
        return f(*args, **kwargs)
    return decorated_function


def translate_store_errors(f):
    """Turn connection-level database failures into TransientStoreError."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (OperationalError, PoolTimeoutError, DisconnectionError) as e:
            db.session.rollback()
            logger.warning("Store unavailable during %s: %s", f.__qualname__, e)
            raise TransientStoreError() from e
    return decorated_function
