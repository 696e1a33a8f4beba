"""Authentication API for teacher accounts."""
from flask import Blueprint, g, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from edutrack import limiter
from edutrack.services.auth_service import AuthService
from edutrack.utils.decorators import teacher_required
from edutrack.utils.helpers import success_response
from edutrack.utils.validators import Validator

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    return success_response(message="Auth service is running")


@auth_bp.route("/signup", methods=["POST"])
def signup():
    """Create a teacher account."""
    data = Validator.require_json(request.get_json(silent=True))

    user = AuthService.register(
        email=data.get("email", ""),
        password=data.get("password", ""),
        full_name=data.get("full_name", ""),
        school_name=data.get("school_name")
    )
    return success_response(data={"user": user.to_dict()}, message="Account created", status_code=201)


@auth_bp.route("/login", methods=["POST"])
@limiter.limit("5 per minute")
def login():
    """Teacher login."""
    data = Validator.require_json(request.get_json(silent=True))

    result = AuthService.login(data.get("email", ""), data.get("password", ""))
    return success_response(data=result, message="Login successful")


@auth_bp.route("/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh():
    """Exchange a refresh token for a new access token."""
    result = AuthService.refresh_token(int(get_jwt_identity()))
    return success_response(data=result, message="Token refreshed")


@auth_bp.route("/me", methods=["GET"])
@teacher_required
def me(teacher_id):
    """Current teacher profile."""
    return success_response(data=g.current_teacher.to_dict())
