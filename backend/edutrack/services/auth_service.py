"""Authentication service for teacher accounts."""
from datetime import datetime
from typing import Optional

from flask_jwt_extended import create_access_token, create_refresh_token

from edutrack.errors import Unauthenticated, ValidationError
from edutrack.models.user import User
from edutrack.utils.decorators import translate_store_errors
from edutrack.utils.validators import Validator


class AuthService:

    @staticmethod
    @translate_store_errors
    def login(email: str, password: str) -> dict:
        """Authenticate a teacher and return tokens."""
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = User.query.filter_by(email=email.lower().strip()).first()
        if not user or not user.check_password(password):
            raise Unauthenticated("Invalid email or password")

        if not user.is_active:
            raise Unauthenticated("Account is deactivated")

        user.update(last_login=datetime.now())

        # JWT subjects must be strings
        identity = str(user.id)
        return {
            "access_token": create_access_token(identity=identity),
            "refresh_token": create_refresh_token(identity=identity),
            "user": user.to_dict()
        }

    @staticmethod
    @translate_store_errors
    def register(
        email: str,
        password: str,
        full_name: str,
        school_name: Optional[str] = None
    ) -> User:
        """Register a new teacher account."""
        if not all([email, password, full_name]):
            raise ValidationError("Email, password and full name are required")

        if not Validator.validate_email(email):
            raise ValidationError("Invalid email format")

        password_check = Validator.validate_password(password)
        if not password_check["is_valid"]:
            raise ValidationError(password_check["errors"][0])

        if len(full_name.strip()) < 2:
            raise ValidationError("Name must be at least 2 characters long")

        email = email.lower().strip()
        if User.query.filter_by(email=email).first():
            raise ValidationError("Email already exists")

        user = User(
            email=email,
            full_name=full_name.strip(),
            school_name=Validator.clean_optional(school_name)
        )
        user.set_password(password)
        return user.save()

    @staticmethod
    @translate_store_errors
    def refresh_token(user_id: int) -> dict:
        """Generate new access token."""
        user = User.get_by_id(user_id)
        if not user or not user.is_active:
            raise Unauthenticated("User not found or inactive")

        return {
            "access_token": create_access_token(identity=str(user.id)),
            "user": user.to_dict()
        }
