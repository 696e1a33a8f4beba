"""EduTrack - Application Factory."""
import logging
import os
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)


def create_app(config_name: Optional[str] = None) -> Flask:
    """Application factory pattern."""
    app = Flask(__name__)

    # Load configuration
    from config import get_config
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    # Configure CORS
    CORS(app, origins=app.config.get('CORS_ORIGINS', ["*"]))

    # Setup logging
    setup_logging(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Setup database
    setup_database(app)

    # Add CLI commands
    register_commands(app)

    # Add health check
    @app.route('/health')
    @app.route('/api/health')
    def health_check():
        return jsonify({
            'status': 'healthy',
            'service': 'EduTrack API',
            'version': '1.0.0'
        })

    return app


def register_blueprints(app: Flask) -> None:
    """Register all application blueprints."""
    from edutrack.api.auth import auth_bp
    from edutrack.api.students import students_bp
    from edutrack.api.attendance import attendance_bp
    from edutrack.api.reports import reports_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(students_bp, url_prefix='/api/students')
    app.register_blueprint(attendance_bp, url_prefix='/api/attendance')
    app.register_blueprint(reports_bp, url_prefix='/api/reports')

    # Swagger UI
    from flask_swagger_ui import get_swaggerui_blueprint
    from edutrack.utils.swagger import API_URL, SWAGGER_URL, generate_swagger_spec

    @app.route(API_URL)
    def swagger_spec():
        """Serve Swagger/OpenAPI specification."""
        return jsonify(generate_swagger_spec())

    swaggerui_bp = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={'app_name': "EduTrack API"}
    )
    app.register_blueprint(swaggerui_bp, url_prefix=SWAGGER_URL)


def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from sqlalchemy.exc import DisconnectionError, OperationalError, TimeoutError as PoolTimeoutError
    from werkzeug.exceptions import HTTPException

    from edutrack.errors import AttendanceError, InternalError, TransientStoreError
    from edutrack.utils.helpers import handle_error

    @app.errorhandler(AttendanceError)
    def attendance_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_exception(e):
        return handle_error(e, e.code)

    @app.errorhandler(OperationalError)
    @app.errorhandler(PoolTimeoutError)
    @app.errorhandler(DisconnectionError)
    def store_unavailable(error):
        db.session.rollback()
        app.logger.warning('Store unavailable: %s', error)
        failure = TransientStoreError()
        return jsonify(failure.to_dict()), failure.status_code

    @app.errorhandler(Exception)
    def unhandled(error):
        db.session.rollback()
        app.logger.exception('Unhandled error: %s', error)
        failure = InternalError()
        return jsonify(failure.to_dict()), failure.status_code

    # JWT error handlers
    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({
            'error': True,
            'message': 'Token has expired',
            'code': 'unauthenticated',
            'status_code': 401
        }), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return jsonify({
            'error': True,
            'message': 'Invalid token',
            'code': 'unauthenticated',
            'status_code': 401
        }), 401

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return jsonify({
            'error': True,
            'message': 'Authentication required',
            'code': 'unauthenticated',
            'status_code': 401
        }), 401


def setup_logging(app: Flask) -> None:
    """Setup application logging."""
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    if not app.debug and not app.testing:
        log_file = app.config.get('LOG_FILE', 'logs/app.log')
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)

        app.logger.info('EduTrack startup')


def setup_database(app: Flask) -> None:
    """Import all models so metadata is complete."""
    with app.app_context():
        from edutrack.models import (  # noqa: F401
            User, Student,
            AttendanceSession, AttendanceRecord
        )


def register_commands(app: Flask) -> None:
    """Register CLI commands."""
    import click

    @app.cli.command('init-db')
    @click.option('--drop', is_flag=True, help='Drop existing tables')
    def init_db(drop):
        """Initialize the database."""
        if drop:
            db.drop_all()
            click.echo('Dropped all tables.')

        db.create_all()
        click.echo('Created all tables.')

    @app.cli.command('create-teacher')
    @click.option('--email', prompt='Teacher email')
    @click.option('--name', prompt='Full name')
    @click.option('--school', prompt='School name', default='')
    @click.password_option()
    def create_teacher(email, name, school, password):
        """Create a teacher account."""
        from edutrack.errors import AttendanceError
        from edutrack.services.auth_service import AuthService

        try:
            user = AuthService.register(email, password, name, school_name=school)
        except AttendanceError as e:
            raise click.ClickException(e.message)
        click.echo(f'Teacher created: {user.email} (id {user.id})')
