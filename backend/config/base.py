"""Base configuration shared by every environment."""
import os
from datetime import timedelta


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # Store calls must fail within the request timeout
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_timeout': int(os.environ.get('DB_POOL_TIMEOUT', '10')),
    }

    # JWT Configuration
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or 'jwt-secret-key-change-in-production'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=12)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=7)
    JWT_ALGORITHM = 'HS256'

    # CORS
    CORS_ORIGINS = ["http://localhost:*", "http://127.0.0.1:*"]

    # Rate Limiting
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL') or 'memory://'
    RATELIMIT_DEFAULT = "200 per day, 50 per hour"
    SCAN_RATE_LIMIT = "30 per minute"
    SUBMIT_RATE_LIMIT = "20 per minute"

    # Redemption token signing (unset keeps the token self-describing only)
    QR_TOKEN_SIGNING_KEY = os.environ.get('QR_TOKEN_SIGNING_KEY') or None

    # QR image
    QR_BOX_SIZE = 10
    QR_BORDER = 2

    # Attendance
    MANUAL_SESSION_CLASS_NAME = 'Manual Entry'
    DEFAULT_SCHOOL_NAME = 'Unknown'
    STUDENT_FORM_PATH = '/student-attendance.html'

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE = os.environ.get('LOG_FILE', 'logs/app.log')
