import os
# Define the base directory for the database file (the project root)
BASEDIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
DB_PATH = os.path.join(BASEDIR, 'rentmatch.db')


class PolicyConfig:
    # Request limit: at most MAX_PENDING_REQUESTS pending offers inside the window
    MAX_PENDING_REQUESTS = int(os.environ.get('MAX_PENDING_REQUESTS', 2))
    PENDING_WINDOW_HOURS = int(os.environ.get('PENDING_WINDOW_HOURS', 24))
    # Tenant countdown after the oldest accepted request
    DEACTIVATION_DAYS = int(os.environ.get('DEACTIVATION_DAYS', 5))


class ValidationConfig:
    # WhatsApp / mobile numbers are stored as exactly ten digits
    PHONE_NUMBER_REGEX = os.environ.get('PHONE_NUMBER_REGEX', r'^\d{10}$')
    NAME_MAX_LENGTH = int(os.environ.get('NAME_MAX_LENGTH', 100))
    ADDRESS_MAX_LENGTH = int(os.environ.get('ADDRESS_MAX_LENGTH', 255))
    AREA_MAX_LENGTH = int(os.environ.get('AREA_MAX_LENGTH', 100))
    TENANT_STATUSES = ('Waiting', 'Approved')


class Config:
    """Base configuration class."""
    # Defaulting to a file-based SQLite database
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + DB_PATH
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Secret Key is required by Flask
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'a-very-secret-and-hard-to-guess-string'

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # The frontend is served separately (Vite dev server by default)
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173'
        ).split(',') if o.strip()
    ]

class TestingConfig(Config):
    """Configuration used specifically for running Pytest."""
    TESTING = True
    # Crucial: Use an in-memory SQLite database for fast, isolated testing
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ECHO = False
    LOG_LEVEL = 'WARNING'
