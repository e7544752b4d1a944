import os
from dotenv import load_dotenv

# Load environment variables from the .env file
load_dotenv()

# Project base directory
basedir = os.path.abspath(os.path.dirname(__file__))

class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'change-me'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(basedir, 'agrirent.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --- Object storage (equipment images) ---
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(basedir, 'uploads')
    MAX_IMAGE_BYTES = 5 * 1024 * 1024
    MAX_CONTENT_LENGTH = 6 * 1024 * 1024
    ALLOWED_IMAGE_TYPES = ('image/jpeg', 'image/png', 'image/webp', 'image/gif')

    # --- Read-back of just-created records ---
    READBACK_ATTEMPTS = int(os.environ.get('READBACK_ATTEMPTS', 5))
    READBACK_INITIAL_DELAY = float(os.environ.get('READBACK_INITIAL_DELAY', 0.5))
    READBACK_MAX_DELAY = 4.0

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Public URL of a running deployment, used by scripts/check_connection.py
    APP_BASE_URL = os.environ.get('APP_BASE_URL', 'http://localhost:5000')

    # --- E-mail ---
    MAIL_ENABLED = os.environ.get('MAIL_ENABLED', 'false').lower() == 'true'
    MAIL_SERVER = os.environ.get('MAIL_SERVER', 'smtp.gmail.com')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 587))
    MAIL_USE_TLS = True
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER', 'no-reply@agrirent.local')

class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    READBACK_INITIAL_DELAY = 0.0
    READBACK_MAX_DELAY = 0.0
    MAIL_ENABLED = True
    MAIL_SUPPRESS_SEND = True
