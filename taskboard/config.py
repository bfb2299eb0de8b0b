import os
from datetime import timedelta

from dotenv import load_dotenv

# Pick up a local .env before the settings below are read
load_dotenv()


def _env_flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    ENV = os.environ.get("FLASK_ENV", "development")
    DEBUG = _env_flag("FLASK_DEBUG", "0" if ENV == "production" else "1")
    TESTING = False
    JSON_SORT_KEYS = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Raw storage errors are echoed back to the caller only when this is set
    EXPOSE_ERROR_DETAILS = _env_flag("EXPOSE_ERROR_DETAILS", "1" if DEBUG and ENV != "production" else "0")

    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "change-this-jwt-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.environ.get("JWT_EXPIRES_HOURS", "1")))
    JWT_TOKEN_LOCATION = ["headers", "cookies"]
    JWT_ACCESS_COOKIE_NAME = "token"
    JWT_COOKIE_SECURE = _env_flag("JWT_COOKIE_SECURE", "1" if ENV == "production" else "0")
    JWT_COOKIE_SAMESITE = "Strict"
    JWT_COOKIE_CSRF_PROTECT = False
    PASSWORD_RESET_EXPIRES_MINUTES = int(os.environ.get("PASSWORD_RESET_EXPIRES_MINUTES", "15"))

    DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///taskboard.db")
    DB_POOL_SIZE = int(os.environ.get("DB_POOL_SIZE", "10"))
    DB_MAX_OVERFLOW = int(os.environ.get("DB_MAX_OVERFLOW", "0"))
    DB_POOL_TIMEOUT = int(os.environ.get("DB_POOL_TIMEOUT", "30"))
    DB_ECHO = _env_flag("DB_ECHO")
    DB_CREATE_SCHEMA = _env_flag("DB_CREATE_SCHEMA", "1")

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://127.0.0.1:3000")

    MAIL_SERVER = os.environ.get("MAIL_SERVER")
    MAIL_PORT = int(os.environ.get("MAIL_PORT", "587"))
    MAIL_USERNAME = os.environ.get("MAIL_USERNAME")
    MAIL_PASSWORD = os.environ.get("MAIL_PASSWORD")
    MAIL_USE_TLS = _env_flag("MAIL_USE_TLS", "1")
    MAIL_DEFAULT_SENDER = os.environ.get("MAIL_DEFAULT_SENDER") or MAIL_USERNAME
    MAIL_TIMEOUT = int(os.environ.get("MAIL_TIMEOUT", "10"))


class TestingConfig(Config):
    ENV = "testing"
    DEBUG = False
    TESTING = True
    EXPOSE_ERROR_DETAILS = False
    SECRET_KEY = "testing-secret"
    JWT_SECRET_KEY = "testing-jwt-secret-with-enough-length"
    JWT_COOKIE_SECURE = False
    DATABASE_URL = "sqlite:///:memory:"
    MAIL_SERVER = None
    LOG_LEVEL = "DEBUG"
