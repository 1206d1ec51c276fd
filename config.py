# config.py
import os
from datetime import timedelta


def _env_flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-jwt-secret-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "mysql+pymysql://root:@localhost/liftlog"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # session token lives in an http-only cookie
    JWT_TOKEN_LOCATION = ["cookies"]
    JWT_ACCESS_COOKIE_PATH = "/"
    JWT_COOKIE_SECURE = _env_flag("JWT_COOKIE_SECURE")
    JWT_COOKIE_SAMESITE = "Lax"
    JWT_COOKIE_CSRF_PROTECT = True
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)

    # werkzeug method string, e.g. "scrypt" or "pbkdf2:sha256:600000"
    PASSWORD_HASH_METHOD = os.environ.get("PASSWORD_HASH_METHOD", "scrypt")

    # rows shown on the dashboard / history pages
    DASHBOARD_HISTORY_ROWS = 5
    HISTORY_LIMIT = int(os.environ.get("HISTORY_LIMIT", "50"))


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_COOKIE_CSRF_PROTECT = False
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
