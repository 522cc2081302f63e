"""Application configuration module."""

import os
from datetime import timedelta
from pathlib import Path


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _database_uri() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    db_path = os.getenv("DB_PATH") or str(Path(__file__).resolve().parent / "data.sqlite")
    return f"sqlite:///{db_path}"


class Config:
    """Base configuration for the Flask application."""

    # Core
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Tokens
    JWT_SECRET_KEY = os.getenv("JWT_SECRET") or os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.getenv("JWT_EXPIRES_DAYS", "7")))
    JWT_TOKEN_LOCATION = ["headers"]

    # CORS
    _raw_origins = os.getenv("CLIENT_ORIGIN", "*")
    if _raw_origins.strip() in ("", "*"):
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]

    # Rate limiting
    RATE_LIMIT = os.getenv("RATE_LIMIT", "120 per minute")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_KEY_PREFIX = os.getenv("RATELIMIT_KEY_PREFIX", "")

    # Mail
    MAILER_ENABLED = _env_flag("MAILER_ENABLED")
    MAIL_SERVER = os.getenv("SMTP_HOST", "localhost")
    MAIL_PORT = int(os.getenv("SMTP_PORT", "587"))
    MAIL_USE_SSL = _env_flag("SMTP_SECURE")
    MAIL_USE_TLS = not MAIL_USE_SSL and MAIL_PORT == 587
    MAIL_USERNAME = os.getenv("SMTP_USER")
    MAIL_PASSWORD = os.getenv("SMTP_PASS")
    MAIL_DEFAULT_SENDER = (
        os.getenv("FROM_NAME", "Tienda F1"),
        os.getenv("FROM_EMAIL") or os.getenv("SMTP_USER") or "no-reply@localhost",
    )
    ADMIN_NOTIFY = os.getenv("ADMIN_NOTIFY", "")
    NOTIFY_WORKERS = int(os.getenv("NOTIFY_WORKERS", "2"))

    # Seeding
    ADMIN_SEED_PATH = os.getenv(
        "ADMIN_SEED_PATH", str(Path(__file__).resolve().parent / "admins.seed.json")
    )
