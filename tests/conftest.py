"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path
from typing import Callable

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.product import Product  # noqa: E402
from models.user import User  # noqa: E402


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "test-secret"
    RATE_LIMIT = "1000 per minute"
    CORS_ORIGINS = "*"
    MAILER_ENABLED = True
    MAIL_SUPPRESS_SEND = True
    MAIL_DEFAULT_SENDER = ("Tienda F1", "shop@example.com")
    ADMIN_NOTIFY = "ops@example.com, , owner@example.com"
    NOTIFY_WORKERS = 1


@pytest.fixture()
def app(tmp_path) -> Flask:
    """Create a Flask application instance for tests."""

    class TestConfig(_BaseTestConfig):
        ADMIN_SEED_PATH = str(tmp_path / "admins.seed.json")

    application = create_app(TestConfig)

    with application.app_context():
        db.create_all()

    yield application

    application.extensions["notification_dispatcher"].shutdown()
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def make_user(app: Flask) -> Callable[..., int]:
    """Persist a user and return its id."""

    def _make_user(email: str, password: str = "pw123456", *, is_admin: bool = False) -> int:
        with app.app_context():
            user = User(email=email, is_admin=is_admin)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make_user


@pytest.fixture()
def login(client: FlaskClient) -> Callable[[str, str], dict[str, str]]:
    """Log in through the API and return an Authorization header."""

    def _login(email: str, password: str = "pw123456") -> dict[str, str]:
        response = client.post("/api/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.get_json()
        return {"Authorization": f"Bearer {response.get_json()['token']}"}

    return _login


@pytest.fixture()
def admin_headers(make_user, login) -> dict[str, str]:
    make_user("admin@example.com", "AdminPass123", is_admin=True)
    return login("admin@example.com", "AdminPass123")


@pytest.fixture()
def buyer_headers(make_user, login) -> dict[str, str]:
    make_user("buyer@example.com", "pw123456")
    return login("buyer@example.com", "pw123456")


@pytest.fixture()
def products(app: Flask) -> dict[str, int]:
    """Seed a small catalog and return ``{name: id}``."""

    rows = [
        Product(name="Gorra", price=Decimal("19.99"), section="catalog"),
        Product(name="Remera", price=Decimal("35.50"), section="catalog"),
        Product(name="Poster", price=Decimal("5.00"), section="index", image="https://img.example/p.png"),
    ]
    with app.app_context():
        db.session.add_all(rows)
        db.session.commit()
        return {row.name: row.id for row in rows}


@pytest.fixture()
def dispatcher(app: Flask):
    return app.extensions["notification_dispatcher"]
