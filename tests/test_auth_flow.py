"""Tests covering registration, login and the token gates."""

from __future__ import annotations

from datetime import timedelta

import pytest
from flask.testing import FlaskClient
from flask_jwt_extended import create_access_token

from models import db
from models.user import User
from utils.errors import Unauthenticated
from utils.security import issue_token, verify_token


def _register(client: FlaskClient, email: str, password: str = "pw123456"):
    return client.post("/api/register", json={"email": email, "password": password})


def test_register_then_login_returns_matching_claims(client: FlaskClient, app):
    """A fresh registration can log in and the token echoes the stored user."""

    response = _register(client, "New.Buyer@Example.com")
    assert response.status_code == 201
    registered = response.get_json()
    assert registered["user"]["email"] == "new.buyer@example.com"
    assert registered["user"]["is_admin"] is False
    assert registered["token"]

    login = client.post(
        "/api/login", json={"email": "new.buyer@example.com", "password": "pw123456"}
    )
    assert login.status_code == 200
    payload = login.get_json()
    assert payload["user"] == registered["user"]

    me = client.get("/api/me", headers={"Authorization": f"Bearer {payload['token']}"})
    assert me.status_code == 200
    assert me.get_json() == {"user": registered["user"]}

    with app.app_context():
        stored = User.query.filter_by(email="new.buyer@example.com").one()
        assert stored.id == payload["user"]["id"]
        assert stored.password_hash != "pw123456"


def test_register_duplicate_email_is_case_insensitive(client: FlaskClient):
    assert _register(client, "dup@example.com").status_code == 201

    response = _register(client, "  DUP@example.COM ")

    assert response.status_code == 409
    assert response.get_json()["error"] == "Conflict"


@pytest.mark.parametrize(
    "payload",
    [
        {"email": "x@example.com"},
        {"password": "pw123456"},
        {"email": "", "password": "pw123456"},
        {},
    ],
)
def test_register_requires_email_and_password(client: FlaskClient, payload):
    response = client.post("/api/register", json=payload)

    assert response.status_code == 400


def test_login_does_not_reveal_which_credential_failed(client: FlaskClient, make_user):
    """Unknown email and wrong password produce the same 401 body."""

    make_user("known@example.com", "right-password")

    wrong_password = client.post(
        "/api/login", json={"email": "known@example.com", "password": "nope"}
    )
    unknown_email = client.post(
        "/api/login", json={"email": "ghost@example.com", "password": "nope"}
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.get_json()["detail"] == unknown_email.get_json()["detail"]


def test_login_accepts_mixed_case_email(client: FlaskClient, make_user):
    make_user("mixed@example.com")

    response = client.post(
        "/api/login", json={"email": "MIXED@Example.com", "password": "pw123456"}
    )

    assert response.status_code == 200


def test_me_requires_token(client: FlaskClient):
    response = client.get("/api/me")

    assert response.status_code == 401
    payload = response.get_json()
    assert payload["error"] == "Unauthorized"
    assert payload["request_id"]


@pytest.mark.parametrize(
    "header",
    ["Bearer not-a-token", "Token abc", "Bearer "],
)
def test_me_rejects_malformed_tokens(client: FlaskClient, header):
    response = client.get("/api/me", headers={"Authorization": header})

    assert response.status_code == 401


def test_me_rejects_expired_token(client: FlaskClient, app, make_user):
    user_id = make_user("late@example.com")
    with app.app_context():
        token = create_access_token(
            identity=str(user_id),
            additional_claims={"email": "late@example.com", "is_admin": False},
            expires_delta=timedelta(seconds=-5),
        )

    response = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert "expired" in response.get_json()["detail"].lower()


def test_token_signed_with_other_secret_is_rejected(client: FlaskClient, app, make_user):
    user_id = make_user("forged@example.com")
    with app.app_context():
        app.config["JWT_SECRET_KEY"] = "attacker-secret"
        token = create_access_token(
            identity=str(user_id),
            additional_claims={"email": "forged@example.com", "is_admin": True},
        )
        app.config["JWT_SECRET_KEY"] = "test-secret"

    response = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_token_claims_outlive_account_changes(client: FlaskClient, app, make_user, login):
    """Tokens are not revoked: claims stay as issued until expiry."""

    user_id = make_user("boss@example.com", is_admin=True)
    headers = login("boss@example.com")

    with app.app_context():
        user = db.session.get(User, user_id)
        user.is_admin = False
        db.session.commit()

    response = client.get("/api/me", headers=headers)

    assert response.status_code == 200
    assert response.get_json()["user"]["is_admin"] is True


def test_register_sends_welcome_email(client: FlaskClient, app, dispatcher):
    mail = app.extensions["mail"]
    with mail.record_messages() as outbox:
        response = _register(client, "welcome@example.com")
        dispatcher.wait()

    assert response.status_code == 201
    assert len(outbox) == 1
    assert outbox[0].recipients == ["welcome@example.com"]
    assert "Bienvenido" in outbox[0].subject


def test_issue_and_verify_token_round_trip(app, make_user):
    user_id = make_user("claims@example.com", is_admin=True)

    with app.app_context():
        user = db.session.get(User, user_id)
        token = issue_token(user)

        assert verify_token(token) == {
            "id": user_id,
            "email": "claims@example.com",
            "is_admin": True,
        }
        with pytest.raises(Unauthenticated):
            verify_token(token[:-2] + ("AA" if not token.endswith("AA") else "BB"))
