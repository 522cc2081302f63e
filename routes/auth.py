"""Authentication blueprint providing register, login and identity endpoints."""

from __future__ import annotations
from http import HTTPStatus

from flask import Blueprint, jsonify, request

from services import account_service
from utils.request_validation import parse_json_request, text_field
from utils.security import current_claims, issue_token, login_required

auth_bp = Blueprint("auth", __name__)


def _session_payload(user) -> dict:
    return {"user": user.to_dict(), "token": issue_token(user)}


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Register a new customer account and sign them in."""
    payload = parse_json_request(request)
    user = account_service().register(
        text_field(payload, "email"), text_field(payload, "password")
    )
    return jsonify(_session_payload(user)), HTTPStatus.CREATED


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple:
    """Authenticate a user and return a signed token."""
    payload = parse_json_request(request)
    user = account_service().verify(
        text_field(payload, "email"), text_field(payload, "password")
    )
    return jsonify(_session_payload(user)), HTTPStatus.OK


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    """Echo the verified token claims."""
    return jsonify({"user": current_claims()})
