"""Domain exceptions mapped onto HTTP status codes."""

from __future__ import annotations

import json
import uuid

from flask import Response, g
from werkzeug.exceptions import (
    BadRequest,
    Conflict,
    Forbidden,
    HTTPException,
    InternalServerError,
    NotFound,
    Unauthorized,
)


def current_request_id() -> str:
    request_id = g.get("request_id")
    if not request_id:
        request_id = str(uuid.uuid4())
        g.request_id = request_id
    return request_id


def json_error(error: HTTPException) -> Response:
    """Render an HTTP error as ``{error, detail, request_id}``."""

    request_id = current_request_id()
    response = error.get_response()
    payload = {
        "error": getattr(error, "name", "Error"),
        "detail": error.description,
        "request_id": request_id,
    }
    response.data = json.dumps(payload)
    response.content_type = "application/json"
    response.headers.setdefault("X-Request-ID", request_id)
    return response


class ValidationError(BadRequest):
    """Malformed or missing input."""


class NoValidItems(ValidationError):
    description = "The cart does not contain any valid items."


class NothingToUpdate(ValidationError):
    description = "Nothing to update."


class Unauthenticated(Unauthorized):
    description = "Authentication required."


class InvalidCredentials(Unauthenticated):
    description = "Invalid email or password."


class AdminRequired(Forbidden):
    description = "Admin privileges required."


class DuplicateEmail(Conflict):
    description = "A user with that email already exists."


class DuplicateProduct(Conflict):
    description = "A product with that name already exists in this section."


class ProductNotFound(NotFound):
    description = "Product not found."


class StoreError(InternalServerError):
    description = "A database error occurred."
