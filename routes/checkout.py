"""Checkout blueprint."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from services import checkout_engine
from utils.request_validation import parse_json_request
from utils.security import current_claims, login_required

checkout_bp = Blueprint("checkout", __name__)


@checkout_bp.route("/checkout", methods=["POST"])
@login_required
def checkout():
    """Place an order for the authenticated user.

    Prices always come from the catalog; anything price-like in the
    payload is ignored.
    """

    data = parse_json_request(request)
    result = checkout_engine().checkout(
        current_claims(),
        data.get("items"),
        data.get("cardNumber"),
        data.get("phone"),
    )
    return jsonify({"ok": True, "orderId": result.order_id, "total": float(result.total)})
