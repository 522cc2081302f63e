"""Products blueprint: public listing and admin CRUD."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from services import ProductPatch, catalog_service
from utils.request_validation import parse_json_request
from utils.security import admin_required

products_bp = Blueprint("products", __name__)


@products_bp.route("", methods=["GET"])
def list_products():
    """Return products newest first, filtered by ``section`` when given."""

    section = request.args.get("section")
    products = catalog_service().list_products(section)
    return jsonify([product.to_dict() for product in products])


@products_bp.route("", methods=["POST"])
@admin_required
def create_product():
    data = parse_json_request(request)
    product = catalog_service().create_product(data)
    return jsonify(product.to_dict()), HTTPStatus.CREATED


@products_bp.route("/<int:product_id>", methods=["PUT"])
@admin_required
def update_product(product_id: int):
    """Apply a sparse update: only fields present in the body change."""

    data = parse_json_request(request)
    product = catalog_service().update_product(product_id, ProductPatch.from_payload(data))
    return jsonify(product.to_dict())


@products_bp.route("/<int:product_id>", methods=["DELETE"])
@admin_required
def delete_product(product_id: int):
    deleted = catalog_service().delete_product(product_id)
    return jsonify({"ok": True, "deleted": deleted, "deletedCount": deleted})
