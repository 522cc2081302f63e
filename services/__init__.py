"""Domain services built over an explicit database session."""

from __future__ import annotations

from flask import current_app

from models import db

from .accounts import AccountService, normalize_email
from .catalog import ALL_SECTIONS, UNSET, CatalogService, ProductPatch
from .checkout import CartLine, CheckoutEngine, CheckoutResult, parse_cart


def _notification_backends():
    extensions = current_app.extensions
    return extensions.get("notifier"), extensions.get("notification_dispatcher")


def account_service() -> AccountService:
    notifier, dispatcher = _notification_backends()
    return AccountService(db.session, notifier=notifier, dispatcher=dispatcher)


def catalog_service() -> CatalogService:
    return CatalogService(db.session)


def checkout_engine() -> CheckoutEngine:
    notifier, dispatcher = _notification_backends()
    return CheckoutEngine(db.session, notifier=notifier, dispatcher=dispatcher)


__all__ = [
    "ALL_SECTIONS",
    "UNSET",
    "AccountService",
    "CartLine",
    "CatalogService",
    "CheckoutEngine",
    "CheckoutResult",
    "ProductPatch",
    "account_service",
    "catalog_service",
    "checkout_engine",
    "normalize_email",
    "parse_cart",
]
