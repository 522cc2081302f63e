"""Database initialization and model exports."""

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()

# Import models to register them with SQLAlchemy metadata.
from .user import User  # noqa: E402,F401
from .product import PRODUCT_SECTIONS, Product  # noqa: E402,F401
from .order import Order, OrderItem  # noqa: E402,F401

__all__ = [
    "db",
    "User",
    "Product",
    "PRODUCT_SECTIONS",
    "Order",
    "OrderItem",
]
