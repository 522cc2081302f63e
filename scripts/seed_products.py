"""Seed demo products for local development."""

from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app  # noqa: E402
from models import db  # noqa: E402
from models.product import Product  # noqa: E402

DEMO_PRODUCTS = [
    {"name": "Gorra Escuderia", "price": Decimal("29.99"), "section": "index"},
    {"name": "Remera Piloto", "price": Decimal("49.90"), "section": "index"},
    {"name": "Modelo a escala 1:43", "price": Decimal("89.00"), "section": "catalog"},
    {"name": "Campera de equipo", "price": Decimal("159.50"), "section": "catalog"},
    {"name": "Llavero volante", "price": Decimal("9.99"), "section": "catalog"},
]


def seed_products(session, products=DEMO_PRODUCTS) -> tuple[int, int]:
    """Insert or refresh products keyed by (name, section)."""

    created = updated = 0
    for data in products:
        product = (
            session.query(Product)
            .filter_by(name=data["name"], section=data["section"])
            .first()
        )
        if product is None:
            session.add(Product(**data))
            created += 1
        else:
            product.price = data["price"]
            product.image = data.get("image")
            updated += 1
    session.commit()
    return created, updated


def main() -> None:
    app = create_app()
    with app.app_context():
        db.create_all()
        created, updated = seed_products(db.session)
        print(f"Products created: {created}, updated: {updated}")


if __name__ == "__main__":
    main()
