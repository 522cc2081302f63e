"""Catalog store: product listing and admin CRUD."""

from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.product import PRODUCT_SECTIONS, Product
from utils.errors import (
    DuplicateProduct,
    NothingToUpdate,
    ProductNotFound,
    ValidationError,
)
from utils.validators import is_storable_id, parse_price

ALL_SECTIONS = "all"


class _Unset:
    """Marker for a field absent from a patch payload."""

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return "UNSET"


UNSET: Any = _Unset()


def _validate_section(section: Any) -> str:
    if section not in PRODUCT_SECTIONS:
        raise ValidationError(
            "section must be one of: {}.".format(", ".join(PRODUCT_SECTIONS))
        )
    return section


def _clean_image(image: Any) -> str | None:
    if image is None:
        return None
    text = str(image).strip()
    return text or None


@dataclass
class ProductPatch:
    """Sparse product update. Only fields that are not ``UNSET`` are written."""

    name: Any = UNSET
    price: Any = UNSET
    image: Any = UNSET
    section: Any = UNSET

    @classmethod
    def from_payload(cls, data: dict) -> "ProductPatch":
        patch = cls()
        # null name/price/section means "leave alone"; null image clears it.
        if data.get("name") is not None:
            name = str(data["name"]).strip()
            if not name:
                raise ValidationError("name must not be blank.")
            patch.name = name
        if data.get("price") is not None:
            price = parse_price(data["price"])
            if price is None:
                raise ValidationError("price must be a non-negative number.")
            patch.price = price
        if "image" in data:
            patch.image = _clean_image(data["image"])
        if data.get("section") is not None:
            patch.section = _validate_section(data["section"])
        return patch

    def changes(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


class CatalogService:
    """Reads and writes ``Product`` rows through an explicit session."""

    def __init__(self, session: Session):
        self.session = session

    def list_products(self, section: str | None = None) -> list[Product]:
        """Return products newest first, optionally restricted to one section."""

        query = self.session.query(Product)
        if section and section != ALL_SECTIONS:
            query = query.filter(Product.section == _validate_section(section))
        return query.order_by(Product.id.desc()).all()

    def get(self, product_id: int) -> Product | None:
        if not is_storable_id(product_id):
            return None
        return self.session.get(Product, product_id)

    def create_product(self, data: dict) -> Product:
        name = str(data.get("name") or "").strip()
        raw_price = data.get("price")
        section = data.get("section")
        if not name or raw_price is None or raw_price == "" or not section:
            raise ValidationError("name, price and section are required.")

        price = parse_price(raw_price)
        if price is None:
            raise ValidationError("price must be a non-negative number.")

        product = Product(
            name=name,
            price=price,
            image=_clean_image(data.get("image")),
            section=_validate_section(section),
        )
        self.session.add(product)
        self._commit_unique()
        return product

    def update_product(self, product_id: int, patch: ProductPatch) -> Product:
        changes = patch.changes()
        if not changes:
            raise NothingToUpdate()

        product = self.get(product_id)
        if product is None:
            raise ProductNotFound()

        for field_name, value in changes.items():
            setattr(product, field_name, value)
        self._commit_unique()
        return product

    def delete_product(self, product_id: int) -> int:
        """Delete a product and return how many rows were removed."""

        if not is_storable_id(product_id):
            return 0
        deleted = (
            self.session.query(Product)
            .filter(Product.id == product_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    def price_snapshot(self, product_ids: list[int]) -> dict[int, tuple[str, Decimal]]:
        """Return ``{id: (name, price)}`` for the ids that exist."""

        if not product_ids:
            return {}
        rows = (
            self.session.query(Product.id, Product.name, Product.price)
            .filter(Product.id.in_(set(product_ids)))
            .all()
        )
        return {row.id: (row.name, Decimal(str(row.price))) for row in rows}

    def _commit_unique(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateProduct() from exc
