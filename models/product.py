"""Product model."""

from decimal import Decimal

from . import db

PRODUCT_SECTIONS = ("index", "catalog")


class Product(db.Model):
    """A product shown either on the landing page or in the catalog."""

    __tablename__ = "products"
    __table_args__ = (
        db.UniqueConstraint("name", "section", name="uq_products_name_section"),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    image = db.Column(db.String(500), nullable=True)
    section = db.Column(db.String(16), nullable=False, index=True)

    def to_dict(self) -> dict:
        """Serialize the product to a dictionary."""

        price = float(self.price) if isinstance(self.price, Decimal) else self.price
        return {
            "id": self.id,
            "name": self.name,
            "price": price,
            "image": self.image,
            "section": self.section,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Product {self.name} ({self.section})>"
