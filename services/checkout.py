"""Checkout engine.

Validates a cart against server-side catalog prices, writes the order and
its lines in a single transaction, then hands notification emails to the
background dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from flask import current_app
from sqlalchemy.orm import Session

from models.order import Order, OrderItem
from notifications.abstract_notifier import Notifier, OrderLineSummary, OrderSummary
from notifications.dispatcher import NotificationDispatcher
from utils.errors import NoValidItems, ValidationError
from utils.validators import (
    is_valid_card_number,
    is_valid_phone,
    normalize_phone,
    parse_positive_int,
    parse_quantity,
)

from .catalog import CatalogService


@dataclass(frozen=True)
class CartLine:
    product_id: int
    quantity: int


@dataclass(frozen=True)
class CheckoutResult:
    order_id: int
    total: Decimal
    items: tuple[OrderLineSummary, ...]


def parse_cart(items: Any) -> list[CartLine]:
    """Parse raw cart items, dropping entries without a usable product id."""

    if not isinstance(items, list) or not items:
        raise ValidationError("The cart is empty.")

    lines = []
    for raw in items:
        if not isinstance(raw, dict):
            continue
        product_id = parse_positive_int(raw.get("productId"))
        if product_id is None:
            continue
        lines.append(CartLine(product_id, parse_quantity(raw.get("quantity"))))
    return lines


class CheckoutEngine:
    """Places orders for authenticated users."""

    def __init__(
        self,
        session: Session,
        notifier: Notifier | None = None,
        dispatcher: NotificationDispatcher | None = None,
    ):
        self.session = session
        self.catalog = CatalogService(session)
        self.notifier = notifier
        self.dispatcher = dispatcher

    def checkout(
        self,
        user: dict[str, Any],
        items: Any,
        card_number: Any,
        phone: Any,
    ) -> CheckoutResult:
        """Validate the cart, persist the order and schedule notifications.

        ``user`` holds the verified token claims (``id``, ``email``). Checks run
        in order and the first failure wins: empty cart, card number, phone,
        then product resolution.
        """

        lines = parse_cart(items)
        if not is_valid_card_number(card_number):
            raise ValidationError("Invalid card number.")
        phone = normalize_phone(phone)
        if not is_valid_phone(phone):
            raise ValidationError("Invalid phone number.")
        if not lines:
            raise NoValidItems()

        snapshot = self.catalog.price_snapshot([line.product_id for line in lines])
        order_lines, summary_lines, total = self._price_lines(lines, snapshot)
        if not order_lines:
            raise NoValidItems()

        order = Order(user_id=user["id"], total=total, items=order_lines)
        self.session.add(order)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        current_app.logger.info("Order %s placed: total=%s lines=%d", order.id, total, len(order_lines))
        result = CheckoutResult(order.id, total, tuple(summary_lines))
        self._notify(user.get("email"), phone, result)
        return result

    @staticmethod
    def _price_lines(
        lines: Iterable[CartLine], snapshot: dict[int, tuple[str, Decimal]]
    ) -> tuple[list[OrderItem], list[OrderLineSummary], Decimal]:
        total = Decimal("0")
        order_lines: list[OrderItem] = []
        summary_lines: list[OrderLineSummary] = []
        for line in lines:
            found = snapshot.get(line.product_id)
            if found is None:
                continue
            name, price = found
            total += price * line.quantity
            order_lines.append(
                OrderItem(product_id=line.product_id, quantity=line.quantity, price=price)
            )
            summary_lines.append(OrderLineSummary(name, line.quantity, price))
        return order_lines, summary_lines, total

    def _notify(self, email: str | None, phone: str, result: CheckoutResult) -> None:
        config = current_app.config
        if not config.get("MAILER_ENABLED") or self.notifier is None or self.dispatcher is None:
            current_app.logger.info(
                "Mailer disabled. Order: id=%s total=%s", result.order_id, result.total
            )
            return

        if email:
            customer_summary = OrderSummary(result.order_id, result.total, result.items)
            self.dispatcher.submit(
                self.notifier.notify_order_customer,
                email,
                customer_summary,
                label="customer order email",
            )

        admin_list = config.get("ADMIN_NOTIFY")
        if admin_list:
            admin_summary = OrderSummary(
                result.order_id,
                result.total,
                result.items,
                buyer_email=email,
                buyer_phone=phone,
            )
            self.dispatcher.submit(
                self.notifier.notify_order_admin,
                admin_list,
                admin_summary,
                label="admin order email",
            )
