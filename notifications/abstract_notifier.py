"""Notification abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class OrderLineSummary:
    name: str
    quantity: int
    price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class OrderSummary:
    """What an order email needs to know about a placed order."""

    order_id: int
    total: Decimal
    items: tuple[OrderLineSummary, ...] = field(default_factory=tuple)
    buyer_email: str | None = None
    buyer_phone: str | None = None


def split_recipients(raw: str | None) -> list[str]:
    """Split a comma separated recipient list, dropping blanks."""

    if not raw:
        return []
    return [address.strip() for address in str(raw).split(",") if address.strip()]


class Notifier(ABC):
    """Interface for transactional notifications."""

    @abstractmethod
    def notify_welcome(self, email: str) -> None:
        """Greet a freshly registered user."""

    @abstractmethod
    def notify_order_customer(self, email: str, summary: OrderSummary) -> None:
        """Send the buyer a confirmation of their order."""

    @abstractmethod
    def notify_order_admin(self, recipients: str | None, summary: OrderSummary) -> None:
        """Tell administrators about a new order. No-op without recipients."""
