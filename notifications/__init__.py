"""Notification backends."""

from .abstract_notifier import Notifier, OrderLineSummary, OrderSummary, split_recipients
from .dispatcher import NotificationDispatcher
from .mail_notifier import MailNotifier, verify_mailer

__all__ = [
    "Notifier",
    "OrderLineSummary",
    "OrderSummary",
    "split_recipients",
    "NotificationDispatcher",
    "MailNotifier",
    "verify_mailer",
]
