"""Tests for the notification backends and the background dispatcher."""

from __future__ import annotations

import threading
from decimal import Decimal

import pytest

from notifications import (
    MailNotifier,
    NotificationDispatcher,
    OrderLineSummary,
    OrderSummary,
    split_recipients,
    verify_mailer,
)

SUMMARY = OrderSummary(
    order_id=7,
    total=Decimal("45.00"),
    items=(
        OrderLineSummary("Gorra <edición>", 2, Decimal("20.00")),
        OrderLineSummary("Poster", 1, Decimal("5.00")),
    ),
    buyer_email="buyer@example.com",
    buyer_phone="+54 11 5555-0000",
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, []),
        ("", []),
        (" , ,", []),
        ("a@example.com", ["a@example.com"]),
        (" a@example.com ,b@example.com,, ", ["a@example.com", "b@example.com"]),
    ],
)
def test_split_recipients(raw, expected):
    assert split_recipients(raw) == expected


def test_line_subtotal():
    assert SUMMARY.items[0].subtotal == Decimal("40.00")


def test_order_customer_email(app):
    mail = app.extensions["mail"]
    notifier = MailNotifier(mail)

    with app.app_context(), mail.record_messages() as outbox:
        notifier.notify_order_customer("buyer@example.com", SUMMARY)

    (message,) = outbox
    assert message.subject == "Tu compra - Orden #7"
    assert message.recipients == ["buyer@example.com"]
    assert "shop@example.com" in message.sender
    assert "Total $ 45.00" in message.body
    assert "Gorra &lt;edición&gt;" in message.html
    assert "$ 40.00" in message.html


def test_order_admin_email_includes_buyer_contact(app):
    mail = app.extensions["mail"]
    notifier = MailNotifier(mail)

    with app.app_context(), mail.record_messages() as outbox:
        notifier.notify_order_admin("ops@example.com, boss@example.com", SUMMARY)

    (message,) = outbox
    assert message.recipients == ["ops@example.com", "boss@example.com"]
    assert "Cliente: buyer@example.com - Tel: +54 11 5555-0000" in message.body


def test_order_admin_email_noop_without_recipients(app):
    mail = app.extensions["mail"]
    notifier = MailNotifier(mail)

    with app.app_context(), mail.record_messages() as outbox:
        notifier.notify_order_admin("", SUMMARY)
        notifier.notify_order_admin(None, SUMMARY)

    assert outbox == []


def test_welcome_email(app):
    mail = app.extensions["mail"]
    notifier = MailNotifier(mail)

    with app.app_context(), mail.record_messages() as outbox:
        notifier.notify_welcome("new@example.com")

    (message,) = outbox
    assert message.recipients == ["new@example.com"]
    assert "new@example.com" in message.body


def test_verify_mailer_reports_success_when_suppressed(app):
    with app.app_context():
        assert verify_mailer(app.extensions["mail"]) is True


def test_dispatcher_runs_jobs_off_the_calling_thread(app):
    dispatcher = NotificationDispatcher(app)
    seen = []

    def _job(value):
        seen.append((value, threading.current_thread().name))

    with app.app_context():
        future = dispatcher.submit(_job, "hello")
    dispatcher.wait()

    assert future.result() is True
    assert seen[0][0] == "hello"
    assert seen[0][1].startswith("notify")
    dispatcher.shutdown()


def test_dispatcher_logs_and_swallows_failures(app, caplog):
    dispatcher = NotificationDispatcher(app)

    def _job():
        raise ConnectionError("smtp unreachable")

    with app.app_context():
        future = dispatcher.submit(_job, label="test email")
    dispatcher.wait()

    assert future.result() is False
    assert "Error sending test email" in caplog.text
    dispatcher.shutdown()


def test_dispatcher_requires_init():
    dispatcher = NotificationDispatcher()

    with pytest.raises(RuntimeError):
        dispatcher.submit(lambda: None)
