"""Email notifier backed by Flask-Mail."""

from __future__ import annotations

from decimal import Decimal
from html import escape

from flask import current_app
from flask_mail import Mail, Message

from .abstract_notifier import Notifier, OrderSummary, split_recipients

STORE_NAME = "Tienda F1"

_CELL = "padding:6px 8px;border-bottom:1px solid #eee"


def _money(value: Decimal | float | int) -> str:
    return f"$ {Decimal(str(value)):.2f}"


def _items_table(summary: OrderSummary) -> str:
    rows = "".join(
        f'<tr><td style="{_CELL}">{escape(item.name)}</td>'
        f'<td style="text-align:center;{_CELL}">{item.quantity}</td>'
        f'<td style="text-align:right;{_CELL}">{_money(item.price)}</td>'
        f'<td style="text-align:right;{_CELL}"><b>{_money(item.subtotal)}</b></td></tr>'
        for item in summary.items
    )
    return (
        '<table cellspacing="0" cellpadding="0" '
        'style="border-collapse:collapse;width:100%;max-width:620px;background:#fafafa">'
        '<thead><tr style="background:#efefef">'
        '<th style="text-align:left;padding:8px">Producto</th>'
        '<th style="text-align:center;padding:8px">Cant.</th>'
        '<th style="text-align:right;padding:8px">Precio</th>'
        '<th style="text-align:right;padding:8px">Subtotal</th>'
        f"</tr></thead><tbody>{rows}</tbody></table>"
        f'<p style="margin-top:12px;font-size:16px">Total: <b>{_money(summary.total)}</b></p>'
    )


class MailNotifier(Notifier):
    """Send notifications over SMTP using the application's ``Mail`` instance."""

    def __init__(self, mail: Mail):
        self.mail = mail

    def notify_welcome(self, email: str) -> None:
        text = f"Bienvenido a {STORE_NAME}. Cuenta: {email}"
        html = (
            '<div style="font-family:Arial,sans-serif">'
            f"<h2>¡Bienvenido a {STORE_NAME}!</h2>"
            f"<p>Tu cuenta fue creada con <b>{escape(email)}</b>.</p></div>"
        )
        self._send([email], f"¡Bienvenido a {STORE_NAME}!", text, html)

    def notify_order_customer(self, email: str, summary: OrderSummary) -> None:
        text = f"Orden #{summary.order_id} confirmada. Total {_money(summary.total)}."
        html = (
            '<div style="font-family:Arial,sans-serif"><h2>Gracias por tu compra</h2>'
            f"<p>Orden <b>#{summary.order_id}</b> confirmada.</p>"
            f"{_items_table(summary)}</div>"
        )
        self._send([email], f"Tu compra - Orden #{summary.order_id}", text, html)

    def notify_order_admin(self, recipients: str | None, summary: OrderSummary) -> None:
        to = split_recipients(recipients)
        if not to:
            return

        buyer = summary.buyer_email or "N/D"
        phone_text = f" - Tel: {summary.buyer_phone}" if summary.buyer_phone else ""
        phone_html = (
            f" - Tel: <b>{escape(summary.buyer_phone)}</b>" if summary.buyer_phone else ""
        )
        text = (
            f"Nueva compra - Orden #{summary.order_id} - Cliente: {buyer}{phone_text}"
            f" - Total {_money(summary.total)}"
        )
        html = (
            '<div style="font-family:Arial,sans-serif;line-height:1.5">'
            f"<h2>Nueva compra</h2><p>Orden <b>#{summary.order_id}</b></p>"
            f"<p>Cliente: <b>{escape(buyer)}</b>{phone_html}</p>"
            f"{_items_table(summary)}</div>"
        )
        self._send(to, f"Nueva compra - Orden #{summary.order_id}", text, html)

    def _send(self, recipients: list[str], subject: str, body: str, html: str) -> None:
        message = Message(subject=subject, recipients=recipients, body=body, html=html)
        self.mail.send(message)


def verify_mailer(mail: Mail) -> bool:
    """Open and close an SMTP connection, logging the outcome."""

    host = current_app.config.get("MAIL_SERVER")
    try:
        with mail.connect():
            pass
    except Exception as exc:  # noqa: BLE001 - startup check only logs
        current_app.logger.warning("Mailer check failed for %s: %s", host, exc)
        return False
    current_app.logger.info("Mailer OK -> %s", host)
    return True
