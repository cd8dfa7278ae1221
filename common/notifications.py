"""
SpareLink - Order Notification Helper
=======================================
Sends the transactional order-confirmation email through an HTTP email API.
In dev mode (no EMAIL_API_KEY), logs the message only.

Best effort: every failure is logged and swallowed, never raised to the caller.
"""

import logging

import requests

from config.settings import EMAIL_API_URL, EMAIL_API_KEY, EMAIL_FROM, EMAIL_TIMEOUT, BASE_URL
from common.helpers import format_price

logger = logging.getLogger("sparelink.notifications")


def build_order_email(order) -> dict:
    """Subject + plain-text body for an order confirmation."""
    lines = [
        f"Hi {order.buyer.first_name or 'there'},",
        "",
        f"Your order #{order.id} has been placed.",
        "",
    ]
    for item in order.items:
        name = item.product.name if item.product else "Product"
        lines.append(f"  {item.quantity} x {name} @ {format_price(item.price)} = {format_price(item.line_total)}")
    lines += [
        "",
        f"Total: {format_price(order.total_amount)}",
        f"Status: {order.status_label}",
    ]
    if order.pickup_location:
        loc = order.pickup_location
        lines += [
            "",
            f"Pickup: {loc.name}, {loc.address}, {loc.city}",
        ]
    lines += [
        "",
        f"Track your orders at {BASE_URL}/dashboard",
    ]
    return {
        "subject": f"Order #{order.id} confirmed",
        "text": "\n".join(lines),
    }


def send_order_confirmation(order) -> bool:
    """
    Email the buyer about a freshly placed order.

    Returns:
        True if the email API accepted the message, False otherwise
    """
    try:
        recipient = order.buyer.email if order.buyer else None
        if not recipient:
            logger.info(f"Order {order.id}: buyer has no email, confirmation skipped")
            return False

        message = build_order_email(order)

        if not EMAIL_API_KEY:
            logger.info(f"Notification skipped (no API key): {recipient} -> {message['subject']}")
            return False

        response = requests.post(
            EMAIL_API_URL,
            json={
                "from": EMAIL_FROM,
                "to": [recipient],
                "subject": message["subject"],
                "text": message["text"],
            },
            headers={"Authorization": f"Bearer {EMAIL_API_KEY}"},
            timeout=EMAIL_TIMEOUT,
        )

        if response.status_code < 300:
            logger.info(f"Order confirmation sent to {recipient} for order {order.id}")
            return True
        logger.error(f"Email API error: {response.status_code} - {response.text}")
        return False

    except Exception as e:
        logger.error(f"Order confirmation failed for order {getattr(order, 'id', '?')}: {e}")
        return False
