"""Order confirmation e-mail, sent once an order has been placed.

Delivery problems are logged and reported to the caller; they never undo the
placement.
"""

from checkout.domain import logger
from checkout.notification import get_email_channel


def render_order_confirmation(order):
    lines = [f"Thank you for your order #{order.order_number}.", ""]
    for item in order.items:
        lines.append(f"{item.quantity} x {item.title} ({item.sku}): {item.total_price:.2f} {order.currency}")
    lines.extend(["", f"Order total: {order.total_price:.2f} {order.currency}"])
    return f"Order #{order.order_number} confirmed", "\n".join(lines)


def send_order_confirmation(order):
    """Send the confirmation to the order's contact e-mail. Returns the channel's result.

    Never raises: the order is already placed and paid for when this runs.
    """
    if not order.email:
        logger.warning("order_confirmation_skipped", order_id=str(order.id), reason="no contact email")
        return {"message_id": None, "status": "skipped"}

    subject, body = render_order_confirmation(order)
    try:
        result = get_email_channel().send(to=order.email, subject=subject, body=body)
    except Exception as e:
        logger.error("order_confirmation_failed", order_id=str(order.id), error=str(e))
        return {"message_id": None, "status": "failed", "error": str(e)}

    if result.get("status") != "sent":
        logger.warning(
            "order_confirmation_failed",
            order_id=str(order.id),
            error=result.get("error"),
        )
    else:
        logger.info("order_confirmation_sent", order_id=str(order.id), message_id=result.get("message_id"))
    return result
