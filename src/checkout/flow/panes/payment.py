"""Payment capture, processed on the hidden payment step."""

from checkout.domain import logger
from checkout.exceptions import CheckoutValidationError, FieldViolation, PaymentError
from checkout.flow.panes.base import Pane
from checkout.payment import get_gateway


class PaymentProcessPane(Pane):
    pane_id = "payment_process"
    label = "Payment"
    step_id = "payment"

    def is_visible(self, order, actor):
        return (order.total_price or 0.0) > 0

    def submit(self, order, actor, values):
        if order.payment_receipt_id:
            return

        try:
            result = get_gateway().capture(order)
        except PaymentError as exc:
            logger.warning("payment_capture_error", order_id=str(order.id), error=str(exc))
            raise CheckoutValidationError(
                [FieldViolation("payment", "unavailable", str(exc)).scoped(self.pane_id)]
            ) from exc

        if not result.success:
            logger.info("payment_declined", order_id=str(order.id), reason=result.failure_reason)
            raise CheckoutValidationError(
                [
                    FieldViolation(
                        "payment",
                        "declined",
                        f"We encountered an error processing your payment: {result.failure_reason}",
                    ).scoped(self.pane_id)
                ]
            )

        order.record_payment(result.receipt_id, result.amount)
        logger.info("payment_captured", order_id=str(order.id), receipt_id=result.receipt_id)
