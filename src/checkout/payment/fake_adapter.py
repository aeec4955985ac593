"""Configurable fake payment gateway for development and testing.

Simulates a gateway without external calls. It can be told to decline, or to
fail outright as if the gateway were unreachable.
"""

from uuid import uuid4

from checkout.exceptions import PaymentError
from checkout.payment.port import CaptureResult, PaymentGateway


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.unreachable: bool = False
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Card declined", unreachable: bool = False) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.unreachable = unreachable

    def capture(self, order) -> CaptureResult:
        self.calls.append(
            {
                "method": "capture",
                "order_id": str(order.id),
                "amount": order.total_price,
                "currency": order.currency,
            }
        )

        if self.unreachable:
            raise PaymentError("Payment gateway is unreachable")

        if self.should_succeed:
            return CaptureResult(
                success=True,
                receipt_id=f"fake_rcpt_{uuid4().hex[:12]}",
                amount=order.total_price,
            )
        return CaptureResult(success=False, failure_reason=self.failure_reason)
