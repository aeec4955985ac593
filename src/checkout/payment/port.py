"""Payment gateway port (abstract interface).

The payment pane captures the order total through this contract, so the
fake adapter used in development and tests can be swapped for a real one
without touching the checkout flow.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CaptureResult:
    """Result of a capture attempt."""

    success: bool
    receipt_id: str | None = None
    amount: float | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def capture(self, order) -> CaptureResult:
        """Capture the order total.

        Declines are reported through ``CaptureResult``; transport failures
        raise ``PaymentError``.
        """
        ...
