"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state with no cross-user sharing.
State tracks the ids returned by the cart endpoints and the step a checkout
last landed on so follow-up requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class CartState:
    """Tracks state for a shopping cart before checkout starts."""

    cart_id: str | None = None
    session_id: str | None = None
    item_ids: list[str] = field(default_factory=list)


@dataclass
class CheckoutState:
    """Tracks state for a single checkout walk-through."""

    order_id: str | None = None
    session_id: str | None = None
    current_step: str | None = None
    order_number: int | None = None
    item_ids: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"X-Session-Id": self.session_id} if self.session_id else {}
