"""Checkout flow configuration.

The configuration is an explicit value handed to the step sequencer and the
pane registry when a flow is built. Nothing reads it from module state.
"""

from pydantic import BaseModel, field_validator

DEFAULT_ORDER_SUMMARY_VIEW = "checkout_order_summary"

# Views the order summary pane knows how to render
ORDER_SUMMARY_VIEWS = (
    DEFAULT_ORDER_SUMMARY_VIEW,
    "checkout_order_summary_compact",
)

ACCESS_CHECKOUT = "access checkout"
ADMINISTER_ORDERS = "administer orders"


class CheckoutFlowConfig(BaseModel):
    allow_guest_checkout: bool = True
    allow_registration: bool = False
    order_summary_view: str | None = DEFAULT_ORDER_SUMMARY_VIEW
    collect_shipping: bool = False
    send_order_confirmation: bool = True
    anonymous_permissions: frozenset[str] = frozenset({ACCESS_CHECKOUT})
    authenticated_permissions: frozenset[str] = frozenset({ACCESS_CHECKOUT})

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "allow_guest_checkout": False,
                    "allow_registration": True,
                    "order_summary_view": "checkout_order_summary",
                }
            ]
        },
    }

    @field_validator("order_summary_view", mode="before")
    @classmethod
    def _known_summary_view(cls, value):
        if value in (None, ""):
            return None
        if value not in ORDER_SUMMARY_VIEWS:
            raise ValueError(f"Unknown order summary view: {value}")
        return value
