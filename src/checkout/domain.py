"""Checkout bounded context — carts, orders, and the multi-step checkout flow.

The order doubles as the shopping cart until it is placed. Checkout walks the
order through configured steps, each made of panes, gated by the order's
workflow state and by who is asking.
"""

from protean.domain import Domain

from checkout.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
checkout = Domain(name="checkout")
