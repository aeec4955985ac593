"""Checkout flow factory.

Provides get_checkout_flow() / set_checkout_flow() so the application (or a
test) can install a flow built from its own configuration. The default flow
uses ``CheckoutFlowConfig()`` with repository-backed accounts and profiles.
"""

from checkout.config import CheckoutFlowConfig
from checkout.flow.panes.registry import DEFAULT_PANES, PaneRegistry
from checkout.flow.steps import DEFAULT_STEPS, CheckoutFlow

_current_flow: CheckoutFlow | None = None


def build_checkout_flow(
    config: CheckoutFlowConfig | None = None,
    accounts=None,
    profiles=None,
    steps=DEFAULT_STEPS,
    pane_classes=DEFAULT_PANES,
) -> CheckoutFlow:
    config = config or CheckoutFlowConfig()
    panes = PaneRegistry(config, pane_classes=pane_classes, accounts=accounts, profiles=profiles)
    return CheckoutFlow(config, panes, steps=steps)


def get_checkout_flow() -> CheckoutFlow:
    """Return the active checkout flow, building the default one on first use."""
    global _current_flow
    if _current_flow is None:
        _current_flow = build_checkout_flow()
    return _current_flow


def set_checkout_flow(flow: CheckoutFlow) -> None:
    global _current_flow
    _current_flow = flow


def reset_checkout_flow() -> None:
    """Reset to the default flow (useful for tests)."""
    global _current_flow
    _current_flow = None
