"""Checkout page resolution for GET requests.

Turns ``(order, actor, requested step)`` into either a rendered page, a
redirect to the step the actor should be on, or a denial.
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from checkout.exceptions import AccessDenied
from checkout.flow import get_checkout_flow
from checkout.flow.access import AccessGuard
from checkout.flow.steps import TERMINAL_STEP, ResolutionKind, StepResolution
from checkout.order.order import Order


def step_url(order_id, step_id):
    return f"/checkout/{order_id}/{step_id}"


@dataclass(frozen=True)
class CheckoutPage:
    resolution: StepResolution
    content: dict | None = None

    @property
    def is_redirect(self):
        return self.resolution.kind is ResolutionKind.REDIRECT


def _actions(flow, order, actor, step):
    actions = {}
    if step.step_id == TERMINAL_STEP:
        return actions

    visible = flow.panes.visible_panes(step.step_id, order, actor)
    target = flow.next_step(order, actor, step)
    # Exclusive panes carry their own submit buttons
    if target is not None and not any(pane.exclusive_group for pane in visible):
        actions["next"] = {"label": target.next_label or "Continue", "step": target.step_id}

    previous = flow.previous_step(order, actor, step)
    if previous is not None and previous.previous_label:
        actions["back"] = {
            "label": previous.previous_label,
            "step": previous.step_id,
            "url": step_url(order.id, previous.step_id),
        }
    return actions


def build_page(flow, order, actor, step) -> dict:
    page = {
        "order_id": str(order.id),
        "step": step.step_id,
        "label": step.label,
        "state": order.state,
        "revision": order.revision,
        "steps": [
            {"id": s.step_id, "label": s.label}
            for s in flow.visible_steps(order, actor)
            if not s.hidden
        ],
        "panes": [pane.render(order, actor) for pane in flow.panes.visible_panes(step.step_id, order, actor)],
        "sidebar": [],
        "actions": _actions(flow, order, actor, step),
    }
    if step.has_sidebar:
        page["sidebar"] = [pane.render(order, actor) for pane in flow.panes.sidebar_panes(order, actor)]
    return page


def resolve_checkout_page(order, actor, step_id=None, flow=None) -> CheckoutPage:
    """Resolve a checkout page for an already loaded order.

    Raises AccessDenied when the actor may not see the order's checkout and
    StepNotFound for an unknown step id.
    """
    flow = flow or get_checkout_flow()
    resolution = AccessGuard(flow).check(actor, order, step_id)
    if resolution.kind is ResolutionKind.DENY:
        raise AccessDenied(resolution.reason)
    if resolution.kind is ResolutionKind.REDIRECT:
        return CheckoutPage(resolution)
    return CheckoutPage(resolution, build_page(flow, order, actor, resolution.step))


def view_checkout_page(order_id, actor, step_id=None) -> CheckoutPage:
    order = current_domain.repository_for(Order).get(order_id)
    return resolve_checkout_page(order, actor, step_id)
