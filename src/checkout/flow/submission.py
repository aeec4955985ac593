"""Checkout step submission — command and handler.

A submission is all-or-nothing. Every participating pane of the step is
validated before any of them is applied, hidden steps that follow are
processed in the same pass, and the order is persisted once at the end. When
the order reaches the terminal step it is placed and given its number.

Submissions that the access guard redirects (a finished order, a step the
order has already passed) change nothing and report where to go instead.
"""

import json
from dataclasses import dataclass

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from checkout.domain import checkout, logger
from checkout.exceptions import AccessDenied, CheckoutValidationError, FieldViolation
from checkout.flow import get_checkout_flow
from checkout.flow.access import AccessGuard, Actor
from checkout.flow.steps import TERMINAL_STEP, ResolutionKind
from checkout.notification.confirmation import send_order_confirmation
from checkout.order.numbering import issue_order_number
from checkout.order.order import Order
from checkout.utils.logging import add_context, clear_context
from checkout.workflow.order_workflow import OrderState, order_workflow

NEXT = "next"
BACK = "back"


@checkout.command(part_of="Order")
class SubmitCheckoutStep:
    order_id = Identifier(required=True)
    step_id = String(required=True, max_length=50)
    values = Text()  # JSON: {"{pane}.{field}": value}
    user_id = Identifier()
    session_id = String(max_length=255)
    permissions = Text()  # JSON: list of permission names
    expected_revision = Integer()
    op = String(max_length=10, default=NEXT)


@dataclass(frozen=True)
class StepOutcome:
    """Where the actor goes after a submission."""

    status: str  # advanced | back | redirect
    order_id: str
    step_id: str
    revision: int
    order_number: int | None = None


def actor_from_command(command):
    permissions = json.loads(command.permissions) if command.permissions else []
    return Actor(
        user_id=str(command.user_id) if command.user_id else None,
        session_id=command.session_id,
        permissions=frozenset(permissions),
    )


def group_values(values):
    """Split flat ``{pane}.{field}`` keys into one dict per pane."""
    grouped = {}
    for key, value in (values or {}).items():
        pane_id, _, field = key.partition(".")
        if not field:
            continue
        grouped.setdefault(pane_id, {})[field] = value
    return grouped


def participating_panes(flow, order, actor, step, grouped):
    """Visible panes of ``step`` taking part in this submission.

    Of each exclusive group exactly one pane participates: the one whose
    namespace was submitted.
    """
    panes, groups = [], {}
    for pane in flow.panes.visible_panes(step.step_id, order, actor):
        if pane.exclusive_group:
            groups.setdefault(pane.exclusive_group, []).append(pane)
        else:
            panes.append(pane)

    for group, alternatives in groups.items():
        selected = [pane for pane in alternatives if pane.pane_id in grouped]
        if not selected:
            raise CheckoutValidationError([FieldViolation(group, "required", "Choose how you want to continue.")])
        if len(selected) > 1:
            raise CheckoutValidationError([FieldViolation(group, "ambiguous", "Choose only one way to continue.")])
        panes.append(selected[0])

    return sorted(panes, key=lambda pane: pane.weight)


def submit_panes(flow, order, actor, step, values):
    """Validate every participating pane, then apply them in order."""
    grouped = group_values(values)
    panes = participating_panes(flow, order, actor, step, grouped)

    violations = []
    for pane in panes:
        violations.extend(
            violation.scoped(pane.pane_id)
            for violation in pane.validate(order, actor, grouped.get(pane.pane_id, {}))
        )
    if violations:
        raise CheckoutValidationError(violations)

    for pane in panes:
        pane.submit(order, actor, grouped.get(pane.pane_id, {}))


def advance(flow, order, actor, step, values):
    """Submit ``step`` and every hidden step after it; return the step reached."""
    submit_panes(flow, order, actor, step, values)

    target = flow.next_step(order, actor, step)
    while target is not None and target.hidden:
        submit_panes(flow, order, actor, target, {})
        target = flow.next_step(order, actor, target)
    return target


@checkout.command_handler(part_of=Order)
class CheckoutSubmissionHandler:
    @handle(SubmitCheckoutStep)
    def submit_step(self, command):
        add_context(order_id=str(command.order_id), step=command.step_id)
        try:
            return self._submit(command)
        finally:
            clear_context()

    def _submit(self, command):
        flow = get_checkout_flow()
        actor = actor_from_command(command)
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        resolution = AccessGuard(flow).check(actor, order, command.step_id)
        if resolution.kind is ResolutionKind.DENY:
            raise AccessDenied(resolution.reason)
        if resolution.kind is ResolutionKind.REDIRECT:
            return StepOutcome("redirect", str(order.id), resolution.step_id, order.revision, order.order_number)

        order.check_revision(command.expected_revision)
        step = resolution.step

        if command.op == BACK:
            return self._go_back(flow, repo, order, actor, step)

        if order.state == OrderState.DRAFT.value:
            order.apply_transition("start_checkout")

        values = json.loads(command.values) if command.values else {}
        target = advance(flow, order, actor, step, values)

        placed = False
        if target is None or target.step_id == TERMINAL_STEP:
            # Raises GuardRejected before a number is taken from the sequence
            order_workflow.apply_transition(order, order_workflow.get_transition("place"))
            order.place(issue_order_number())
            target = flow.terminal_step
            placed = True

        order.move_to_step(target.step_id)
        repo.add(order)

        logger.info(
            "checkout_step_submitted",
            next_step=target.step_id,
            revision=order.revision,
        )

        if placed:
            logger.info("order_placed", order_number=order.order_number)
            if flow.config.send_order_confirmation:
                send_order_confirmation(order)

        return StepOutcome("advanced", str(order.id), target.step_id, order.revision, order.order_number)

    def _go_back(self, flow, repo, order, actor, step):
        previous = flow.previous_step(order, actor, step)
        if previous is None or not previous.previous_label:
            return StepOutcome("redirect", str(order.id), step.step_id, order.revision)

        order.move_to_step(previous.step_id)
        repo.add(order)
        return StepOutcome("back", str(order.id), previous.step_id, order.revision)
