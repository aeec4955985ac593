"""Checkout step sequencer.

Steps are an ordered, named sequence bound to the order's ``checkout_step``.
``next_label`` is the label of the button that advances *into* a step and
``previous_label`` the label of the link that returns *to* it; a step without
a ``previous_label`` cannot be revisited once passed.
"""

from dataclasses import dataclass
from enum import Enum

from checkout.exceptions import StepNotFound

TERMINAL_STEP = "complete"


@dataclass(frozen=True)
class CheckoutStep:
    step_id: str
    label: str
    next_label: str | None = None
    previous_label: str | None = None
    has_sidebar: bool = True
    hidden: bool = False


DEFAULT_STEPS = (
    CheckoutStep("login", "Login", has_sidebar=False),
    CheckoutStep("order_information", "Order information", next_label="Continue"),
    CheckoutStep(
        "review",
        "Review",
        next_label="Continue to review",
        previous_label="Go back",
    ),
    CheckoutStep(
        "payment",
        "Payment",
        next_label="Pay and complete purchase",
        hidden=True,
    ),
    CheckoutStep(TERMINAL_STEP, "Complete", next_label="Complete checkout", has_sidebar=False),
)


class ResolutionKind(Enum):
    RENDER = "render"
    REDIRECT = "redirect"
    DENY = "deny"


@dataclass(frozen=True)
class StepResolution:
    kind: ResolutionKind
    step: CheckoutStep | None = None
    reason: str | None = None

    @classmethod
    def render(cls, step):
        return cls(ResolutionKind.RENDER, step)

    @classmethod
    def redirect(cls, step, reason=None):
        return cls(ResolutionKind.REDIRECT, step, reason)

    @classmethod
    def deny(cls, reason):
        return cls(ResolutionKind.DENY, None, reason)

    @property
    def step_id(self):
        return self.step.step_id if self.step else None


class CheckoutFlow:
    """Ordered checkout steps and the rules for moving between them.

    Step visibility is derived from the panes: a step is visible when at
    least one of its panes is visible to the actor for the order. The
    terminal step is always visible.
    """

    def __init__(self, config, panes, steps=DEFAULT_STEPS):
        step_ids = [step.step_id for step in steps]
        if len(set(step_ids)) != len(step_ids):
            raise ValueError("Checkout step ids must be unique")
        if not steps or steps[-1].step_id != TERMINAL_STEP:
            raise ValueError(f"The last checkout step must be '{TERMINAL_STEP}'")

        self.config = config
        self.panes = panes
        self.steps = tuple(steps)
        self._positions = {step_id: index for index, step_id in enumerate(step_ids)}

    @property
    def terminal_step(self):
        return self.steps[-1]

    def get_step(self, step_id):
        if step_id not in self._positions:
            raise StepNotFound(step_id)
        return self.steps[self._positions[step_id]]

    def position(self, step):
        return self._positions[step.step_id]

    def is_step_visible(self, step, order, actor):
        if step.step_id == TERMINAL_STEP:
            return True
        return bool(self.panes.visible_panes(step.step_id, order, actor))

    def visible_steps(self, order, actor):
        return [step for step in self.steps if self.is_step_visible(step, order, actor)]

    def current_step(self, order, actor):
        """The step the order is on, falling back to the first visible step."""
        if order.is_finished:
            return self.terminal_step

        for step in self.visible_steps(order, actor):
            if step.hidden or step.step_id == TERMINAL_STEP:
                continue
            if step.step_id == order.checkout_step:
                return step

        return self.first_step(order, actor)

    def first_step(self, order, actor):
        return next(
            step
            for step in self.visible_steps(order, actor)
            if not step.hidden
        )

    def next_step(self, order, actor, step=None):
        """The first visible step after ``step``, or None after the terminal step."""
        step = step or self.current_step(order, actor)
        for candidate in self.steps[self.position(step) + 1 :]:
            if self.is_step_visible(candidate, order, actor):
                return candidate
        return None

    def previous_step(self, order, actor, step=None):
        """The nearest visible, rendered step before ``step``."""
        step = step or self.current_step(order, actor)
        for candidate in reversed(self.steps[: self.position(step)]):
            if not candidate.hidden and self.is_step_visible(candidate, order, actor):
                return candidate
        return None

    def resolve(self, order, actor, requested_step_id=None):
        """Decide whether the requested step renders or redirects elsewhere.

        Raises StepNotFound for an unknown step id.
        """
        requested = self.get_step(requested_step_id) if requested_step_id else None
        current = self.current_step(order, actor)

        if order.is_finished:
            if requested is not None and requested.step_id == TERMINAL_STEP:
                return StepResolution.render(requested)
            return StepResolution.redirect(self.terminal_step, "finished")

        if requested is None:
            return StepResolution.redirect(current)
        if requested.step_id == current.step_id:
            return StepResolution.render(requested)
        if requested.hidden or not self.is_step_visible(requested, order, actor):
            return StepResolution.redirect(current, "unavailable")
        if self.position(requested) > self.position(current):
            return StepResolution.redirect(current, "ahead")
        if requested.previous_label:
            return StepResolution.render(requested)
        return StepResolution.redirect(current, "passed")
