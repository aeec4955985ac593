"""Checkout error kinds.

Field-level problems are reported through ``CheckoutValidationError``, a
Protean ``ValidationError`` whose ``messages`` are keyed by the submitted
``{pane}.{field}`` path. The remaining errors describe why a request could not
be carried out at all; none of them is raised after the order was persisted.
"""

from dataclasses import dataclass

from protean.exceptions import ValidationError


@dataclass(frozen=True)
class FieldViolation:
    """A single field-scoped validation failure."""

    field: str
    reason: str
    message: str

    def scoped(self, namespace: str) -> "FieldViolation":
        """Return the same violation with its field prefixed by ``namespace``."""
        return FieldViolation(field=f"{namespace}.{self.field}", reason=self.reason, message=self.message)


class CheckoutValidationError(ValidationError):
    """One or more field violations collected from a step submission."""

    def __init__(self, violations):
        self.violations = list(violations)
        messages = {}
        for violation in self.violations:
            messages.setdefault(violation.field, []).append(violation.message)
        super().__init__(messages)

    def reasons_for(self, field: str) -> list[str]:
        return [v.reason for v in self.violations if v.field == field]


class CheckoutError(Exception):
    """Base class for checkout failures that are not field validation."""


class AccessDenied(CheckoutError):
    """The actor may not view or act on the order at this step."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class StepNotFound(CheckoutError):
    def __init__(self, step_id: str):
        self.step_id = step_id
        super().__init__(f"Unknown checkout step: {step_id}")


class TransitionNotFound(CheckoutError):
    def __init__(self, workflow_id: str, transition: str):
        self.workflow_id = workflow_id
        self.transition = transition
        super().__init__(f"Workflow {workflow_id} has no transition named {transition}")


class GuardRejected(CheckoutError):
    """A workflow transition was blocked by its source state or its guard."""

    def __init__(self, transition: str, reason: str):
        self.transition = transition
        self.reason = reason
        super().__init__(f"Cannot apply {transition}: {reason}")


class ConcurrencyConflict(CheckoutError):
    """The order changed since the submitter read it."""

    def __init__(self, order_id: str, expected_revision: int, actual_revision: int):
        self.order_id = order_id
        self.expected_revision = expected_revision
        self.actual_revision = actual_revision
        super().__init__(
            f"Order {order_id} was modified (revision {actual_revision}, expected {expected_revision}). Please retry."
        )


class PaymentError(CheckoutError):
    """The payment gateway could not capture the order total."""
