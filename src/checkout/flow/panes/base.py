"""Checkout pane contract.

A pane is one self-contained unit of a checkout step: it decides whether it
is shown, describes its content, validates the values submitted under its own
``{pane_id}.`` namespace, and applies them to the order.

``validate`` must not change anything. ``submit`` is only called once every
pane of the step has validated cleanly.
"""

from checkout.exceptions import FieldViolation


class Pane:
    pane_id = ""
    label = ""
    step_id = ""
    weight = 0
    # Panes sharing a group are alternatives: exactly one is submitted at a time
    exclusive_group = None
    submit_label = None

    def __init__(self, registry):
        self.registry = registry

    @property
    def config(self):
        return self.registry.config

    def is_visible(self, order, actor) -> bool:
        return True

    def build(self, order, actor) -> dict:
        return {}

    def summary(self, order) -> dict | None:
        """What the review step shows for this pane, or None to show nothing."""
        return None

    def validate(self, order, actor, values) -> list[FieldViolation]:
        return []

    def submit(self, order, actor, values) -> None:
        pass

    def render(self, order, actor) -> dict:
        rendered = {
            "id": self.pane_id,
            "label": self.label,
            "content": self.build(order, actor),
        }
        if self.submit_label:
            rendered["submit_label"] = self.submit_label
        return rendered

    def __repr__(self):
        return f"<{type(self).__name__} {self.pane_id}@{self.step_id}>"


def required(values, field, message):
    """Violation for an empty required field, or None."""
    value = values.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        return FieldViolation(field, "required", message)
    return None
