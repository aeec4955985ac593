"""Generic workflow engine: named states joined by named, guarded transitions.

A workflow never writes to the subject it evaluates. ``apply_transition``
answers which state the subject would move to, or raises ``GuardRejected``;
the subject performs the write itself.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from checkout.exceptions import GuardRejected, TransitionNotFound

# A guard returns the reason a transition is blocked, or None when it may proceed
Guard = Callable[[Any], str | None]


@dataclass(frozen=True)
class Transition:
    name: str
    label: str
    from_states: frozenset[str]
    to_state: str
    guard: Guard | None = None


class Workflow:
    def __init__(self, workflow_id: str, label: str, states: Iterable[str], transitions: Iterable[Transition]):
        self.workflow_id = workflow_id
        self.label = label
        self.states = tuple(states)
        self._transitions: dict[str, Transition] = {}

        for transition in transitions:
            unknown = (set(transition.from_states) | {transition.to_state}) - set(self.states)
            if unknown:
                raise ValueError(f"Transition {transition.name} references unknown states: {sorted(unknown)}")
            if transition.name in self._transitions:
                raise ValueError(f"Duplicate transition: {transition.name}")
            self._transitions[transition.name] = transition

    @property
    def transitions(self) -> tuple[Transition, ...]:
        return tuple(self._transitions.values())

    def get_transition(self, name: str) -> Transition:
        try:
            return self._transitions[name]
        except KeyError:
            raise TransitionNotFound(self.workflow_id, name) from None

    def allowed_transitions(self, state: str) -> list[Transition]:
        """Transitions whose source states include ``state``, guards not evaluated."""
        return [t for t in self._transitions.values() if state in t.from_states]

    def is_terminal(self, state: str) -> bool:
        return not self.allowed_transitions(state)

    def can_apply(self, subject, transition: Transition) -> bool:
        try:
            self.apply_transition(subject, transition)
        except GuardRejected:
            return False
        return True

    def apply_transition(self, subject, transition: Transition) -> str:
        """Return the state ``subject`` moves to when ``transition`` is applied."""
        current = subject.state
        if current not in transition.from_states:
            raise GuardRejected(transition.name, f"not allowed from the {current} state")

        if transition.guard is not None:
            reason = transition.guard(subject)
            if reason:
                raise GuardRejected(transition.name, reason)

        return transition.to_state
