"""Tests for the generic workflow engine and the default order workflow."""

from types import SimpleNamespace

import pytest
from checkout.exceptions import GuardRejected, TransitionNotFound
from checkout.workflow.order_workflow import OrderState, order_workflow
from checkout.workflow.workflow import Transition, Workflow


def _subject(state, items=("item",), total_price=10.0, payment_receipt_id=None):
    return SimpleNamespace(
        state=state,
        items=list(items),
        total_price=total_price,
        payment_receipt_id=payment_receipt_id,
    )


class TestWorkflowDefinition:
    def test_rejects_transition_to_unknown_state(self):
        with pytest.raises(ValueError, match="unknown states"):
            Workflow(
                "broken",
                "Broken",
                states=["a", "b"],
                transitions=[Transition("go", "Go", frozenset({"a"}), "c")],
            )

    def test_rejects_duplicate_transition_names(self):
        with pytest.raises(ValueError, match="Duplicate transition"):
            Workflow(
                "broken",
                "Broken",
                states=["a", "b"],
                transitions=[
                    Transition("go", "Go", frozenset({"a"}), "b"),
                    Transition("go", "Go again", frozenset({"b"}), "a"),
                ],
            )

    def test_unknown_transition_raises(self):
        with pytest.raises(TransitionNotFound) as exc:
            order_workflow.get_transition("teleport")
        assert exc.value.transition == "teleport"
        assert exc.value.workflow_id == "order_default"


class TestOrderWorkflowTransitions:
    def test_start_checkout_from_draft(self):
        transition = order_workflow.get_transition("start_checkout")
        assert order_workflow.apply_transition(_subject("draft"), transition) == "in_checkout"

    def test_start_checkout_requires_line_items(self):
        transition = order_workflow.get_transition("start_checkout")
        with pytest.raises(GuardRejected) as exc:
            order_workflow.apply_transition(_subject("draft", items=()), transition)
        assert exc.value.reason == "the order has no line items"

    def test_place_requires_captured_payment_for_non_zero_total(self):
        transition = order_workflow.get_transition("place")
        with pytest.raises(GuardRejected) as exc:
            order_workflow.apply_transition(_subject("in_checkout"), transition)
        assert exc.value.reason == "payment has not been captured"

    def test_place_with_captured_payment(self):
        transition = order_workflow.get_transition("place")
        subject = _subject("in_checkout", payment_receipt_id="rcpt-1")
        assert order_workflow.apply_transition(subject, transition) == "placed"

    def test_place_free_order_without_payment(self):
        transition = order_workflow.get_transition("place")
        assert order_workflow.apply_transition(_subject("draft", total_price=0.0), transition) == "placed"

    def test_transition_from_wrong_state_is_rejected(self):
        transition = order_workflow.get_transition("complete")
        with pytest.raises(GuardRejected) as exc:
            order_workflow.apply_transition(_subject("in_checkout"), transition)
        assert "in_checkout" in exc.value.reason

    def test_apply_transition_does_not_write(self):
        subject = _subject("draft")
        order_workflow.apply_transition(subject, order_workflow.get_transition("start_checkout"))
        assert subject.state == "draft"

    @pytest.mark.parametrize("state", ["draft", "in_checkout", "placed"])
    def test_cancel_is_allowed_before_completion(self, state):
        transition = order_workflow.get_transition("cancel")
        assert order_workflow.apply_transition(_subject(state), transition) == "canceled"


class TestOrderWorkflowStates:
    @pytest.mark.parametrize("state", [OrderState.COMPLETED.value, OrderState.CANCELED.value])
    def test_terminal_states_have_no_transitions(self, state):
        assert order_workflow.is_terminal(state)
        assert order_workflow.allowed_transitions(state) == []

    def test_allowed_transitions_from_in_checkout(self):
        names = {t.name for t in order_workflow.allowed_transitions("in_checkout")}
        assert names == {"return_to_cart", "place", "cancel"}

    def test_can_apply_reports_guard_result(self):
        transition = order_workflow.get_transition("start_checkout")
        assert order_workflow.can_apply(_subject("draft"), transition)
        assert not order_workflow.can_apply(_subject("draft", items=()), transition)
