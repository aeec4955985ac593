"""The default order workflow.

    draft ──start_checkout──▶ in_checkout ──place──▶ placed ──complete──▶ completed
      ▲                           │
      └───────return_to_cart──────┘
    draft / in_checkout / placed ──cancel──▶ canceled

``completed`` and ``canceled`` are terminal. Checkout is finished once the
order is placed.
"""

from enum import Enum

from checkout.workflow.workflow import Transition, Workflow


class OrderState(Enum):
    DRAFT = "draft"
    IN_CHECKOUT = "in_checkout"
    PLACED = "placed"
    COMPLETED = "completed"
    CANCELED = "canceled"


FINISHED_STATES = frozenset({OrderState.PLACED.value, OrderState.COMPLETED.value})


def _has_line_items(order):
    if not order.items:
        return "the order has no line items"
    return None


def _ready_to_place(order):
    if not order.items:
        return "the order has no line items"
    if (order.total_price or 0.0) > 0 and not order.payment_receipt_id:
        return "payment has not been captured"
    return None


order_workflow = Workflow(
    workflow_id="order_default",
    label="Default",
    states=[state.value for state in OrderState],
    transitions=[
        Transition(
            name="start_checkout",
            label="Start checkout",
            from_states=frozenset({OrderState.DRAFT.value}),
            to_state=OrderState.IN_CHECKOUT.value,
            guard=_has_line_items,
        ),
        Transition(
            name="return_to_cart",
            label="Return to cart",
            from_states=frozenset({OrderState.IN_CHECKOUT.value}),
            to_state=OrderState.DRAFT.value,
        ),
        Transition(
            name="place",
            label="Place order",
            from_states=frozenset({OrderState.DRAFT.value, OrderState.IN_CHECKOUT.value}),
            to_state=OrderState.PLACED.value,
            guard=_ready_to_place,
        ),
        Transition(
            name="complete",
            label="Complete",
            from_states=frozenset({OrderState.PLACED.value}),
            to_state=OrderState.COMPLETED.value,
        ),
        Transition(
            name="cancel",
            label="Cancel order",
            from_states=frozenset(
                {
                    OrderState.DRAFT.value,
                    OrderState.IN_CHECKOUT.value,
                    OrderState.PLACED.value,
                }
            ),
            to_state=OrderState.CANCELED.value,
        ),
    ],
)
