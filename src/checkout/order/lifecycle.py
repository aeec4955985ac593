"""Order lifecycle outside of the checkout steps — commands and handler.

``StartCheckout`` is what the cart's "Checkout" button issues; its optional
first step must be one of the flow's steps. ``CancelOrder`` and
``CompleteOrder`` are issued by back-office tooling once an order exists.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from checkout.domain import checkout, logger
from checkout.flow import get_checkout_flow
from checkout.order.order import Order
from checkout.workflow.order_workflow import OrderState


@checkout.command(part_of="Order")
class StartCheckout:
    order_id = Identifier(required=True)
    first_step = String(max_length=50)


@checkout.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    reason = String(max_length=500)


@checkout.command(part_of="Order")
class CompleteOrder:
    order_id = Identifier(required=True)


@checkout.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(StartCheckout)
    def start_checkout(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if order.state == OrderState.DRAFT.value:
            order.apply_transition("start_checkout")
        if command.first_step and not order.checkout_step:
            step = get_checkout_flow().get_step(command.first_step)
            order.move_to_step(step.step_id)
        repo.add(order)

    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel()
        repo.add(order)
        logger.info("order_canceled", order_id=str(order.id), reason=command.reason)

    @handle(CompleteOrder)
    def complete_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.complete()
        repo.add(order)
