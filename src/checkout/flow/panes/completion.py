from checkout.flow.panes.base import Pane


class CompletionMessagePane(Pane):
    pane_id = "completion_message"
    label = "Completion message"
    step_id = "complete"

    def is_visible(self, order, actor):
        return order.is_finished

    def build(self, order, actor):
        return {
            "order_number": order.order_number,
            "message": (
                f"Your order number is {order.order_number}. "
                "You can view your order on your account page when logged in."
            ),
        }
