"""Order summary shown in the checkout sidebar.

The configured ``order_summary_view`` chooses how the summary is rendered;
an empty view turns the pane off.
"""

from checkout.config import DEFAULT_ORDER_SUMMARY_VIEW
from checkout.flow.panes.base import Pane

SIDEBAR = "_sidebar"


def _full_summary(order):
    return {
        "items": [
            {
                "title": item.title,
                "sku": item.sku,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "total_price": item.total_price,
            }
            for item in order.items
        ],
        "total_price": order.total_price,
        "currency": order.currency,
    }


def _compact_summary(order):
    return {
        "item_count": order.item_count,
        "total_price": order.total_price,
        "currency": order.currency,
    }


SUMMARY_VIEWS = {
    DEFAULT_ORDER_SUMMARY_VIEW: _full_summary,
    "checkout_order_summary_compact": _compact_summary,
}


class OrderSummaryPane(Pane):
    pane_id = "order_summary"
    label = "Order Summary"
    step_id = SIDEBAR

    def is_visible(self, order, actor):
        return bool(self.config.order_summary_view)

    def build(self, order, actor):
        view = self.config.order_summary_view
        return {"view": view, **SUMMARY_VIEWS[view](order)}
