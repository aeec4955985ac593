"""Pane registry: the closed set of checkout panes, looked up by step."""

from checkout.account.service import RepositoryAccountService
from checkout.flow.panes.completion import CompletionMessagePane
from checkout.flow.panes.contact import ContactInformationPane
from checkout.flow.panes.login import GuestLoginPane, RegistrationPane, ReturningCustomerPane
from checkout.flow.panes.payment import PaymentProcessPane
from checkout.flow.panes.profile import BillingInformationPane, ShippingInformationPane
from checkout.flow.panes.review import ReviewPane
from checkout.flow.panes.summary import SIDEBAR, OrderSummaryPane
from checkout.profile.profile import RepositoryProfileStore

DEFAULT_PANES = (
    GuestLoginPane,
    ReturningCustomerPane,
    RegistrationPane,
    ContactInformationPane,
    BillingInformationPane,
    ShippingInformationPane,
    ReviewPane,
    PaymentProcessPane,
    CompletionMessagePane,
    OrderSummaryPane,
)


class PaneRegistry:
    def __init__(self, config, pane_classes=DEFAULT_PANES, accounts=None, profiles=None):
        self.config = config
        self.accounts = accounts or RepositoryAccountService()
        self.profiles = profiles or RepositoryProfileStore()

        self._panes = {}
        for pane_class in pane_classes:
            pane = pane_class(self)
            if pane.pane_id in self._panes:
                raise ValueError(f"Duplicate checkout pane: {pane.pane_id}")
            self._panes[pane.pane_id] = pane

    @property
    def panes(self):
        return list(self._panes.values())

    def get(self, pane_id):
        return self._panes[pane_id]

    def panes_for_step(self, step_id):
        return sorted(
            (pane for pane in self._panes.values() if pane.step_id == step_id),
            key=lambda pane: pane.weight,
        )

    def visible_panes(self, step_id, order, actor):
        return [pane for pane in self.panes_for_step(step_id) if pane.is_visible(order, actor)]

    def sidebar_panes(self, order, actor):
        return self.visible_panes(SIDEBAR, order, actor)
