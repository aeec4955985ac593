"""Who may see which checkout step of which order."""

from dataclasses import dataclass, field

from checkout.config import ACCESS_CHECKOUT, ADMINISTER_ORDERS
from checkout.flow.steps import ResolutionKind, StepResolution
from checkout.workflow.order_workflow import OrderState


@dataclass(frozen=True)
class Actor:
    """The person driving checkout: an account or an anonymous browser session."""

    user_id: str | None = None
    session_id: str | None = None
    permissions: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def anonymous(cls, session_id, permissions=(ACCESS_CHECKOUT,)):
        return cls(user_id=None, session_id=session_id, permissions=frozenset(permissions))

    @property
    def is_anonymous(self):
        return not self.user_id

    def has_permission(self, permission):
        return permission in self.permissions

    @property
    def is_administrator(self):
        return self.has_permission(ACCESS_CHECKOUT) and self.has_permission(ADMINISTER_ORDERS)


class AccessGuard:
    def __init__(self, flow):
        self.flow = flow

    def can_access(self, actor, order, step_id=None):
        return self.check(actor, order, step_id).kind is not ResolutionKind.DENY

    def check(self, actor, order, step_id=None) -> StepResolution:
        if not actor.has_permission(ACCESS_CHECKOUT):
            return StepResolution.deny("missing_permission")

        if actor.is_anonymous:
            if not (actor.session_id and order.session_id and actor.session_id == order.session_id):
                return StepResolution.deny("not_your_order")
        elif not actor.is_administrator and str(order.customer_id or "") != str(actor.user_id):
            return StepResolution.deny("not_your_order")

        if not order.items:
            return StepResolution.deny("empty")

        if order.state == OrderState.CANCELED.value:
            return StepResolution.deny("canceled")

        return self.flow.resolve(order, actor, step_id)
