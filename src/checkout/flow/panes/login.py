"""Login step panes.

Anonymous customers choose one way through the login step: continue as a
guest, log in to an existing account, or create an account. The three panes
share the ``login`` exclusive group, so only the one whose namespace was
submitted is validated and applied.
"""

from checkout.exceptions import FieldViolation
from checkout.flow.panes.base import Pane, required

LOGIN_GROUP = "login"


class LoginPane(Pane):
    step_id = "login"
    exclusive_group = LOGIN_GROUP

    def is_visible(self, order, actor):
        return actor.is_anonymous

    @property
    def accounts(self):
        return self.registry.accounts


class GuestLoginPane(LoginPane):
    pane_id = "guest"
    label = "Guest Checkout"
    weight = 0
    submit_label = "Continue as Guest"

    def is_visible(self, order, actor):
        return super().is_visible(order, actor) and self.config.allow_guest_checkout

    def build(self, order, actor):
        return {"text": "Proceed to checkout. You can optionally create an account at the end."}


class ReturningCustomerPane(LoginPane):
    pane_id = "returning_customer"
    label = "Returning Customer"
    weight = 1
    submit_label = "Log in"

    def build(self, order, actor):
        return {"fields": ["username", "password"]}

    def validate(self, order, actor, values):
        violations = [
            v
            for v in (
                required(values, "username", "Username field is required."),
                required(values, "password", "Password field is required."),
            )
            if v
        ]
        if violations:
            return violations

        if self.accounts.authenticate(values["username"], values["password"]) is None:
            return [FieldViolation("username", "invalid", "Unrecognized username or password.")]
        return []

    def submit(self, order, actor, values):
        account = self.accounts.authenticate(values["username"], values["password"])
        order.assign_customer(str(account.id), account.email)


class RegistrationPane(LoginPane):
    pane_id = "register"
    label = "New Customer"
    weight = 2
    submit_label = "Create account and continue"

    def is_visible(self, order, actor):
        return super().is_visible(order, actor) and self.config.allow_registration

    def build(self, order, actor):
        return {"fields": ["email", "username", "password", "password_confirm"]}

    def validate(self, order, actor, values):
        return self.accounts.registration_violations(
            values.get("username"),
            values.get("email"),
            values.get("password"),
            values.get("password_confirm"),
        )

    def submit(self, order, actor, values):
        account_id = self.accounts.register(values["username"], values["email"], values["password"])
        order.assign_customer(account_id, values["email"].strip())
