from checkout.exceptions import FieldViolation
from checkout.flow.panes.base import Pane, required
from checkout.shared.email import is_valid_email


class ContactInformationPane(Pane):
    """Contact e-mail for guest orders. Customers with an account already have one."""

    pane_id = "contact_information"
    label = "Contact information"
    step_id = "order_information"
    weight = 0

    def is_visible(self, order, actor):
        return order.is_guest

    def build(self, order, actor):
        return {"email": order.email}

    def summary(self, order):
        return {"email": order.email}

    def validate(self, order, actor, values):
        missing = required(values, "email", "Email field is required.")
        if missing:
            return [missing]

        email = values["email"].strip()
        if not is_valid_email(email):
            return [FieldViolation("email", "invalid", f"The email address {email} is not valid.")]

        confirm = values.get("email_confirm")
        if confirm is not None and confirm.strip() != email:
            return [FieldViolation("email_confirm", "mismatch", "The specified email addresses do not match.")]
        return []

    def submit(self, order, actor, values):
        order.record_contact_email(values["email"].strip())
