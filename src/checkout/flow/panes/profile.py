"""Billing and shipping address panes, stored through the profile store."""

from checkout.exceptions import FieldViolation
from checkout.flow.panes.base import Pane, required
from checkout.profile.profile import ADDRESS_FIELD_MAX_LENGTHS, ADDRESS_FIELDS, REQUIRED_ADDRESS_FIELDS

FIELD_LABELS = {
    "given_name": "First name",
    "family_name": "Last name",
    "organization": "Company",
    "address_line1": "Street address",
    "address_line2": "Street address line 2",
    "postal_code": "Postal code",
    "locality": "City",
    "administrative_area": "State",
    "country_code": "Country",
}

DEFAULT_COUNTRY = "US"


class ProfilePane(Pane):
    step_id = "order_information"
    profile_attribute = ""

    @property
    def profiles(self):
        return self.registry.profiles

    def _attach(self, order, profile_id):
        raise NotImplementedError

    def _address_values(self, values):
        address = {name: values.get(name) for name in ADDRESS_FIELDS if values.get(name)}
        address.setdefault("country_code", DEFAULT_COUNTRY)
        return address

    def build(self, order, actor):
        profile_id = getattr(order, self.profile_attribute)
        address = self.profiles.get(profile_id) if profile_id else {}
        return {
            "fields": [
                {"name": name, "label": FIELD_LABELS[name], "value": address.get(name)}
                for name in ADDRESS_FIELDS
            ]
        }

    def summary(self, order):
        profile_id = getattr(order, self.profile_attribute)
        if not profile_id:
            return None
        return self.profiles.get(profile_id)

    def validate(self, order, actor, values):
        address = self._address_values(values)
        violations = [
            violation
            for violation in (
                required(address, name, f"{FIELD_LABELS[name]} field is required.")
                for name in REQUIRED_ADDRESS_FIELDS
            )
            if violation
        ]

        for name, value in address.items():
            limit = ADDRESS_FIELD_MAX_LENGTHS[name]
            if len(str(value)) > limit:
                violations.append(
                    FieldViolation(
                        name,
                        "too_long",
                        f"{FIELD_LABELS[name]} cannot be longer than {limit} characters.",
                    )
                )
        return violations

    def submit(self, order, actor, values):
        profile_id = self.profiles.save(
            self._address_values(values),
            customer_id=order.customer_id,
            profile_id=getattr(order, self.profile_attribute),
        )
        self._attach(order, profile_id)


class BillingInformationPane(ProfilePane):
    pane_id = "billing_information"
    label = "Billing information"
    weight = 1
    profile_attribute = "billing_profile_id"

    def _attach(self, order, profile_id):
        order.attach_billing_profile(profile_id)


class ShippingInformationPane(ProfilePane):
    pane_id = "shipping_information"
    label = "Shipping information"
    weight = 2
    profile_attribute = "shipping_profile_id"

    def is_visible(self, order, actor):
        return self.config.collect_shipping

    def _attach(self, order, profile_id):
        order.attach_shipping_profile(profile_id)
