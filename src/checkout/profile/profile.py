"""Customer profiles: billing and shipping addresses captured at checkout.

The profile panes talk to a ``ProfileStore``; the default store keeps
profiles in the checkout domain's repository.
"""

from abc import ABC, abstractmethod

from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from checkout.domain import checkout

ADDRESS_FIELD_MAX_LENGTHS = {
    "given_name": 255,
    "family_name": 255,
    "organization": 255,
    "address_line1": 255,
    "address_line2": 255,
    "postal_code": 20,
    "locality": 100,
    "administrative_area": 100,
    "country_code": 2,
}
ADDRESS_FIELDS = tuple(ADDRESS_FIELD_MAX_LENGTHS)

REQUIRED_ADDRESS_FIELDS = (
    "given_name",
    "family_name",
    "address_line1",
    "postal_code",
    "locality",
    "country_code",
)


@checkout.aggregate
class CustomerProfile:
    """A named postal address, owned by a customer or left anonymous for guests."""

    customer_id = Identifier()
    given_name = String(required=True, max_length=ADDRESS_FIELD_MAX_LENGTHS["given_name"])
    family_name = String(required=True, max_length=ADDRESS_FIELD_MAX_LENGTHS["family_name"])
    organization = String(max_length=ADDRESS_FIELD_MAX_LENGTHS["organization"])
    address_line1 = String(required=True, max_length=ADDRESS_FIELD_MAX_LENGTHS["address_line1"])
    address_line2 = String(max_length=ADDRESS_FIELD_MAX_LENGTHS["address_line2"])
    postal_code = String(required=True, max_length=ADDRESS_FIELD_MAX_LENGTHS["postal_code"])
    locality = String(required=True, max_length=ADDRESS_FIELD_MAX_LENGTHS["locality"])
    administrative_area = String(max_length=ADDRESS_FIELD_MAX_LENGTHS["administrative_area"])
    country_code = String(required=True, max_length=ADDRESS_FIELD_MAX_LENGTHS["country_code"], default="US")

    def to_address(self):
        return {name: getattr(self, name) for name in ADDRESS_FIELDS}


class ProfileStore(ABC):
    @abstractmethod
    def save(self, address: dict, customer_id: str | None = None, profile_id: str | None = None) -> str:
        """Create or update a profile and return its id."""
        ...

    @abstractmethod
    def get(self, profile_id: str) -> dict:
        ...


class RepositoryProfileStore(ProfileStore):
    def save(self, address, customer_id=None, profile_id=None):
        repo = current_domain.repository_for(CustomerProfile)
        values = {name: address.get(name) for name in ADDRESS_FIELDS if address.get(name) is not None}

        if profile_id:
            profile = repo.get(profile_id)
            for name in ADDRESS_FIELDS:
                setattr(profile, name, values.get(name))
            if customer_id:
                profile.customer_id = customer_id
        else:
            profile = CustomerProfile(customer_id=customer_id, **values)

        repo.add(profile)
        return str(profile.id)

    def get(self, profile_id):
        return current_domain.repository_for(CustomerProfile).get(profile_id).to_address()
