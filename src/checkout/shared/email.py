"""EmailAddress value object, shared by the contact and account panes."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from checkout.domain import checkout

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def _invalid(email):
    return ValidationError({"address": [f"Invalid email address: {email!r}"]})


@checkout.value_object
class EmailAddress:
    """A structurally valid e-mail address.

    Exactly one @, non-empty local and dotted domain parts, no whitespace,
    consecutive dots, hyphen-edged domain labels or forbidden characters.
    """

    address: String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        email = self.address

        if any(ch.isspace() for ch in email) or email.count("@") != 1:
            raise _invalid(email)

        local_part, domain_part = email.split("@", 1)

        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise _invalid(email)

        if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise _invalid(email)

        if "." not in domain_part or ".." in local_part or ".." in domain_part:
            raise _invalid(email)

        for label in domain_part.split("."):
            if label.startswith("-") or label.endswith("-"):
                raise _invalid(email)

        if any(ch in email for ch in _FORBIDDEN):
            raise _invalid(email)


def is_valid_email(email: str | None) -> bool:
    if not email:
        return False
    try:
        EmailAddress(address=email)
    except (ValidationError, ValueError):
        return False
    return True
