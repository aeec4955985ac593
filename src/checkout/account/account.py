"""Customer accounts created or used during checkout."""

import re
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String

from checkout.domain import checkout

NAME_MAX_LENGTH = 60

# Letters and digits in any script, plus space . @ + ' - _
_ALLOWED_NAME = re.compile(r"^[\w .@+'-]+$")


class AccountStatus(Enum):
    ACTIVE = "Active"
    BLOCKED = "Blocked"


@checkout.event(part_of="Account")
class AccountRegistered:
    __version__ = 1

    account_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    registered_at = DateTime(required=True)


@checkout.aggregate
class Account:
    name = String(required=True, max_length=NAME_MAX_LENGTH)
    name_key = String(required=True, max_length=NAME_MAX_LENGTH)  # case-folded, for uniqueness
    email = String(required=True, max_length=254)
    password_hash = String(required=True, max_length=255)
    status = String(choices=AccountStatus, default=AccountStatus.ACTIVE.value)
    registered_at = DateTime()

    @classmethod
    def register(cls, name, email, password_hash):
        now = datetime.now(UTC)
        account = cls(
            name=name,
            name_key=normalize_name(name),
            email=normalize_email(email),
            password_hash=password_hash,
            status=AccountStatus.ACTIVE.value,
            registered_at=now,
        )
        account.raise_(
            AccountRegistered(
                account_id=str(account.id),
                name=account.name,
                email=account.email,
                registered_at=now,
            )
        )
        return account

    @property
    def is_active(self):
        return self.status == AccountStatus.ACTIVE.value


def normalize_name(name):
    return name.casefold()


def normalize_email(email):
    return email.strip().lower()


def name_problem(name):
    """Return ``(reason, message)`` describing what is wrong with ``name``, or None."""
    if name.startswith(" "):
        return "leading_space", "The username cannot begin with a space."
    if name.endswith(" "):
        return "trailing_space", "The username cannot end with a space."
    if "  " in name:
        return "multiple_spaces", "The username cannot contain multiple spaces in a row."
    if not _ALLOWED_NAME.match(name):
        return "illegal_character", "The username contains an illegal character."
    if len(name) > NAME_MAX_LENGTH:
        return "too_long", f"The username {name} is too long: it must be {NAME_MAX_LENGTH} characters or less."
    return None
