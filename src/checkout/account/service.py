"""Account service for registration and authentication used by the login panes.

The login panes depend on the ``AccountService`` interface; the default
implementation stores accounts in the checkout domain's repository.
"""

from abc import ABC, abstractmethod

from protean.utils.globals import current_domain

from checkout.account.account import Account, name_problem, normalize_email, normalize_name
from checkout.account.passwords import hash_password, verify_password
from checkout.domain import logger
from checkout.exceptions import CheckoutValidationError, FieldViolation
from checkout.shared.email import is_valid_email


class AccountService(ABC):
    @abstractmethod
    def registration_violations(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
        password_confirm: str | None = None,
    ) -> list[FieldViolation]:
        """Everything that would make ``register`` fail, without registering."""
        ...

    @abstractmethod
    def register(self, name: str, email: str, password: str) -> str:
        """Create the account and return its id, or raise CheckoutValidationError."""
        ...

    @abstractmethod
    def authenticate(self, name_or_email: str, password: str) -> Account | None:
        ...


class RepositoryAccountService(AccountService):
    """Account service backed by the Account repository."""

    def _find(self, **filters):
        repo = current_domain.repository_for(Account)
        return repo._dao.query.filter(**filters).all().items

    def find_by_name(self, name):
        matches = self._find(name_key=normalize_name(name))
        return matches[0] if matches else None

    def find_by_email(self, email):
        matches = self._find(email=normalize_email(email))
        return matches[0] if matches else None

    def registration_violations(self, name, email, password, password_confirm=None):
        violations = []

        if not email:
            violations.append(FieldViolation("email", "required", "Email field is required."))
        elif not is_valid_email(email):
            violations.append(FieldViolation("email", "invalid", f"The email address {email} is not valid."))
        elif self.find_by_email(email) is not None:
            violations.append(FieldViolation("email", "taken", f"The email address {email} is already taken."))

        if not name:
            violations.append(FieldViolation("username", "required", "Username field is required."))
        else:
            problem = name_problem(name)
            if problem:
                reason, message = problem
                violations.append(FieldViolation("username", reason, message))
            elif self.find_by_name(name) is not None:
                violations.append(FieldViolation("username", "taken", f"The username {name} is already taken."))

        if not password:
            violations.append(FieldViolation("password", "required", "Password field is required."))
        elif password_confirm is not None and password != password_confirm:
            violations.append(FieldViolation("password_confirm", "mismatch", "The specified passwords do not match."))

        return violations

    def register(self, name, email, password):
        violations = self.registration_violations(name, email, password)
        if violations:
            raise CheckoutValidationError(violations)

        account = Account.register(name=name, email=email, password_hash=hash_password(password))
        current_domain.repository_for(Account).add(account)
        logger.info("account_registered", account_id=str(account.id))
        return str(account.id)

    def authenticate(self, name_or_email, password):
        if not name_or_email or not password:
            return None

        account = self.find_by_email(name_or_email) if "@" in name_or_email else None
        if account is None:
            account = self.find_by_name(name_or_email)

        if account is None or not account.is_active:
            return None
        if not verify_password(password, account.password_hash):
            return None
        return account
