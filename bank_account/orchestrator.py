"""
Main Orchestrator for Bank Account Console

This module ties the components together and defines the two account
flows the console offers:
1. Create (values → validate → commit, or fall back to defaults)
2. Update (values → validate → commit, or report and leave unchanged)

DESIGN DECISION: AccountBook is the composition root. It owns the
account collection, the live counter and the audit logger, and it is
where the swallow-vs-propagate decision is made:
- create_account() swallows a rule rejection into default balances
- update_account() hands the rejection back to its caller
"""

from typing import Iterator, Optional

from bank_account.accounts import LiveInstanceCounter, ValidatedAccount
from bank_account.audit import AuditLogger, create_correlation_id
from bank_account.config import Settings, get_settings
from bank_account.models.account import (
    AccountUpdateResult,
    Amount,
    Balances,
    to_amount,
)
from bank_account.services.storage import InMemoryAuditStorage
from bank_account.validation import BalanceValidator


class AccountBookError(Exception):
    """Base exception for account book errors."""
    pass


class AccountNotFoundError(AccountBookError):
    """No account at the requested index."""
    pass


class AccountBook:
    """
    Growable, ordered collection of accounts.

    Accounts are addressed by their position, as the console lists them.
    """

    def __init__(
        self,
        counter: Optional[LiveInstanceCounter] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[BalanceValidator] = None,
    ):
        self._counter = counter if counter is not None else LiveInstanceCounter()
        self._audit = audit_logger or AuditLogger()
        self._validator = validator or BalanceValidator()
        self._accounts: list[ValidatedAccount] = []

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def counter(self) -> LiveInstanceCounter:
        return self._counter

    @property
    def live_count(self) -> int:
        """Number of accounts constructed and not yet released."""
        return self._counter.value

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit

    @property
    def validator(self) -> BalanceValidator:
        return self._validator

    @property
    def is_empty(self) -> bool:
        return not self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[ValidatedAccount]:
        return iter(list(self._accounts))

    # -------------------------------------------------------------------------
    # Flows
    # -------------------------------------------------------------------------

    def create_account(self, available: Amount, present: Amount) -> ValidatedAccount:
        """
        Create an account from caller supplied balances and append it.

        A rule violation is not an error here: the account is created
        with the minimum balances and `account.creation_rejection`
        names the rule that failed.

        Raises:
            InvalidAmountError: If a balance is not a number
        """
        requested_available = to_amount(available)
        requested_present = to_amount(present)

        account = ValidatedAccount(
            requested_available,
            requested_present,
            counter=self._counter,
            validator=self._validator,
            report_defaults=False,
        )
        self._accounts.append(account)

        if account.creation_rejection is not None:
            self._audit.log_account_defaulted(
                account_id=account.account_id,
                requested_available=requested_available,
                requested_present=requested_present,
                rejection=account.creation_rejection,
            )
        else:
            self._audit.log_account_created(
                account_id=account.account_id,
                available=account.available,
                present=account.present,
            )
        return account

    def create_default_account(self) -> ValidatedAccount:
        """Append an account holding the minimum balances."""
        account = ValidatedAccount(counter=self._counter, validator=self._validator)
        self._accounts.append(account)
        self._audit.log_account_created(
            account_id=account.account_id,
            available=account.available,
            present=account.present,
        )
        return account

    def duplicate_account(self, index: int) -> ValidatedAccount:
        """
        Append an independent copy of the account at `index`.

        Raises:
            AccountNotFoundError: If there is no account at `index`
        """
        source = self.get_account(index)
        clone = source.copy()
        self._accounts.append(clone)
        self._audit.log_account_copied(
            source_id=source.account_id,
            copy_id=clone.account_id,
        )
        return clone

    def update_account(
        self,
        index: int,
        available: Amount,
        present: Amount,
    ) -> AccountUpdateResult:
        """
        Apply new balances to the account at `index`.

        The result is rejected if a rule failed; the account is then
        exactly as it was before the call.

        Raises:
            AccountNotFoundError: If there is no account at `index`
            InvalidAmountError: If a balance is not a number
        """
        account = self.get_account(index)
        requested_available = to_amount(available)
        requested_present = to_amount(present)
        before = (account.available, account.present)

        result = account.set_account(requested_available, requested_present)

        if result.ok:
            self._audit.log_account_updated(
                account_id=account.account_id,
                before=before,
                after=(account.available, account.present),
            )
        else:
            self._audit.log_update_rejected(
                account_id=account.account_id,
                requested_available=requested_available,
                requested_present=requested_present,
                rejection=result.rejection,
            )
        return result

    def get_account(self, index: int) -> ValidatedAccount:
        """
        Raises:
            AccountNotFoundError: If there is no account at `index`
        """
        if not 0 <= index < len(self._accounts):
            raise AccountNotFoundError(f"No account at index {index}")
        return self._accounts[index]

    def list_accounts(self) -> list[tuple[int, ValidatedAccount]]:
        return list(enumerate(self._accounts))

    def remove_account(self, index: int) -> Balances:
        """
        Release the account at `index` and drop it from the book.

        Returns the balances it held.

        Raises:
            AccountNotFoundError: If there is no account at `index`
        """
        account = self.get_account(index)
        del self._accounts[index]
        balances = account.balances
        account.release()
        self._audit.log_account_released(
            account_id=account.account_id,
            live_count=self.live_count,
        )
        return balances

    def close(self) -> None:
        """Release every account still held."""
        while self._accounts:
            self.remove_account(len(self._accounts) - 1)


def create_app_components(settings: Optional[Settings] = None) -> AccountBook:
    """
    Build the account book with its counter, audit logger and storage.

    Args:
        settings: Defaults to get_settings()
    """
    settings = settings or get_settings()

    storage = InMemoryAuditStorage(max_events=settings.app.audit_history_limit)
    audit_logger = AuditLogger(
        storage=storage,
        correlation_id=create_correlation_id(),
        environment=settings.app.app_environment,
    )

    return AccountBook(
        counter=LiveInstanceCounter(),
        audit_logger=audit_logger,
        validator=BalanceValidator(),
    )
