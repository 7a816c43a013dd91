"""
Validated Account Entity

An account holds two balances and exposes exactly one way to change
them: set_account(), which commits both values together or nothing.

Construction policy:
- ValidatedAccount() starts at the minimum balances.
- ValidatedAccount(a, p) runs the same validation as set_account().
  A rule violation does NOT fail construction. The rejection is logged,
  kept on `creation_rejection`, and the account starts at the minimum
  balances instead.

Every construction path (default, with values, copy) increments the
live counter; release() or garbage collection decrements it once.
"""

import weakref
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from bank_account.accounts.counter import DEFAULT_COUNTER, LiveInstanceCounter
from bank_account.audit.logger import get_logger
from bank_account.models.account import (
    MIN_AVAILABLE_BALANCE,
    MIN_PRESENT_BALANCE,
    AccountRejection,
    AccountUpdateResult,
    Amount,
    Balances,
    to_amount,
)
from bank_account.validation import BalanceValidator


logger = get_logger(__name__)

_DEFAULT_VALIDATOR = BalanceValidator()


class ValidatedAccount:
    """
    A bank account with an available and a present balance.

    Invariants after any successful construction or update:
        available >= MIN_AVAILABLE_BALANCE
        present   >= MIN_PRESENT_BALANCE
        available <= present
    """

    MIN_AVAILABLE_BALANCE = MIN_AVAILABLE_BALANCE
    MIN_PRESENT_BALANCE = MIN_PRESENT_BALANCE

    def __init__(
        self,
        available: Optional[Amount] = None,
        present: Optional[Amount] = None,
        *,
        counter: Optional[LiveInstanceCounter] = None,
        validator: Optional[BalanceValidator] = None,
        report_defaults: bool = True,
    ):
        """
        Create an account.

        Args:
            available: Requested available balance (omit for defaults)
            present: Requested present balance (omit for defaults)
            counter: Live counter to register with. Defaults to the
                    process-wide DEFAULT_COUNTER.
            validator: Rules to apply. Defaults to the fixed minimums.
            report_defaults: Log a fallback to the minimums as a warning.
                    Owners that report the fallback themselves pass False
                    and the notice drops to debug.

        Raises:
            TypeError: If only one of the two balances is given
            InvalidAmountError: If a balance is not a number
        """
        if (available is None) != (present is None):
            raise TypeError("available and present must be given together")

        self._counter = counter if counter is not None else DEFAULT_COUNTER
        self._validator = validator if validator is not None else _DEFAULT_VALIDATOR
        self.account_id: UUID = uuid4()
        self._available = MIN_AVAILABLE_BALANCE
        self._present = MIN_PRESENT_BALANCE
        self.creation_rejection: Optional[AccountRejection] = None

        if available is not None:
            requested_available = to_amount(available)
            requested_present = to_amount(present)
            result = self.set_account(requested_available, requested_present)
            if not result.ok:
                # Rejected pairs leave the minimums in place
                self.creation_rejection = result.rejection
                notice = logger.warning if report_defaults else logger.debug
                notice(
                    "account_defaulted",
                    account_id=str(self.account_id),
                    kind=result.rejection.kind.value,
                    reason=result.rejection.message,
                    requested_available=str(requested_available),
                    requested_present=str(requested_present),
                )

        self._counter.increment()
        self._finalizer = weakref.finalize(self, self._counter.decrement)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def set_account(self, available: Amount, present: Amount) -> AccountUpdateResult:
        """
        Validated mutator.

        Returns an accepted result with the new balances, or a rejected
        result naming the first rule that failed. On rejection neither
        balance changes.

        Raises:
            InvalidAmountError: If a balance is not a number
        """
        new_available = to_amount(available)
        new_present = to_amount(present)

        rejection = self._validator.validate(new_available, new_present)
        if rejection is not None:
            return AccountUpdateResult.rejected(rejection)

        self._available, self._present = new_available, new_present
        return AccountUpdateResult.accepted(self.balances)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def available(self) -> Decimal:
        return self._available

    @property
    def present(self) -> Decimal:
        return self._present

    @property
    def balances(self) -> Balances:
        return Balances(available=self._available, present=self._present)

    @property
    def was_defaulted(self) -> bool:
        """True if construction fell back to the minimum balances."""
        return self.creation_rejection is not None

    @property
    def counter(self) -> LiveInstanceCounter:
        return self._counter

    @property
    def live_count(self) -> int:
        return self._counter.value

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def copy(self) -> "ValidatedAccount":
        """
        Independent account with the same balances.

        Registers with the same counter. Validation is not re-run since
        the source already satisfies the invariants.
        """
        clone = type(self)(counter=self._counter, validator=self._validator)
        clone._available = self._available
        clone._present = self._present
        return clone

    def __copy__(self) -> "ValidatedAccount":
        return self.copy()

    def __deepcopy__(self, memo: dict) -> "ValidatedAccount":
        return self.copy()

    def release(self) -> bool:
        """
        Decrement the live counter for this account.

        Safe to call more than once; only the first call counts.
        Returns True if this call did the release.
        """
        if not self._finalizer.alive:
            return False
        self._finalizer()
        return True

    @property
    def released(self) -> bool:
        return not self._finalizer.alive

    # -------------------------------------------------------------------------
    # Presentation
    # -------------------------------------------------------------------------

    def describe(self, currency_symbol: str = "$") -> str:
        return (
            f"Account{{ available: {currency_symbol}{self._available:.2f}, "
            f"present: {currency_symbol}{self._present:.2f} }}"
        )

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(available={self._available!r}, "
            f"present={self._present!r})"
        )


def get_live_count(counter: Optional[LiveInstanceCounter] = None) -> int:
    """Live accounts registered with `counter` (process-wide by default)."""
    return (counter if counter is not None else DEFAULT_COUNTER).value
