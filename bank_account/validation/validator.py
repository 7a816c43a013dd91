"""
Balance Validation

Three ordered rules guard every pair of balances:

1. available must not be below MIN_AVAILABLE_BALANCE
2. present must not be below MIN_PRESENT_BALANCE
3. available must not exceed present

The first failing rule wins. The order is part of the contract:
(3, 2) is reported as AVAILABLE_BELOW_MINIMUM, never as
AVAILABLE_EXCEEDS_PRESENT.

IMPORTANT: Validation NEVER fixes values. It reports the violation
and leaves the decision to the caller.
"""

from decimal import Decimal
from typing import Optional

from bank_account.models.account import (
    MIN_AVAILABLE_BALANCE,
    MIN_PRESENT_BALANCE,
    AccountErrorKind,
    AccountRejection,
)


class BalanceValidator:
    """Checks an (available, present) pair against the fixed minimums."""

    def __init__(
        self,
        min_available: Decimal = MIN_AVAILABLE_BALANCE,
        min_present: Decimal = MIN_PRESENT_BALANCE,
    ):
        self._min_available = min_available
        self._min_present = min_present

    @property
    def min_available(self) -> Decimal:
        return self._min_available

    @property
    def min_present(self) -> Decimal:
        return self._min_present

    def validate(
        self,
        available: Decimal,
        present: Decimal,
    ) -> Optional[AccountRejection]:
        """
        Run the rules in order.

        Args:
            available: Proposed available balance
            present: Proposed present balance

        Returns:
            None if the pair is valid, otherwise the first violation
        """
        if available < self._min_available:
            return AccountRejection(
                kind=AccountErrorKind.AVAILABLE_BELOW_MINIMUM,
                message=f"Available balance below minimum ${self._min_available:.2f}",
            )

        if present < self._min_present:
            return AccountRejection(
                kind=AccountErrorKind.PRESENT_BELOW_MINIMUM,
                message=f"Present balance below minimum ${self._min_present:.2f}",
            )

        if available > present:
            return AccountRejection(
                kind=AccountErrorKind.AVAILABLE_EXCEEDS_PRESENT,
                message="Available balance cannot exceed present balance",
            )

        return None

    def is_valid(self, available: Decimal, present: Decimal) -> bool:
        return self.validate(available, present) is None

    def describe_rejection(self, rejection: AccountRejection) -> str:
        """
        One-line, user-facing summary of a rejection.
        """
        hints = {
            AccountErrorKind.AVAILABLE_BELOW_MINIMUM: (
                f"available must be at least ${self._min_available:.2f}"
            ),
            AccountErrorKind.PRESENT_BELOW_MINIMUM: (
                f"present must be at least ${self._min_present:.2f}"
            ),
            AccountErrorKind.AVAILABLE_EXCEEDS_PRESENT: (
                "available must not be greater than present"
            ),
        }
        hint = hints.get(rejection.kind)
        if hint is None:
            return rejection.message
        return f"{rejection.message} ({hint})"
