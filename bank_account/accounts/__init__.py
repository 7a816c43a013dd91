"""Account entity package."""

from bank_account.accounts.counter import DEFAULT_COUNTER, LiveInstanceCounter
from bank_account.accounts.validated_account import ValidatedAccount, get_live_count

__all__ = [
    "DEFAULT_COUNTER",
    "LiveInstanceCounter",
    "ValidatedAccount",
    "get_live_count",
]
