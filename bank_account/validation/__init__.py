"""Validation package."""

from bank_account.validation.validator import BalanceValidator

__all__ = ["BalanceValidator"]
