"""
Data Models Package

This package contains the Pydantic models used by the account entity,
the validator and the audit trail.
"""

from bank_account.models.account import (
    MIN_AVAILABLE_BALANCE,
    MIN_PRESENT_BALANCE,
    AccountErrorKind,
    AccountRejection,
    AccountUpdateResult,
    Balances,
    InvalidAmountError,
    to_amount,
)
from bank_account.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Account models
    "MIN_AVAILABLE_BALANCE",
    "MIN_PRESENT_BALANCE",
    "AccountErrorKind",
    "AccountRejection",
    "AccountUpdateResult",
    "Balances",
    "InvalidAmountError",
    "to_amount",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
