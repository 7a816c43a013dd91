"""
Abstract Audit Storage Interface

DESIGN DECISION: The audit logger writes through an abstract interface.
Only an in-memory implementation ships; nothing outlives the process.
"""

from abc import ABC, abstractmethod
from typing import Optional

from bank_account.models.audit import AuditEvent, AuditEventType


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event.

        Args:
            event: The audit event to store

        Returns:
            True if stored successfully

        Raises:
            StorageError: If the append fails
        """
        pass

    @abstractmethod
    def get_events(
        self,
        event_type: Optional[AuditEventType] = None,
        correlation_id: Optional[str] = None,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Retrieve audit events, oldest first.

        Args:
            event_type: Filter by event type
            correlation_id: Filter by correlation ID
            limit: Maximum events to return (most recent ones)
        """
        pass


class StorageError(Exception):
    """Base exception for storage errors."""
    pass
