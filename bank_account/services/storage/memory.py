"""
In-Memory Audit Storage

Keeps the most recent audit events for the lifetime of the process.
"""

from collections import deque
from typing import Optional

from bank_account.models.audit import AuditEvent, AuditEventType
from bank_account.services.storage.interface import AuditStorageInterface, StorageError


class InMemoryAuditStorage(AuditStorageInterface):
    """Bounded, process-lifetime audit storage."""

    def __init__(self, max_events: int = 1000):
        if max_events < 1:
            raise StorageError("max_events must be at least 1")
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events(
        self,
        event_type: Optional[AuditEventType] = None,
        correlation_id: Optional[str] = None,
        limit: int = 100,
    ) -> list[AuditEvent]:
        if limit <= 0:
            raise StorageError("limit must be > 0")

        events = [
            event for event in self._events
            if (event_type is None or event.event_type == event_type)
            and (
                correlation_id is None
                or str(event.correlation_id) == str(correlation_id)
            )
        ]
        return events[-limit:]

    def __len__(self) -> int:
        return len(self._events)
