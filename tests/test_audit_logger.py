"""Tests for the audit logger and its in-memory storage."""

import pytest
from uuid import uuid4

from bank_account.audit import AuditLogger, create_correlation_id
from bank_account.models.audit import AuditEvent, AuditEventBuilder, AuditEventType
from bank_account.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    StorageError,
)


class FailingStorage(AuditStorageInterface):
    """Storage that always fails to append."""

    def append_event(self, event: AuditEvent) -> bool:
        raise StorageError("disk on fire")

    def get_events(self, event_type=None, correlation_id=None, limit=100):
        return []


class TestAuditLogger:
    """Tests for AuditLogger.log."""

    def test_log_without_storage(self):
        """Test logging locally only reports success."""
        logger = AuditLogger()
        assert logger.log(AuditEventBuilder.session_started()) is True

    def test_log_appends_to_empty_storage(self):
        """Test the first event reaches a still-empty storage."""
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage=storage)
        assert logger.log(AuditEventBuilder.session_started()) is True
        assert len(storage) == 1

    def test_storage_failure_is_swallowed(self):
        """Test a failing storage never crashes the caller."""
        logger = AuditLogger(storage=FailingStorage())
        assert logger.log(AuditEventBuilder.session_started()) is False

    def test_correlation_id_is_stamped(self):
        """Test events without a correlation ID get the session's."""
        storage = InMemoryAuditStorage()
        correlation_id = create_correlation_id()
        logger = AuditLogger(storage=storage, correlation_id=correlation_id)

        logger.log_session_started()
        logger.log_account_released(account_id=uuid4(), live_count=0)

        events = storage.get_events(correlation_id=str(correlation_id))
        assert [e.event_type for e in events] == [
            AuditEventType.SESSION_STARTED,
            AuditEventType.ACCOUNT_RELEASED,
        ]

    def test_explicit_correlation_id_is_kept(self):
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage=storage, correlation_id=uuid4())
        own_id = uuid4()
        logger.log(AuditEventBuilder.session_started(correlation_id=own_id))
        assert storage.get_events()[0].correlation_id == own_id

    def test_input_rejected_event(self):
        storage = InMemoryAuditStorage()
        AuditLogger(storage=storage).log_input_rejected("Select:", "Not a number")
        event = storage.get_events(event_type=AuditEventType.INPUT_REJECTED)[0]
        assert event.error_message == "Not a number"
        assert event.is_user_action is True


class TestInMemoryAuditStorage:
    """Tests for the bounded in-memory storage."""

    def test_oldest_events_are_dropped(self):
        storage = InMemoryAuditStorage(max_events=2)
        for live_count in range(3):
            storage.append_event(
                AuditEventBuilder.session_ended(live_count=live_count)
            )
        assert [e.details["live_count"] for e in storage.get_events()] == [1, 2]

    def test_limit_returns_most_recent(self):
        storage = InMemoryAuditStorage()
        for live_count in range(5):
            storage.append_event(
                AuditEventBuilder.session_ended(live_count=live_count)
            )
        assert [e.details["live_count"] for e in storage.get_events(limit=2)] == [3, 4]

    @pytest.mark.parametrize("limit", [0, -1])
    def test_invalid_limit(self, limit):
        with pytest.raises(StorageError):
            InMemoryAuditStorage().get_events(limit=limit)

    def test_invalid_capacity(self):
        with pytest.raises(StorageError):
            InMemoryAuditStorage(max_events=0)
