"""Tests for AccountBook flows and their audit trail."""

import pytest
from decimal import Decimal
from structlog.testing import capture_logs

from bank_account.config import get_settings
from bank_account.models.account import AccountErrorKind, Balances, InvalidAmountError
from bank_account.models.audit import AuditEventType, AuditSeverity
from bank_account.orchestrator import (
    AccountBook,
    AccountBookError,
    AccountNotFoundError,
    create_app_components,
)
from bank_account.services.storage import InMemoryAuditStorage


class TestCreateFlow:
    """Tests for the construction path."""

    def test_create_valid_account(self, book, audit_storage):
        """Test a valid pair is kept and audited as created."""
        account = book.create_account(10, 20)
        assert (account.available, account.present) == (10, 20)
        assert len(book) == 1
        assert book.live_count == 1

        events = audit_storage.get_events(event_type=AuditEventType.ACCOUNT_CREATED)
        assert len(events) == 1
        assert events[0].entity_id == account.account_id

    def test_create_swallows_rejection(self, book, audit_storage):
        """Test a rule violation still yields a usable default account."""
        account = book.create_account(3, 20)
        assert account.balances == Balances.defaults()
        assert account.creation_rejection.kind == AccountErrorKind.AVAILABLE_BELOW_MINIMUM
        assert len(book) == 1

        events = audit_storage.get_events(
            event_type=AuditEventType.ACCOUNT_CREATED_WITH_DEFAULTS
        )
        assert len(events) == 1
        assert events[0].severity == AuditSeverity.WARNING
        assert events[0].error_code == "available_below_minimum"
        assert events[0].details["requested_available"] == "3"

    def test_rejected_create_warns_once(self, book):
        """Test a defaulted create leaves the audit event as the only warning."""
        with capture_logs() as logs:
            book.create_account(20, 10)

        warnings = [entry for entry in logs if entry["log_level"] == "warning"]
        assert len(warnings) == 1
        assert warnings[0]["event_type"] == "account_created_with_defaults"
        assert warnings[0]["error_message"] == "Available balance cannot exceed present balance"

    def test_create_with_infinite_balances(self, book, audit_storage):
        valid = book.create_account(10, float("inf"))
        defaulted = book.create_account(float("inf"), 10)
        assert valid.present == Decimal("Infinity")
        assert defaulted.creation_rejection.kind == AccountErrorKind.AVAILABLE_EXCEEDS_PRESENT
        assert book.live_count == 2

        events = audit_storage.get_events(
            event_type=AuditEventType.ACCOUNT_CREATED_WITH_DEFAULTS
        )
        assert events[0].details["requested_available"] == "Infinity"

    def test_create_default_account(self, book):
        account = book.create_default_account()
        assert account.balances == Balances.defaults()
        assert book.live_count == 1

    def test_create_malformed_amount_raises(self, book):
        """Test malformed input is not swallowed like a rule violation."""
        with pytest.raises(InvalidAmountError):
            book.create_account("abc", 20)
        assert book.is_empty
        assert book.live_count == 0


class TestUpdateFlow:
    """Tests for the update path."""

    def test_update_succeeds(self, book, audit_storage):
        """Test a valid update commits and is audited with before/after."""
        book.create_account(10, 20)
        result = book.update_account(0, 15, 30)
        assert result.ok is True
        account = book.get_account(0)
        assert (account.available, account.present) == (15, 30)

        event = audit_storage.get_events(event_type=AuditEventType.ACCOUNT_UPDATED)[0]
        assert event.details == {"before": ["10", "20"], "after": ["15", "30"]}

    def test_update_rejection_propagates(self, book, audit_storage):
        """Test a rejected update is returned and leaves the account unchanged."""
        book.create_account(10, 20)
        result = book.update_account(0, 1, 20)
        assert result.ok is False
        assert result.kind == AccountErrorKind.AVAILABLE_BELOW_MINIMUM
        assert book.get_account(0).balances == Balances(
            available=Decimal("10"), present=Decimal("20")
        )

        events = audit_storage.get_events(
            event_type=AuditEventType.ACCOUNT_UPDATE_REJECTED
        )
        assert len(events) == 1
        assert events[0].error_message == "Available balance below minimum $5.00"

    @pytest.mark.parametrize("index", [-1, 1, 99])
    def test_update_unknown_index(self, book, index):
        book.create_account(10, 20)
        with pytest.raises(AccountNotFoundError):
            book.update_account(index, 15, 30)

    def test_not_found_is_book_error(self, book):
        with pytest.raises(AccountBookError):
            book.get_account(0)


class TestCollection:
    """Tests for listing, duplicating and removing accounts."""

    def test_list_accounts_with_index(self, book):
        first = book.create_account(10, 20)
        second = book.create_account(6, 7)
        assert book.list_accounts() == [(0, first), (1, second)]
        assert list(book) == [first, second]

    def test_duplicate_account(self, book, audit_storage):
        """Test duplicating appends an independent copy and counts it."""
        book.create_account(10, 20)
        clone = book.duplicate_account(0)
        assert len(book) == 2
        assert book.live_count == 2
        assert clone.balances == book.get_account(0).balances

        book.update_account(1, 15, 30)
        assert book.get_account(0).available == 10
        assert len(audit_storage.get_events(event_type=AuditEventType.ACCOUNT_COPIED)) == 1

    def test_remove_account_releases(self, book, audit_storage):
        """Test create 3, remove 1: live count reads 2."""
        for available in (10, 11, 12):
            book.create_account(available, 20)
        removed = book.remove_account(1)
        assert removed.available == 11
        assert len(book) == 2
        assert book.live_count == 2

        event = audit_storage.get_events(event_type=AuditEventType.ACCOUNT_RELEASED)[0]
        assert event.details == {"live_count": 2}

    def test_close_releases_everything(self, book):
        book.create_account(10, 20)
        book.create_account(3, 20)
        book.close()
        assert book.is_empty
        assert book.live_count == 0


class TestCreateAppComponents:
    """Tests for the composition root factory."""

    def test_components_use_settings(self, monkeypatch):
        """Test the audit history limit comes from settings."""
        monkeypatch.setenv("BANK_ACCOUNT_AUDIT_HISTORY_LIMIT", "2")
        book = create_app_components(get_settings())
        assert isinstance(book, AccountBook)
        assert isinstance(book.audit_logger.storage, InMemoryAuditStorage)
        assert book.audit_logger.correlation_id is not None

        for _ in range(3):
            book.create_account(10, 20)
        assert len(book.audit_logger.storage) == 2

    def test_session_start_records_environment(self, monkeypatch):
        monkeypatch.setenv("BANK_ACCOUNT_APP_ENVIRONMENT", "staging")
        book = create_app_components()
        book.audit_logger.log_session_started()

        [event] = book.audit_logger.storage.get_events(
            event_type=AuditEventType.SESSION_STARTED
        )
        assert event.details == {"environment": "staging"}

    def test_books_have_separate_counters(self):
        first = create_app_components()
        second = create_app_components()
        first.create_account(10, 20)
        assert first.live_count == 1
        assert second.live_count == 0
