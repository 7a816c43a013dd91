"""Shared pytest fixtures for account tests."""

from typing import Callable

import pytest

from bank_account.accounts import LiveInstanceCounter
from bank_account.audit import AuditLogger
from bank_account.config import get_settings
from bank_account.orchestrator import AccountBook
from bank_account.services.storage import InMemoryAuditStorage


@pytest.fixture
def counter() -> LiveInstanceCounter:
    """A fresh live counter, isolated from the process-wide one."""
    return LiveInstanceCounter()


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage(max_events=100)


@pytest.fixture
def book(counter: LiveInstanceCounter, audit_storage: InMemoryAuditStorage) -> AccountBook:
    """An empty account book auditing into memory."""
    return AccountBook(
        counter=counter,
        audit_logger=AuditLogger(storage=audit_storage),
    )


@pytest.fixture
def scripted_input() -> Callable[..., Callable[[str], str]]:
    """
    Build an input() replacement that answers with the given lines,
    then raises EOFError like a closed stdin.
    """
    def factory(*lines: str) -> Callable[[str], str]:
        remaining = iter(lines)

        def fake_input(prompt: str) -> str:
            try:
                return next(remaining)
            except StopIteration:
                raise EOFError from None

        return fake_input

    return factory


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
