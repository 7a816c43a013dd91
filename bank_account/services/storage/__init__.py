"""Audit storage package."""

from bank_account.services.storage.interface import AuditStorageInterface, StorageError
from bank_account.services.storage.memory import InMemoryAuditStorage

__all__ = [
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "StorageError",
]
