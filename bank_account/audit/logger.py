"""
Audit Logger

Every account lifecycle step is logged. This provides:
1. Traceability of every create/update outcome
2. Debugging capability
3. An in-session history of what the user did

The audit logger:
- Is synchronous; the console has no event loop
- Gracefully handles storage failures (never crashes the session)
- Supports correlation IDs to tie the events of one session together
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from bank_account.models.account import AccountRejection
from bank_account.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from bank_account.services.storage import AuditStorageInterface, StorageError


def _processors(json_output: bool) -> list:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


# Configure structlog for local logging
structlog.configure(
    processors=_processors(json_output=True),
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def get_logger(name: Optional[str] = None):
    """Structured logger bound to the configuration above."""
    return structlog.get_logger(name)


def configure_logging(level: str = "WARNING", json_output: bool = True) -> None:
    """
    Route structured logs to stderr at `level`.

    stdout carries the interactive menu, so log lines never go there.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper()),
        force=True,
    )
    structlog.configure(
        processors=_processors(json_output=json_output),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for in-session history), if configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
        correlation_id: Optional[UUID] = None,
        environment: Optional[str] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for the audit trail.
                    If None, only logs locally.
            correlation_id: Stamped on every event that has none.
            environment: Recorded on the session start event.
        """
        self._storage = storage
        self._correlation_id = correlation_id
        self._environment = environment
        self._logger = structlog.get_logger()

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    @property
    def correlation_id(self) -> Optional[UUID]:
        return self._correlation_id

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        if event.correlation_id is None and self._correlation_id is not None:
            event = event.model_copy(update={"correlation_id": self._correlation_id})

        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage is not None:
            try:
                return self._storage.append_event(event)
            except StorageError as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_session_started(self) -> None:
        self.log(AuditEventBuilder.session_started(environment=self._environment))

    def log_session_ended(self, live_count: int) -> None:
        self.log(AuditEventBuilder.session_ended(live_count=live_count))

    def log_account_created(
        self,
        account_id: UUID,
        available,
        present,
    ) -> None:
        """Log a successful validated construction."""
        self.log(AuditEventBuilder.account_created(
            account_id=account_id,
            available=available,
            present=present,
        ))

    def log_account_defaulted(
        self,
        account_id: UUID,
        requested_available,
        requested_present,
        rejection: AccountRejection,
    ) -> None:
        """Log a construction that fell back to the minimum balances."""
        self.log(AuditEventBuilder.account_created_with_defaults(
            account_id=account_id,
            requested_available=requested_available,
            requested_present=requested_present,
            error_code=rejection.kind.value,
            error_message=rejection.message,
        ))

    def log_account_copied(self, source_id: UUID, copy_id: UUID) -> None:
        self.log(AuditEventBuilder.account_copied(
            source_id=source_id,
            copy_id=copy_id,
        ))

    def log_account_updated(self, account_id: UUID, before, after) -> None:
        self.log(AuditEventBuilder.account_updated(
            account_id=account_id,
            before=before,
            after=after,
        ))

    def log_update_rejected(
        self,
        account_id: UUID,
        requested_available,
        requested_present,
        rejection: AccountRejection,
    ) -> None:
        """Log an update that was blocked by a balance rule."""
        self.log(AuditEventBuilder.account_update_rejected(
            account_id=account_id,
            requested_available=requested_available,
            requested_present=requested_present,
            error_code=rejection.kind.value,
            error_message=rejection.message,
        ))

    def log_account_released(self, account_id: UUID, live_count: int) -> None:
        self.log(AuditEventBuilder.account_released(
            account_id=account_id,
            live_count=live_count,
        ))

    def log_input_rejected(self, prompt: str, error_message: str) -> None:
        self.log(AuditEventBuilder.input_rejected(
            prompt=prompt,
            error_message=error_message,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    One ID per console session.
    """
    return uuid4()
