"""
Audit Models for Bank Account Console

Every account lifecycle step (create, update, release) produces an
audit event. Events are kept for the lifetime of the process only.

DESIGN DECISION: Audit events are append-only. We never modify them
after they are logged.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Session
    SESSION_STARTED = "session_started"
    SESSION_ENDED = "session_ended"

    # Account lifecycle
    ACCOUNT_CREATED = "account_created"
    ACCOUNT_CREATED_WITH_DEFAULTS = "account_created_with_defaults"
    ACCOUNT_COPIED = "account_copied"
    ACCOUNT_UPDATED = "account_updated"
    ACCOUNT_UPDATE_REJECTED = "account_update_rejected"
    ACCOUNT_RELEASED = "account_released"

    # Driver
    INPUT_REJECTED = "input_rejected"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which account is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'session')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - all events of one console session share an ID
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


def _money(value: Decimal) -> str:
    return f"{value:.2f}"


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.account_created(account_id, available, present)
        event = AuditEventBuilder.account_update_rejected(account_id, ...)
    """

    @staticmethod
    def session_started(
        environment: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_STARTED,
            entity_type="session",
            correlation_id=correlation_id,
            description="Console session started",
            details={"environment": environment} if environment else {},
        )

    @staticmethod
    def session_ended(
        live_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_ENDED,
            entity_type="session",
            correlation_id=correlation_id,
            description="Console session ended",
            details={"live_count": live_count},
        )

    @staticmethod
    def account_created(
        account_id: UUID,
        available: Decimal,
        present: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_CREATED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Account created: {_money(available)} / {_money(present)}",
            details={
                "available": str(available),
                "present": str(present),
            },
            is_user_action=True,
        )

    @staticmethod
    def account_created_with_defaults(
        account_id: UUID,
        requested_available: Decimal,
        requested_present: Decimal,
        error_code: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_CREATED_WITH_DEFAULTS,
            severity=AuditSeverity.WARNING,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description="Account created with default balances",
            details={
                "requested_available": str(requested_available),
                "requested_present": str(requested_present),
            },
            error_code=error_code,
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def account_copied(
        source_id: UUID,
        copy_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_COPIED,
            entity_type="account",
            entity_id=copy_id,
            correlation_id=correlation_id,
            description="Account copied",
            details={"source_id": str(source_id)},
        )

    @staticmethod
    def account_updated(
        account_id: UUID,
        before: tuple[Decimal, Decimal],
        after: tuple[Decimal, Decimal],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_UPDATED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=(
                f"Account updated: {_money(after[0])} / {_money(after[1])}"
            ),
            details={
                "before": [str(v) for v in before],
                "after": [str(v) for v in after],
            },
            is_user_action=True,
        )

    @staticmethod
    def account_update_rejected(
        account_id: UUID,
        requested_available: Decimal,
        requested_present: Decimal,
        error_code: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_UPDATE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description="Account update blocked, account left unchanged",
            details={
                "requested_available": str(requested_available),
                "requested_present": str(requested_present),
            },
            error_code=error_code,
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def account_released(
        account_id: UUID,
        live_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_RELEASED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description="Account released",
            details={"live_count": live_count},
        )

    @staticmethod
    def input_rejected(
        prompt: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INPUT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="session",
            correlation_id=correlation_id,
            description=f"Input rejected: {prompt}",
            error_message=error_message,
            is_user_action=True,
        )
