"""
Audit Models for Finance Tracker

Every mutation of the ledger is logged as an audit event.
This provides:
1. Traceability of what changed in the session
2. Debugging information when things go wrong
3. An activity log the user can look at

Audit logs are append-only. Events are never modified.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from finance_tracker.models.ledger import EntityKind, new_entity_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger mutations
    ENTITY_ADDED = "entity_added"
    ENTITY_UPDATED = "entity_updated"
    ENTITY_DELETED = "entity_deleted"
    UPDATE_TARGET_MISSING = "update_target_missing"
    DELETE_TARGET_MISSING = "delete_target_missing"
    LEDGER_SEEDED = "ledger_seeded"

    # Editors
    VALIDATION_FAILED = "validation_failed"
    EDIT_CANCELLED = "edit_cancelled"

    # Dashboard
    DASHBOARD_COMPUTED = "dashboard_computed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: str = Field(
        default_factory=new_entity_id,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
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

    # What entity is this about?
    entity_kind: Optional[EntityKind] = Field(
        default=None,
        description="Ledger collection the entity belongs to"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

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
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_kind": self.entity_kind.value if self.entity_kind else None,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_table_row(self) -> dict:
        """Flat row for the activity log table."""
        return {
            "time": self.timestamp.strftime("%H:%M:%S"),
            "event": self.event_type.value,
            "severity": self.severity.value,
            "kind": self.entity_kind.value if self.entity_kind else "",
            "description": self.description,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entity_added(EntityKind.BUDGETS, budget_id, "Food")
        event = AuditEventBuilder.update_target_missing(EntityKind.CATEGORIES, category_id)
    """

    @staticmethod
    def entity_added(
        kind: EntityKind,
        entity_id: str,
        label: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_ADDED,
            entity_kind=kind,
            entity_id=entity_id,
            description=f"Added to {kind.value}: {label}",
            details={"label": label},
            is_user_action=True,
        )

    @staticmethod
    def entity_updated(
        kind: EntityKind,
        entity_id: str,
        label: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_UPDATED,
            entity_kind=kind,
            entity_id=entity_id,
            description=f"Updated in {kind.value}: {label}",
            details={"label": label},
            is_user_action=True,
        )

    @staticmethod
    def entity_deleted(
        kind: EntityKind,
        entity_id: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_DELETED,
            entity_kind=kind,
            entity_id=entity_id,
            description=f"Deleted from {kind.value}: {entity_id}",
            is_user_action=True,
        )

    @staticmethod
    def update_target_missing(
        kind: EntityKind,
        entity_id: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.UPDATE_TARGET_MISSING,
            severity=AuditSeverity.WARNING,
            entity_kind=kind,
            entity_id=entity_id,
            description=f"Update ignored, no entry in {kind.value} with id {entity_id}",
        )

    @staticmethod
    def delete_target_missing(
        kind: EntityKind,
        entity_id: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_TARGET_MISSING,
            severity=AuditSeverity.DEBUG,
            entity_kind=kind,
            entity_id=entity_id,
            description=f"Delete ignored, no entry in {kind.value} with id {entity_id}",
        )

    @staticmethod
    def ledger_seeded(counts: dict[str, int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_SEEDED,
            description="Ledger populated with sample data",
            details=counts,
        )

    @staticmethod
    def validation_failed(
        kind: EntityKind,
        issues: list[dict],
        entity_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_kind=kind,
            entity_id=entity_id,
            description=f"Form for {kind.value} rejected with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def edit_cancelled(
        kind: EntityKind,
        entity_id: Optional[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EDIT_CANCELLED,
            severity=AuditSeverity.DEBUG,
            entity_kind=kind,
            entity_id=entity_id,
            description=f"Edit of {kind.value} cancelled",
            is_user_action=True,
        )

    @staticmethod
    def dashboard_computed(
        transaction_count: int,
        month_count: int,
        category_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DASHBOARD_COMPUTED,
            severity=AuditSeverity.DEBUG,
            description=f"Dashboard computed from {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
                "month_count": month_count,
                "category_count": category_count,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
