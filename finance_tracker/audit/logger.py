"""
Audit Logger

Every change to the ledger is logged. This provides:
1. Traceability of the session's edits
2. Debugging capability
3. An activity log the user can browse

The audit logger:
- Always writes to the local structured log (structlog)
- Optionally appends to an audit storage backend
- Never raises: a failing backend is reported locally and ignored
"""

import logging
import sys
from typing import Optional

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from finance_tracker.models.ledger import EntityKind
from finance_tracker.services.storage.interface import AuditStorageInterface


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog (and the stdlib logging it renders through).

    Called once at startup by create_app_components().
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    logging.getLogger().setLevel(log_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
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
    2. Audit storage (for the in-app activity log)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for the activity log.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("finance_tracker.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Appends to storage if available.

        Returns True if the storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
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
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=event.event_id,
                )
                return False

        return True

    def log_validation_failed(
        self,
        kind: EntityKind,
        issues: list[dict],
        entity_id: Optional[str] = None,
    ) -> None:
        """Log a rejected editor submission."""
        self.log(AuditEventBuilder.validation_failed(
            kind=kind,
            issues=issues,
            entity_id=entity_id,
        ))

    def log_edit_cancelled(
        self,
        kind: EntityKind,
        entity_id: Optional[str],
    ) -> None:
        """Log an editor draft being discarded."""
        self.log(AuditEventBuilder.edit_cancelled(
            kind=kind,
            entity_id=entity_id,
        ))

    def log_dashboard_computed(
        self,
        transaction_count: int,
        month_count: int,
        category_count: int,
    ) -> None:
        """Log a dashboard recomputation."""
        self.log(AuditEventBuilder.dashboard_computed(
            transaction_count=transaction_count,
            month_count=month_count,
            category_count=category_count,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))

    def recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent events from storage (newest first), empty without storage."""
        if self._storage is None:
            return []
        return self._storage.get_recent_events(limit=limit)
