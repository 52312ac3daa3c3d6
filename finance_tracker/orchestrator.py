"""
Main Orchestrator for Finance Tracker

This module ties the components together and defines the flows for:
1. Editing (draft → validate → add or update → store)
2. Dashboard (store → snapshot → aggregation engine → view)

The orchestrator enforces the boundaries:
- Nothing reaches the store without passing validation
- Editors only hold copies; the store is the single owner
- Every mutation is audited

One FinanceSession is created per user session by
create_app_components() and handed to the UI. There is no global state.
"""

from datetime import date
from typing import Any, Mapping, Optional

from pydantic import BaseModel

from finance_tracker.aggregation import AggregationEngine
from finance_tracker.audit import AuditLogger, configure_logging
from finance_tracker.config import AppSettings, get_settings
from finance_tracker.models.dashboard import DashboardView
from finance_tracker.models.ledger import EntityKind, LedgerEntity
from finance_tracker.models.validation import ValidationResult
from finance_tracker.services.storage import (
    InMemoryAuditStorage,
    InMemoryEntityCollection,
    LedgerStore,
    NotFoundError,
    load_seed_ledger,
)
from finance_tracker.validation import EntityValidator


DRAFT_DEFAULTS: dict[EntityKind, dict[str, Any]] = {
    EntityKind.TRANSACTIONS: {
        "amount": None,
        "date": "",
        "description": "",
        "category": "",
        "type": "expense",
    },
    EntityKind.CATEGORIES: {
        "name": "",
        "color": "#0ea5e9",
    },
    EntityKind.BUDGETS: {
        "category": "",
        "budget_amount": None,
        "spent_amount": None,
    },
}


class EditorResult(BaseModel):
    """Outcome of submitting an editor's draft."""

    success: bool
    entity: Optional[Any] = None
    validation: Optional[ValidationResult] = None
    not_found: bool = False
    message: str = ""


class EntityEditor:
    """
    CRUD surface for one ledger collection.

    Holds:
    - editing_id: the entity being edited, or None when adding
    - draft: the unsaved form values

    Flow:
    1. start_add() or start_edit(id) → draft is (re)initialized
    2. submit(form_data) → validate → add or update
    3. cancel() → draft discarded, store untouched

    Mutating the draft never touches the store. Only a
    successful submit() does.
    """

    def __init__(
        self,
        kind: EntityKind,
        store: LedgerStore,
        validator: Optional[EntityValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._kind = EntityKind(kind)
        self._store = store
        self._validator = validator or EntityValidator(store)
        self._audit_logger = audit_logger
        self.editing_id: Optional[str] = None
        self.draft: dict[str, Any] = self._default_draft()

    @property
    def kind(self) -> EntityKind:
        return self._kind

    @property
    def collection(self) -> InMemoryEntityCollection:
        return self._store[self._kind]

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    @property
    def title(self) -> str:
        noun = {
            EntityKind.TRANSACTIONS: "Transaction",
            EntityKind.CATEGORIES: "Category",
            EntityKind.BUDGETS: "Budget",
        }[self._kind]
        return f"Edit {noun}" if self.is_editing else f"Add {noun}"

    def items(self) -> list[LedgerEntity]:
        """The live collection, in insertion order."""
        return self.collection.list()

    def start_add(self) -> None:
        """Reset to an empty draft for a new entity."""
        self.editing_id = None
        self.draft = self._default_draft()

    def start_edit(self, entity_id: str) -> bool:
        """
        Load a copy of an entity into the draft.

        Returns False (and leaves the editor unchanged) if the id is unknown.
        """
        try:
            entity = self.collection.require(entity_id)
        except NotFoundError:
            return False
        self.editing_id = entity.id
        self.draft = entity.model_dump(exclude={"id"})
        return True

    def submit(
        self,
        form_data: Optional[Mapping[str, Any]] = None,
        today: Optional[date] = None,
    ) -> EditorResult:
        """
        Validate the draft and commit it to the store.

        Calls update() when editing, add() otherwise. On a validation
        failure nothing is committed and the draft is kept so the user
        can correct it.
        """
        if form_data is not None:
            self.draft = {**self.draft, **dict(form_data)}

        validation = self._validator.validate(
            self._kind,
            self.draft,
            entity_id=self.editing_id,
            today=today,
        )

        if not validation.is_valid:
            if self._audit_logger is not None:
                self._audit_logger.log_validation_failed(
                    kind=self._kind,
                    issues=[issue.model_dump() for issue in validation.issues],
                    entity_id=self.editing_id,
                )
            return EditorResult(
                success=False,
                validation=validation,
                message=self._validator.get_user_friendly_summary(validation),
            )

        model = self.collection.model
        cleaned = validation.cleaned_data or {}

        if self.is_editing:
            entity = model(id=self.editing_id, **cleaned)
            if not self.collection.update(entity):
                # Deleted while being edited; the next submit adds it again
                self.editing_id = None
                return EditorResult(
                    success=False,
                    validation=validation,
                    not_found=True,
                    message="This entry no longer exists. Submit again to add it as new.",
                )
            stored = entity
            message = "Changes saved."
        else:
            stored = self.collection.add(model(**cleaned))
            message = "Added."

        self.start_add()
        return EditorResult(
            success=True,
            entity=stored,
            validation=validation,
            message=message,
        )

    def cancel(self) -> None:
        """Discard the draft and the editing pointer."""
        if self._audit_logger is not None:
            self._audit_logger.log_edit_cancelled(
                kind=self._kind,
                entity_id=self.editing_id,
            )
        self.start_add()

    def delete(self, entity_id: str) -> bool:
        """Delete an entity; stops editing it if it was being edited."""
        deleted = self.collection.delete(entity_id)
        if self.editing_id == entity_id:
            self.start_add()
        return deleted

    def _default_draft(self) -> dict[str, Any]:
        return dict(DRAFT_DEFAULTS[self._kind])


class TransactionEditor(EntityEditor):
    def __init__(self, store: LedgerStore, **kwargs):
        super().__init__(EntityKind.TRANSACTIONS, store, **kwargs)


class CategoryEditor(EntityEditor):
    def __init__(self, store: LedgerStore, **kwargs):
        super().__init__(EntityKind.CATEGORIES, store, **kwargs)


class BudgetEditor(EntityEditor):
    def __init__(self, store: LedgerStore, **kwargs):
        super().__init__(EntityKind.BUDGETS, store, **kwargs)


def create_editors(
    store: LedgerStore,
    validator: Optional[EntityValidator] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> dict[EntityKind, EntityEditor]:
    """One editor per ledger collection, all bound to the same store."""
    validator = validator or EntityValidator(store)
    return {
        EntityKind.TRANSACTIONS: TransactionEditor(
            store, validator=validator, audit_logger=audit_logger
        ),
        EntityKind.CATEGORIES: CategoryEditor(
            store, validator=validator, audit_logger=audit_logger
        ),
        EntityKind.BUDGETS: BudgetEditor(
            store, validator=validator, audit_logger=audit_logger
        ),
    }


class FinanceSession:
    """Everything one user session works with."""

    def __init__(
        self,
        store: LedgerStore,
        engine: AggregationEngine,
        editors: dict[EntityKind, EntityEditor],
        audit_logger: AuditLogger,
        settings: AppSettings,
    ):
        self.store = store
        self.engine = engine
        self.editors = editors
        self.audit_logger = audit_logger
        self.settings = settings

    def editor(self, kind: EntityKind) -> EntityEditor:
        return self.editors[EntityKind(kind)]

    def dashboard(self) -> DashboardView:
        """Recompute the dashboard from the store's current contents."""
        return self.engine.compute(self.store.snapshot())

    def reset(self, with_seed_data: Optional[bool] = None) -> None:
        """Start over: empty the ledger (optionally reseeding) and all drafts."""
        seed = self.settings.load_seed_data if with_seed_data is None else with_seed_data
        if seed:
            load_seed_ledger(self.store, self.audit_logger)
        else:
            self.store.reset()
        for editor in self.editors.values():
            editor.start_add()


def create_app_components(
    settings: Optional[AppSettings] = None,
    load_seed: Optional[bool] = None,
    configure_logs: bool = True,
) -> FinanceSession:
    """
    Factory function to create all application components.

    Args:
        settings: Application settings; loaded from the environment if None.
        load_seed: Override settings.load_seed_data.
        configure_logs: Set up structlog from the settings.

    Returns:
        A FinanceSession with a fresh ledger.
    """
    settings = settings or get_settings().app

    if configure_logs:
        configure_logging(level=settings.effective_log_level, json_logs=settings.log_json)

    audit_logger = AuditLogger(InMemoryAuditStorage(max_events=settings.audit_history_size))
    store = LedgerStore(audit_logger=audit_logger)

    seed = settings.load_seed_data if load_seed is None else load_seed
    if seed:
        load_seed_ledger(store, audit_logger)

    engine = AggregationEngine(
        recent_limit=settings.recent_transactions_limit,
        default_color=settings.default_category_color,
        month_key_format=settings.month_key_format,
        audit_logger=audit_logger,
    )
    validator = EntityValidator(store, settings=settings)
    editors = create_editors(store, validator=validator, audit_logger=audit_logger)

    return FinanceSession(
        store=store,
        engine=engine,
        editors=editors,
        audit_logger=audit_logger,
        settings=settings,
    )
