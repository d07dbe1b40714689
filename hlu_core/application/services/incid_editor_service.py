"""Incid editor application service.

Orchestrates editing of one incid at a time. Every edit runs the
recomputation cascade synchronously:

    primary change -> secondary revalidation -> priority habitat
    reconciliation -> change notification

Dirty state is measured against the incid as it came out of the
repository, and validation output is produced on demand for the host.

Usage:
    editor = IncidEditorService(repository, lookup, settings, notifier)
    editor.load("HLU/0001")
    editor.set_primary("w1f7")
    editor.add_secondary("161")
    if editor.can_save():
        editor.save()
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from hlu_core.application.edit_context import (
    clear_current_incid,
    set_current_incid,
)
from hlu_core.application.ports.change_notifier import ChangeNotifierProtocol
from hlu_core.application.ports.incid_repository import IncidRepositoryProtocol
from hlu_core.application.services.base import LoggingMixin
from hlu_core.application.services.editor_settings import EditorSettings
from hlu_core.domain.errors import (
    IncidNotFoundError,
    IncidNotSaveableError,
    InvalidSourceSlotError,
    NoIncidLoadedError,
)
from hlu_core.domain.models.condition import Condition
from hlu_core.domain.models.field_issue import FieldIssue
from hlu_core.domain.models.incid import SCALAR_FIELDS, Incid
from hlu_core.domain.models.priority_habitat import PriorityHabitat
from hlu_core.domain.models.secondary_habitat import SecondaryHabitat
from hlu_core.domain.models.source_slot import SOURCE_SLOT_COUNT, SourceSlot
from hlu_core.domain.models.vague_date import VagueDate
from hlu_core.domain.services.classification_lookup import ClassificationLookup
from hlu_core.domain.services.dirty_state_tracker import (
    DirtyState,
    DirtyStateTracker,
    IncidSnapshot,
)
from hlu_core.domain.services.field_validator import (
    validate_condition,
    validate_habitat,
    validate_incid_quality,
    validate_priority_habitats,
    validate_sources,
)
from hlu_core.domain.services.primary_habitat_selector import (
    PrimaryDerivation,
    PrimaryHabitatSelector,
)
from hlu_core.domain.services.priority_habitat_reconciler import (
    PriorityHabitatReconciler,
    ReconciliationResult,
    assert_reconciliation_invariants,
)
from hlu_core.domain.services.secondary_habitat_collection import (
    SecondaryHabitatCollection,
)

# Fields edited through their own operations because they drive derivation
_DERIVING_FIELDS = frozenset({"primary_code", "habitat_type"})


@dataclass(frozen=True)
class ValidationReport:
    """Validation output for the loaded incid.

    Attributes:
        incid: Key of the validated incid.
        issues: Every issue, in field order.
    """

    incid: str
    issues: tuple[FieldIssue, ...] = ()

    @property
    def errors(self) -> list[FieldIssue]:
        return [i for i in self.issues if i.is_error]

    @property
    def warnings(self) -> list[FieldIssue]:
        return [i for i in self.issues if not i.is_error]

    @property
    def has_errors(self) -> bool:
        return any(i.is_error for i in self.issues)

    def for_field(self, field_id: str) -> list[str]:
        """Messages attached to one field."""
        return [i.message for i in self.issues if i.field_id == field_id]


class IncidEditorService(LoggingMixin):
    """Edits one incid aggregate and keeps its derived state consistent."""

    def __init__(
        self,
        repository: IncidRepositoryProtocol,
        lookup: ClassificationLookup,
        settings: EditorSettings | None = None,
        notifier: ChangeNotifierProtocol | None = None,
    ) -> None:
        self._repository = repository
        self._lookup = lookup
        self._settings = settings or EditorSettings()
        self._notifier = notifier
        self._selector = PrimaryHabitatSelector(
            lookup,
            preferred_secondary_group=self._settings.preferred_secondary_group,
        )
        self._reconciler = PriorityHabitatReconciler(
            lookup,
            self._settings.bap_quality_rules,
            duplicate_threshold=self._settings.duplicate_threshold,
        )
        self._incid: Incid | None = None
        self._collection: SecondaryHabitatCollection | None = None
        self._tracker: DirtyStateTracker | None = None
        self._reconciliation: ReconciliationResult | None = None
        self._reconciled = False
        self._in_cycle = False
        self._init_logger()

    # State

    @property
    def settings(self) -> EditorSettings:
        return self._settings

    @property
    def incid(self) -> Incid | None:
        """The loaded incid, or None."""
        return self._incid

    @property
    def derivation(self) -> PrimaryDerivation:
        return self._selector.current

    @property
    def secondary_group(self) -> str | None:
        """Secondary group currently selected for new secondaries."""
        return self._selector.secondary_group

    @property
    def reconciliation(self) -> ReconciliationResult | None:
        return self._reconciliation

    @property
    def secondaries(self) -> SecondaryHabitatCollection:
        self._require("read secondary habitats")
        assert self._collection is not None
        return self._collection

    def secondary_summary(self) -> str:
        return self.secondaries.summary(self._settings.secondary_delimiter)

    # Session

    def load(self, incid_key: str) -> Incid:
        """Load an incid and run the full cascade on it.

        Raises:
            IncidNotFoundError: If the repository has no such incid.
        """
        log = self._log_operation("load", key=incid_key)
        incid = self._repository.get_incid(incid_key)
        if incid is None:
            log.warning("incid_not_found")
            raise IncidNotFoundError(incid_key)

        set_current_incid(incid.key)
        self._attach(incid)
        self._recompute()
        log.info(
            "incid_loaded",
            primary=incid.primary_code,
            secondaries=len(incid.secondary_habitats),
            priority_habitats=len(incid.priority_habitats),
        )
        return incid

    def cancel(self) -> None:
        """Discard the loaded incid and every unsaved edit."""
        if self._incid is None:
            return
        self._log_operation("cancel", dirty=self.dirty_state().is_dirty).info(
            "edits_discarded"
        )
        self._incid = None
        self._collection = None
        self._tracker = None
        self._reconciliation = None
        self._reconciled = False
        clear_current_incid()

    # Edits

    def set_primary(self, code: str | None) -> PrimaryDerivation:
        incid = self._require("set primary habitat")
        with self._edit_cycle("set_primary", code=code):
            incid.primary_code = code or None
            self._derive_primary(incid)
            self._reconcile()
        return self._selector.current

    def set_habitat_type(self, code: str | None) -> None:
        """Change the habitat type, which rescopes the NVC hint."""
        incid = self._require("set habitat type")
        with self._edit_cycle("set_habitat_type", code=code):
            incid.habitat_type = code or None
            incid.nvc_codes = (
                self._lookup.nvc_codes_for(incid.primary_code, incid.habitat_type)
                if incid.primary_code
                else None
            )

    def set_field(self, name: str, value: str | None) -> None:
        """Set one of the incid's own free-text fields.

        Raises:
            ValueError: If name is not a plain incid field.
        """
        incid = self._require(f"set {name}")
        if name not in SCALAR_FIELDS or name in _DERIVING_FIELDS:
            raise ValueError(f"{name!r} is not an editable incid field")
        with self._edit_cycle("set_field", field=name):
            setattr(incid, name, value)

    def add_secondary(self, code: str, group: str | None = None) -> bool:
        """Add a secondary habitat; returns False when nothing changed."""
        self._require("add secondary habitat")
        collection = self.secondaries
        with self._edit_cycle("add_secondary", code=code):
            added = collection.add(
                code,
                group or self._lookup.secondary_group_of(code) or self.secondary_group,
            )
        return added

    def remove_secondary(self, code: str) -> bool:
        self._require("remove secondary habitat")
        collection = self.secondaries
        with self._edit_cycle("remove_secondary", code=code):
            removed = collection.remove_code(code)
        return removed

    def replace_secondaries(self, codes: Iterable[str]) -> None:
        """Replace every secondary habitat at once (bulk paste).

        Entries whose code is kept retain their identity.
        """
        incid = self._require("replace secondary habitats")
        collection = self.secondaries
        existing = {e.code: e for e in collection}
        entries: list[SecondaryHabitat] = []
        seen: set[str] = set()
        for code in codes:
            if not code or code in seen:
                continue
            seen.add(code)
            entries.append(
                existing.get(code)
                or SecondaryHabitat(
                    incid=incid.key,
                    code=code,
                    group=self._lookup.secondary_group_of(code) or self.secondary_group,
                )
            )
        with self._edit_cycle("replace_secondaries", count=len(entries)):
            collection.replace(entries)

    def add_user_priority_habitat(
        self,
        code: str,
        determination_quality: str | None = None,
        interpretation_quality: str | None = None,
        interpretation_comments: str | None = None,
    ) -> PriorityHabitat:
        """Add a priority habitat by hand.

        A code that is already mandatory stays in Auto; the new record is
        kept in User and reported as a duplicate.
        """
        incid = self._require("add priority habitat")
        record = PriorityHabitat(
            incid=incid.key,
            code=code,
            determination_quality=determination_quality,
            interpretation_quality=interpretation_quality,
            interpretation_comments=interpretation_comments,
            is_auto=False,
            bulk_mode=self._settings.bulk_mode,
        )
        with self._edit_cycle("add_user_priority_habitat", code=code):
            incid.priority_user.append(record)
            self._reconcile()
        return record

    def remove_priority_habitat(self, record: PriorityHabitat) -> bool:
        """Remove a User priority habitat.

        Returns:
            False when the record is not in User; mandatory habitats can
            not be removed.
        """
        incid = self._require("remove priority habitat")
        for index, entry in enumerate(incid.priority_user):
            if entry is record:
                break
        else:
            self._log_operation("remove_priority_habitat", code=record.code).info(
                "priority_habitat_not_removable", is_auto=record.is_auto
            )
            return False

        with self._edit_cycle("remove_priority_habitat", code=record.code):
            del incid.priority_user[index]
            self._reconcile()
        return True

    def set_condition(
        self,
        code: str | None,
        qualifier: str | None = None,
        date: VagueDate | None = None,
    ) -> Condition | None:
        """Set the condition; all-empty values clear a new condition."""
        incid = self._require("set condition")
        with self._edit_cycle("set_condition", code=code):
            condition = incid.condition
            if condition is None:
                if code is None and qualifier is None and date is None:
                    return None
                condition = Condition(incid=incid.key)
                incid.condition = condition
            elif code is None and qualifier is None and date is None and condition.is_added:
                incid.condition = None
                return None
            condition.code = code
            condition.qualifier = qualifier
            condition.date = date
        return condition

    def set_source(self, slot: int, source: SourceSlot | None) -> None:
        """Put a source into one of the three slots (0-based).

        Raises:
            InvalidSourceSlotError: If slot is not 0, 1 or 2.
        """
        incid = self._require("set source")
        if not 0 <= slot < SOURCE_SLOT_COUNT:
            raise InvalidSourceSlotError(slot)
        with self._edit_cycle("set_source", slot=slot):
            if source is not None and source.incid is None:
                source.incid = incid.key
            incid.sources[slot] = source

    def recompute(self) -> None:
        """Rerun the whole cascade on the loaded incid."""
        self._require("recompute")
        with self._edit_cycle("recompute"):
            self._recompute()

    # Results

    def dirty_state(self) -> DirtyState:
        incid = self._require("evaluate dirty state")
        assert self._tracker is not None
        return self._tracker.evaluate(incid)

    def validate(self) -> ValidationReport:
        """Run every field rule against the loaded incid."""
        incid = self._require("validate")
        settings = self._settings
        issues: list[FieldIssue] = list(self._selector.current.issues)
        issues.extend(
            validate_habitat(
                incid,
                self._lookup,
                settings.habitat_secondary_validation,
                bulk_mode=settings.bulk_mode,
            )
        )
        issues.extend(
            validate_priority_habitats(
                incid.priority_habitats, settings.bap_quality_rules
            )
        )
        issues.extend(validate_condition(incid.condition))
        issues.extend(
            validate_sources(
                incid.sources,
                self._lookup,
                settings.importance_rules,
                require_any_source=settings.osmm_bulk_mode,
            )
        )
        issues.extend(
            validate_incid_quality(
                incid, settings.quality_validation, bulk_mode=settings.bulk_mode
            )
        )
        return ValidationReport(incid=incid.key, issues=tuple(issues))

    def can_save(self) -> bool:
        """True when the incid has unsaved edits and no validation errors."""
        return self.dirty_state().is_dirty and not self.validate().has_errors

    def save(self) -> Incid:
        """Hand the incid to the repository and reload it from the result.

        Raises:
            IncidNotSaveableError: If validation errors remain.
        """
        incid = self._require("save")
        log = self._log_operation("save")
        report = self.validate()
        if report.has_errors:
            messages = [i.message for i in report.errors]
            log.warning("save_rejected", errors=len(messages))
            raise IncidNotSaveableError(incid.key, messages)

        saved = self._repository.save_incid(incid)
        self._attach(saved)
        self._recompute()
        log.info("incid_saved", priority_habitats=len(saved.priority_habitats))
        return saved

    # Internals

    def _require(self, operation: str) -> Incid:
        if self._incid is None:
            raise NoIncidLoadedError(operation)
        return self._incid

    def _attach(self, incid: Incid) -> None:
        settings = self._settings
        self._incid = incid
        self._tracker = DirtyStateTracker(
            IncidSnapshot.capture(incid), settings.bap_quality_rules
        )
        self._collection = SecondaryHabitatCollection(
            incid.secondary_habitats,
            incid_key=incid.key,
            known_codes=self._lookup.all_secondary_codes,
            order_policy=settings.order_policy,
            validation=settings.primary_secondary_validation,
            on_changed=self._reconcile,
        )
        self._selector.attach(self._collection)
        self._reconciliation = None
        self._reconciled = False

    def _recompute(self) -> None:
        incid = self._require("recompute")
        self._derive_primary(incid)
        self._reconcile()

    def _derive_primary(self, incid: Incid) -> None:
        derivation = self._selector.set_primary(incid.primary_code, incid.habitat_type)
        incid.category = derivation.category
        incid.nvc_codes = derivation.nvc_codes

    def _reconcile(self) -> None:
        incid = self._require("reconcile priority habitats")
        result = self._reconciler.reconcile(
            primary=incid.primary_code,
            secondaries=incid.secondary_codes(),
            persisted_rows=incid.priority_habitats,
            previous_user=incid.priority_user if self._reconciled else (),
            bulk_mode=self._settings.bulk_mode,
            incid=incid.key,
        )
        assert_reconciliation_invariants(result, incid.key)
        incid.priority_auto = list(result.auto)
        incid.priority_user = list(result.user)
        self._reconciliation = result
        self._reconciled = True

    @contextmanager
    def _edit_cycle(self, operation: str, **context: object) -> Iterator[None]:
        """Run an edit and notify the host of each aggregate it changed."""
        incid = self._require(operation)
        if self._in_cycle:
            yield
            return

        before = IncidSnapshot.capture(incid)
        self._in_cycle = True
        try:
            yield
        finally:
            self._in_cycle = False

        changed = before.changed_aggregates(IncidSnapshot.capture(incid))
        self._log_operation(operation, **context).debug(
            "edit_applied", changed=changed
        )
        if self._notifier is not None:
            for name in changed:
                self._notifier.notify_changed(name)
