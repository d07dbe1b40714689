"""Unit tests for IncidEditorService.

Tests verify that:
- Loading runs the cascade without notifying the host
- Every edit notifies each changed aggregate exactly once
- Mandatory priority habitats follow the primary and secondary codes
- Validation, can_save and save behave as a gate
"""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from hlu_core.application.edit_context import get_current_incid
from hlu_core.application.services import EditorSettings, IncidEditorService
from hlu_core.domain.errors import (
    IncidNotFoundError,
    IncidNotSaveableError,
    InvalidSourceSlotError,
    NoIncidLoadedError,
)
from hlu_core.domain.models import VagueDate
from hlu_core.domain.services.classification_lookup import ClassificationLookup
from hlu_core.infrastructure.stubs import (
    InMemoryIncidRepository,
    RecordingChangeNotifier,
)
from tests.helpers import (
    INCID_KEY,
    complete_bap,
    make_incid,
    persisted_secondary,
    valid_source,
)


def fill_auto_qualities(editor: IncidEditorService) -> None:
    assert editor.incid is not None
    for record in editor.incid.priority_auto:
        record.determination_quality = "D"
        record.interpretation_quality = "I"


class TestSession:
    """Tests for load and cancel."""

    def test_load_unknown_incid(self, editor: IncidEditorService) -> None:
        with pytest.raises(IncidNotFoundError) as exc_info:
            editor.load("HLU/9999")
        assert exc_info.value.incid == "HLU/9999"

    def test_edit_before_load(self, editor: IncidEditorService) -> None:
        """Edits with nothing loaded raise NoIncidLoadedError."""
        with pytest.raises(NoIncidLoadedError):
            editor.add_secondary("s1")
        with pytest.raises(NoIncidLoadedError):
            editor.secondaries

    def test_load_runs_cascade_silently(
        self,
        editor: IncidEditorService,
        repository: InMemoryIncidRepository,
        notifier: RecordingChangeNotifier,
    ) -> None:
        """Loading derives the primary and reconciles without notifications."""
        repository.add(make_incid(secondaries=[persisted_secondary("s1", 1)]))

        incid = editor.load(INCID_KEY)

        assert incid.category == "A"
        assert incid.nvc_codes == "W8"
        assert [a.code for a in incid.priority_auto] == ["bap1", "bap2"]
        assert notifier.names == []
        assert get_current_incid() == INCID_KEY

    def test_loaded_placeholders_make_incid_dirty(
        self, editor: IncidEditorService, repository: InMemoryIncidRepository
    ) -> None:
        """Placeholders created by the load cascade count as new records."""
        repository.add(make_incid())
        editor.load(INCID_KEY)
        state = editor.dirty_state()
        assert state.priority_habitats
        assert not state.secondary_habitats

    def test_load_without_placeholders_is_clean(
        self, editor: IncidEditorService, repository: InMemoryIncidRepository
    ) -> None:
        repository.add(make_incid(primary="A1.1", priority=[complete_bap("bap1", 5)]))
        editor.load(INCID_KEY)
        assert not editor.dirty_state().is_dirty
        assert editor.incid is not None
        assert editor.incid.priority_auto[0].persisted_id == 5

    def test_cancel_discards_session(
        self, editor: IncidEditorService, repository: InMemoryIncidRepository
    ) -> None:
        repository.add(make_incid())
        editor.load(INCID_KEY)
        editor.set_field("site_name", "Wood")

        editor.cancel()

        assert editor.incid is None
        assert get_current_incid() == ""
        assert repository.stored(INCID_KEY).site_name is None  # type: ignore[union-attr]
        with pytest.raises(NoIncidLoadedError):
            editor.validate()

    def test_load_logs_incid(
        self,
        repository: InMemoryIncidRepository,
        lookup: ClassificationLookup,
    ) -> None:
        repository.add(make_incid())
        with capture_logs() as logs:
            IncidEditorService(repository, lookup).load(INCID_KEY)
        loaded = [e for e in logs if e["event"] == "incid_loaded"]
        assert loaded[0]["operation"] == "load"
        assert loaded[0]["key"] == INCID_KEY


class TestCascade:
    """Tests for the primary -> secondary -> priority habitat cascade."""

    @pytest.fixture
    def loaded(
        self, editor: IncidEditorService, repository: InMemoryIncidRepository
    ) -> IncidEditorService:
        repository.add(make_incid())
        editor.load(INCID_KEY)
        return editor

    def test_add_secondary_adds_mandatory_habitat(
        self, loaded: IncidEditorService, notifier: RecordingChangeNotifier
    ) -> None:
        assert loaded.add_secondary("s1") is True

        assert loaded.reconciliation is not None
        assert loaded.reconciliation.auto_codes == ["bap1", "bap2"]
        assert notifier.names == ["secondary_habitats", "priority_habitats"]

    def test_secondary_group_defaults_to_lookup(self, loaded: IncidEditorService) -> None:
        loaded.add_secondary("s2")
        assert [e.group for e in loaded.secondaries] == ["G2"]

    def test_duplicate_secondary_ignored(
        self, loaded: IncidEditorService, notifier: RecordingChangeNotifier
    ) -> None:
        loaded.add_secondary("s1")
        notifier.clear()
        assert loaded.add_secondary("s1") is False
        assert notifier.names == []

    def test_primary_change_revalidates_and_demotes(
        self, loaded: IncidEditorService, notifier: RecordingChangeNotifier
    ) -> None:
        """Leaving A1.1 invalidates s2 and demotes bap1 to User."""
        loaded.add_secondary("s2")
        notifier.clear()

        loaded.set_primary("A2")

        assert [e.is_valid for e in loaded.secondaries] == [False]
        result = loaded.reconciliation
        assert result is not None
        assert result.auto_codes == ["bap3"]
        assert [u.code for u in result.user] == ["bap1"]
        assert notifier.names == ["incid", "priority_habitats"]

    def test_clearing_primary(self, loaded: IncidEditorService) -> None:
        loaded.set_primary(None)
        assert loaded.incid is not None
        assert loaded.incid.primary_code is None
        assert loaded.incid.category is None
        assert loaded.secondary_group is None
        assert loaded.reconciliation is not None
        assert loaded.reconciliation.auto == ()

    def test_replace_notifies_once(
        self, loaded: IncidEditorService, notifier: RecordingChangeNotifier
    ) -> None:
        """A bulk paste reconciles and notifies once per aggregate."""
        loaded.replace_secondaries(["s1", "s2", "s1", ""])
        assert loaded.secondaries.codes() == ["s1", "s2"]
        assert notifier.count("secondary_habitats") == 1
        assert notifier.count("priority_habitats") == 1

    def test_replace_keeps_existing_entries(self, loaded: IncidEditorService) -> None:
        loaded.add_secondary("s1")
        entry = loaded.secondaries.entries[0]
        loaded.replace_secondaries(["s2", "s1"])
        assert any(e is entry for e in loaded.secondaries)

    def test_remove_secondary(self, loaded: IncidEditorService) -> None:
        loaded.add_secondary("s1")
        assert loaded.remove_secondary("s1") is True
        assert loaded.remove_secondary("s1") is False
        assert loaded.reconciliation is not None
        assert loaded.reconciliation.auto_codes == ["bap1"]

    def test_secondary_summary(self, loaded: IncidEditorService) -> None:
        loaded.add_secondary("s1")
        loaded.add_secondary("161")
        assert loaded.secondary_summary() == "s1.161"

    def test_habitat_type_rescopes_nvc(self, loaded: IncidEditorService) -> None:
        loaded.set_habitat_type("HT1")
        assert loaded.incid is not None
        assert loaded.incid.habitat_type == "HT1"
        assert loaded.incid.nvc_codes == "W8"


class TestPriorityHabitatEdits:
    """Tests for user-added priority habitats."""

    @pytest.fixture
    def loaded(
        self, editor: IncidEditorService, repository: InMemoryIncidRepository
    ) -> IncidEditorService:
        repository.add(make_incid())
        editor.load(INCID_KEY)
        return editor

    def test_add_user_habitat(
        self, loaded: IncidEditorService, notifier: RecordingChangeNotifier
    ) -> None:
        record = loaded.add_user_priority_habitat("mine", "NP", "I", "hedge")
        assert loaded.incid is not None
        assert loaded.incid.priority_user == [record]
        assert loaded.incid.priority_user[0] is record
        assert record.is_auto is False
        assert notifier.names == ["priority_habitats"]

    def test_add_mandatory_code_is_duplicate(self, loaded: IncidEditorService) -> None:
        """A mandatory code added by hand stays in User as a duplicate."""
        record = loaded.add_user_priority_habitat("bap1", "NP", "I")
        result = loaded.reconciliation
        assert result is not None
        assert result.auto_codes == ["bap1"]
        assert result.user[0] is record
        assert result.duplicate_codes == ("bap1",)
        assert result.has_duplicates is False
        assert "Error: Duplicate priority habitat" in loaded.validate().for_field(
            "priority_habitats[1]"
        )

    def test_recompute_keeps_user_order(
        self, loaded: IncidEditorService, notifier: RecordingChangeNotifier
    ) -> None:
        """A hand-added mandatory code keeps its place in User."""
        duplicate = loaded.add_user_priority_habitat("bap1", "NP", "I")
        mine = loaded.add_user_priority_habitat("mine", "NP", "I")
        notifier.clear()

        loaded.recompute()
        loaded.recompute()

        assert loaded.incid is not None
        assert [id(u) for u in loaded.incid.priority_user] == [id(duplicate), id(mine)]
        assert notifier.names == []

    def test_remove_user_habitat(self, loaded: IncidEditorService) -> None:
        record = loaded.add_user_priority_habitat("mine", "NP", "I")
        assert loaded.remove_priority_habitat(record) is True
        assert loaded.incid is not None
        assert loaded.incid.priority_user == []

    def test_auto_habitat_cannot_be_removed(
        self, loaded: IncidEditorService, notifier: RecordingChangeNotifier
    ) -> None:
        assert loaded.incid is not None
        auto = loaded.incid.priority_auto[0]
        assert loaded.remove_priority_habitat(auto) is False
        assert loaded.incid.priority_auto[0] is auto
        assert notifier.names == []

    def test_bulk_mode_flags_user_rows(
        self, repository: InMemoryIncidRepository, lookup: ClassificationLookup
    ) -> None:
        repository.add(make_incid())
        editor = IncidEditorService(repository, lookup, EditorSettings(bulk_mode=True))
        editor.load(INCID_KEY)
        record = editor.add_user_priority_habitat("mine")
        assert record.bulk_mode is True
        assert editor.validate().for_field("priority_habitats[1]") == []


class TestConditionAndSources:
    """Tests for the condition and source slot edits."""

    @pytest.fixture
    def loaded(
        self, editor: IncidEditorService, repository: InMemoryIncidRepository
    ) -> IncidEditorService:
        repository.add(make_incid(primary="A2"))
        editor.load(INCID_KEY)
        return editor

    def test_set_condition(
        self, loaded: IncidEditorService, notifier: RecordingChangeNotifier
    ) -> None:
        condition = loaded.set_condition("C", "Q", VagueDate(1, 1, "D"))
        assert condition is not None
        assert condition.incid == INCID_KEY
        assert notifier.names == ["condition"]

    def test_clear_new_condition(self, loaded: IncidEditorService) -> None:
        loaded.set_condition("C")
        assert loaded.set_condition(None) is None
        assert loaded.incid is not None
        assert loaded.incid.condition is None

    def test_incomplete_condition_reported(self, loaded: IncidEditorService) -> None:
        loaded.set_condition("C")
        report = loaded.validate()
        assert report.for_field("condition.qualifier") == [
            "Error: Condition qualifier is mandatory for a condition"
        ]

    def test_set_source(
        self, loaded: IncidEditorService, notifier: RecordingChangeNotifier
    ) -> None:
        source = valid_source(2)
        source.incid = None
        loaded.set_source(1, source)
        assert source.incid == INCID_KEY
        assert loaded.incid is not None
        assert loaded.incid.sources[1] is source
        assert notifier.names == ["sources"]

    @pytest.mark.parametrize("slot", [-1, 3])
    def test_invalid_slot(self, loaded: IncidEditorService, slot: int) -> None:
        with pytest.raises(InvalidSourceSlotError) as exc_info:
            loaded.set_source(slot, None)
        assert exc_info.value.slot == slot


class TestFields:
    """Tests for set_field."""

    @pytest.fixture
    def loaded(
        self, editor: IncidEditorService, repository: InMemoryIncidRepository
    ) -> IncidEditorService:
        repository.add(make_incid(primary="A2"))
        editor.load(INCID_KEY)
        return editor

    def test_set_plain_field(
        self, loaded: IncidEditorService, notifier: RecordingChangeNotifier
    ) -> None:
        loaded.set_field("site_name", "Wood")
        assert loaded.incid is not None
        assert loaded.incid.site_name == "Wood"
        assert notifier.names == ["incid"]
        assert loaded.dirty_state().incid

    @pytest.mark.parametrize("name", ["primary_code", "habitat_type", "category", "nope"])
    def test_rejected_fields(self, loaded: IncidEditorService, name: str) -> None:
        with pytest.raises(ValueError):
            loaded.set_field(name, "x")


class TestValidationAndSave:
    """Tests for validate, can_save and save."""

    def test_unknown_category_is_warning(
        self, editor: IncidEditorService, repository: InMemoryIncidRepository
    ) -> None:
        repository.add(make_incid(primary="X9"))
        editor.load(INCID_KEY)
        report = editor.validate()
        assert report.for_field("primary") == [
            "Warning: Primary habitat 'X9' has no category in the lookup"
        ]
        assert not report.has_errors

    def test_invalid_secondary_blocks_save(
        self, editor: IncidEditorService, repository: InMemoryIncidRepository
    ) -> None:
        repository.add(make_incid(primary="A2"))
        editor.load(INCID_KEY)
        editor.add_secondary("s1")
        report = editor.validate()
        assert report.has_errors
        assert not editor.can_save()
        with pytest.raises(IncidNotSaveableError) as exc_info:
            editor.save()
        assert exc_info.value.incid == INCID_KEY

    def test_placeholders_need_qualities(
        self, editor: IncidEditorService, repository: InMemoryIncidRepository
    ) -> None:
        repository.add(make_incid())
        editor.load(INCID_KEY)
        assert not editor.can_save()
        fill_auto_qualities(editor)
        assert editor.can_save()

    def test_clean_incid_cannot_be_saved(
        self, editor: IncidEditorService, repository: InMemoryIncidRepository
    ) -> None:
        repository.add(make_incid(primary="A2"))
        editor.load(INCID_KEY)
        assert not editor.can_save()

    def test_save_assigns_ids_and_resets_dirty_state(
        self, editor: IncidEditorService, repository: InMemoryIncidRepository
    ) -> None:
        repository.add(make_incid())
        editor.load(INCID_KEY)
        editor.add_secondary("s2")
        fill_auto_qualities(editor)

        saved = editor.save()

        assert repository.save_count == 1
        assert [s.persisted_id for s in saved.secondary_habitats] == [1000]
        assert all(p.persisted_id >= 1000 for p in saved.priority_auto)
        assert editor.incid is saved
        assert not editor.dirty_state().is_dirty
        assert [a.code for a in saved.priority_auto] == ["bap1", "bap3"]

    def test_osmm_bulk_mode_requires_source(
        self, repository: InMemoryIncidRepository, lookup: ClassificationLookup
    ) -> None:
        repository.add(make_incid(primary="A2"))
        settings = EditorSettings(bulk_mode=True, osmm_bulk_mode=True)
        editor = IncidEditorService(repository, lookup, settings)
        editor.load(INCID_KEY)
        assert editor.validate().for_field("source[0].source_id") == [
            "Error: At least one source must be specified"
        ]
