"""Unit tests for the in-memory infrastructure stubs."""

from __future__ import annotations

from hlu_core.application.ports.change_notifier import ChangeNotifierProtocol
from hlu_core.application.ports.incid_repository import IncidRepositoryProtocol
from hlu_core.domain.models import Condition, PriorityHabitat, SecondaryHabitat
from hlu_core.infrastructure.stubs import (
    InMemoryIncidRepository,
    RecordingChangeNotifier,
)
from tests.helpers import INCID_KEY, make_incid, persisted_secondary


class TestInMemoryIncidRepository:
    """Tests for InMemoryIncidRepository."""

    def test_implements_port(self) -> None:
        assert isinstance(InMemoryIncidRepository(), IncidRepositoryProtocol)

    def test_unknown_key(self) -> None:
        assert InMemoryIncidRepository().get_incid("nope") is None

    def test_get_returns_copy(self) -> None:
        """Edits to a fetched incid do not reach the store."""
        repository = InMemoryIncidRepository([make_incid()])
        incid = repository.get_incid(INCID_KEY)
        assert incid is not None
        incid.site_name = "changed"
        assert repository.get_incid(INCID_KEY).site_name is None  # type: ignore[union-attr]

    def test_save_assigns_ids_to_new_records(self) -> None:
        repository = InMemoryIncidRepository(first_id=50)
        incid = make_incid(
            secondaries=[persisted_secondary("s1", 7), SecondaryHabitat(code="s2")],
            priority=[PriorityHabitat(code="bap1")],
            condition=Condition(code="C"),
        )

        saved = repository.save_incid(incid)

        assert [s.persisted_id for s in saved.secondary_habitats] == [7, 50]
        assert saved.priority_user[0].persisted_id == 51
        assert saved.condition is not None
        assert saved.condition.persisted_id == 52
        assert incid.secondary_habitats[1].is_added
        assert repository.save_count == 1

    def test_clear(self) -> None:
        repository = InMemoryIncidRepository([make_incid()])
        repository.save_incid(make_incid())
        repository.clear()
        assert repository.stored(INCID_KEY) is None
        assert repository.save_count == 0


class TestRecordingChangeNotifier:
    """Tests for RecordingChangeNotifier."""

    def test_records_in_order(self) -> None:
        notifier = RecordingChangeNotifier()
        assert isinstance(notifier, ChangeNotifierProtocol)
        notifier.notify_changed("incid")
        notifier.notify_changed("sources")
        notifier.notify_changed("incid")
        assert notifier.names == ["incid", "sources", "incid"]
        assert notifier.count("incid") == 2
        notifier.clear()
        assert notifier.names == []
