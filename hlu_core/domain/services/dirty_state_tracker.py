"""Dirty state tracking domain service.

Compares the live incid aggregate with a snapshot of the records as they
were loaded, one aggregate at a time.

Rules:
    - An aggregate is dirty when its record count changed or any live
      record is dirty.
    - A live record is dirty when no original has its id, more than one
      original has its id, it is transient and invalid, or any field
      differs from its original. None and "" are different values.
    - A persisted record that is invalid but untouched is never dirty.
    - Sources are compared slot by slot, so moving a source to another
      slot makes the sources aggregate dirty.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from hlu_core.domain.models.incid import Incid
from hlu_core.domain.models.multiplex_code import MultiplexGroup
from hlu_core.domain.models.priority_habitat import PriorityHabitat
from hlu_core.domain.models.records import ChildRecord
from hlu_core.domain.models.secondary_habitat import SecondaryHabitat
from hlu_core.domain.models.validation_options import BapQualityRules

SECONDARY_HABITATS = "secondary_habitats"
PRIORITY_HABITATS = "priority_habitats"
CONDITION = "condition"
SOURCES = "sources"

AGGREGATES: tuple[str, ...] = (
    SECONDARY_HABITATS,
    PRIORITY_HABITATS,
    CONDITION,
    SOURCES,
    MultiplexGroup.MATRIX.value,
    MultiplexGroup.FORMATION.value,
    MultiplexGroup.MANAGEMENT.value,
)

ItemTuple = tuple[Any, ...]
SlotItems = tuple[ItemTuple | None, ...]
ValidityCheck = Callable[[ChildRecord], bool]


def aggregate_records(incid: Incid) -> dict[str, list[ChildRecord]]:
    """Return the tracked child records of an incid, keyed by aggregate.

    Sources are tracked per slot by source_slot_items instead.
    """
    records: dict[str, list[ChildRecord]] = {
        SECONDARY_HABITATS: list(incid.secondary_habitats),
        PRIORITY_HABITATS: list(incid.priority_habitats),
        CONDITION: [incid.condition] if incid.condition is not None else [],
    }
    for group in MultiplexGroup:
        records[group.value] = list(incid.multiplex.get(group, []))
    return records


def source_slot_items(incid: Incid) -> SlotItems:
    """Return one item tuple per source slot, prefixed by the slot index.

    Empty slots are kept as None so slot positions line up.
    """
    return tuple(
        None if source is None else (slot, *source.to_item_tuple())
        for slot, source in enumerate(incid.sources)
    )


@dataclass(frozen=True)
class IncidSnapshot:
    """Field values of an incid and its child records at one point in time."""

    key: str
    scalars: Mapping[str, Any]
    aggregates: Mapping[str, SlotItems]

    @classmethod
    def capture(cls, incid: Incid) -> IncidSnapshot:
        aggregates: dict[str, SlotItems] = {
            name: tuple(r.to_item_tuple() for r in records)
            for name, records in aggregate_records(incid).items()
        }
        aggregates[SOURCES] = source_slot_items(incid)
        return cls(
            key=incid.key,
            scalars=MappingProxyType(dict(incid.scalar_values())),
            aggregates=MappingProxyType(aggregates),
        )

    def changed_aggregates(self, other: IncidSnapshot) -> list[str]:
        """Name the aggregates whose records differ between two snapshots.

        The incid's own fields are reported as "incid".
        """
        changed = ["incid"] if dict(self.scalars) != dict(other.scalars) else []
        changed.extend(
            name
            for name in AGGREGATES
            if self.aggregates.get(name, ()) != other.aggregates.get(name, ())
        )
        return changed


@dataclass(frozen=True)
class DirtyState:
    """Per-aggregate dirty flags of an incid."""

    incid: bool = False
    secondary_habitats: bool = False
    priority_habitats: bool = False
    condition: bool = False
    sources: bool = False
    ihs_matrix: bool = False
    ihs_formation: bool = False
    ihs_management: bool = False
    dirty_aggregates: tuple[str, ...] = field(default=())

    @property
    def is_dirty(self) -> bool:
        return self.incid or bool(self.dirty_aggregates)


def _differs(live: ItemTuple, original: ItemTuple) -> bool:
    # None and "" compare unequal
    return live != original


def record_is_dirty(
    record: ChildRecord,
    originals: Sequence[ItemTuple],
    is_valid: bool = True,
) -> bool:
    """Decide whether one live record counts towards dirtiness.

    Args:
        record: The live record.
        originals: Item tuples of the aggregate as loaded; the first
            element of each is the persisted id.
        is_valid: Result of record validation for the live record.
    """
    matches = [o for o in originals if o[0] == record.persisted_id]
    if not matches:
        return True
    if len(matches) > 1:
        return True
    if record.is_added and not is_valid:
        return True
    return _differs(record.to_item_tuple(), matches[0])


def _always_valid(record: ChildRecord) -> bool:
    return True


class DirtyStateTracker:
    """Evaluates an incid against the snapshot taken when it was loaded."""

    def __init__(
        self,
        snapshot: IncidSnapshot,
        quality_rules: BapQualityRules | None = None,
    ) -> None:
        self._snapshot = snapshot
        self._quality_rules = quality_rules

    @property
    def snapshot(self) -> IncidSnapshot:
        return self._snapshot

    def evaluate(self, incid: Incid) -> DirtyState:
        live = aggregate_records(incid)
        flags: dict[str, bool] = {}
        for name in AGGREGATES:
            if name == SOURCES:
                continue
            flags[name] = self._aggregate_is_dirty(
                live[name],
                self._snapshot.aggregates.get(name, ()),
                self._validity_check(name, live[name]),
            )
        flags[SOURCES] = source_slot_items(incid) != self._snapshot.aggregates.get(
            SOURCES, ()
        )

        return DirtyState(
            incid=dict(incid.scalar_values()) != dict(self._snapshot.scalars),
            dirty_aggregates=tuple(n for n in AGGREGATES if flags[n]),
            **flags,
        )

    def _aggregate_is_dirty(
        self,
        records: list[ChildRecord],
        originals: Sequence[ItemTuple],
        is_valid: ValidityCheck,
    ) -> bool:
        if len(records) != len(originals):
            return True
        return any(record_is_dirty(r, originals, is_valid(r)) for r in records)

    def _validity_check(
        self, name: str, records: list[ChildRecord]
    ) -> ValidityCheck:
        if name == SECONDARY_HABITATS:
            return lambda r: r.is_valid if isinstance(r, SecondaryHabitat) else True
        if name == PRIORITY_HABITATS and self._quality_rules is not None:
            rules = self._quality_rules
            siblings = [r for r in records if isinstance(r, PriorityHabitat)]
            return (
                lambda r: r.is_valid(rules, siblings)
                if isinstance(r, PriorityHabitat)
                else True
            )
        return _always_valid
