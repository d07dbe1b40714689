"""Incid evidence source slots.

Every incid has exactly SOURCE_SLOT_COUNT source slots. A slot is either
empty (None) or holds a SourceSlot whose source_id may itself be unset.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from hlu_core.domain.models.records import TRANSIENT_ID
from hlu_core.domain.models.vague_date import VagueDate

SOURCE_SLOT_COUNT: int = 3

UNSET_SOURCE_ID: int = -(2**31)
"""Sentinel source id meaning "no source chosen"."""


@dataclass(eq=True)
class SourceSlot:
    """One evidence source of an incid.

    Attributes:
        persisted_id: Durable id, or TRANSIENT_ID when new.
        incid: Key of the owning incid.
        source_id: Id of the source in the source-name lookup.
        date: When the source was captured.
        habitat_class: Habitat classification used by the source.
        habitat_type: Habitat type within that classification.
        boundary_importance: Importance of the source to the boundary.
        habitat_importance: Importance of the source to the habitat.
    """

    persisted_id: int = TRANSIENT_ID
    incid: str | None = None
    source_id: int | None = None
    date: VagueDate | None = None
    habitat_class: str | None = None
    habitat_type: str | None = None
    boundary_importance: str | None = None
    habitat_importance: str | None = None

    @property
    def is_added(self) -> bool:
        return self.persisted_id == TRANSIENT_ID

    @property
    def has_source(self) -> bool:
        """True when a real source id is set."""
        return self.source_id is not None and self.source_id != UNSET_SOURCE_ID

    def to_item_tuple(self) -> tuple[Any, ...]:
        start, end, date_type = (
            self.date.to_triple() if self.date is not None else (None, None, None)
        )
        return (
            self.persisted_id,
            self.incid,
            self.source_id,
            start,
            end,
            date_type,
            self.habitat_class,
            self.habitat_type,
            self.boundary_importance,
            self.habitat_importance,
        )


def slot_has_source(slot: SourceSlot | None) -> bool:
    return slot is not None and slot.has_source
