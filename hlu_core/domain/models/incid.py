"""Incid aggregate.

An incid is a land-parcel habitat classification record identified by a
unique key. The aggregate holds the incid's own scalar fields plus every
child collection the editing core works on. One Incid and its children
form a single unit of mutation.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from hlu_core.domain.models.condition import Condition
from hlu_core.domain.models.multiplex_code import MultiplexCode, MultiplexGroup
from hlu_core.domain.models.priority_habitat import PriorityHabitat
from hlu_core.domain.models.secondary_habitat import SecondaryHabitat
from hlu_core.domain.models.source_slot import SOURCE_SLOT_COUNT, SourceSlot

SCALAR_FIELDS: tuple[str, ...] = (
    "primary_code",
    "legacy_habitat",
    "habitat_type",
    "boundary_base_map",
    "digitisation_base_map",
    "site_ref",
    "site_name",
    "general_comments",
    "quality_determination",
    "quality_interpretation",
    "quality_comments",
)
"""Incid fields persisted on the incid row itself (compared for dirtiness)."""


@dataclass
class Incid:
    """A habitat classification record and its child collections.

    Attributes:
        key: Unique incid code.
        primary_code: Primary habitat code, or None when not classified.
        category: Category derived from the primary code (not persisted).
        nvc_codes: NVC hint derived from the primary code (not persisted).
        legacy_habitat: Habitat code carried over from the legacy scheme.
        habitat_type: Habitat type scoping the primary-code choices.
        condition: The condition assessment, if any.
        sources: Exactly three source slots, each possibly None.
        secondary_habitats: Secondary habitats in display order.
        priority_auto: Mandatory priority habitats.
        priority_user: User-added priority habitats.
        multiplex: IHS multiplex codes keyed by group.
    """

    key: str
    primary_code: str | None = None
    category: str | None = None
    nvc_codes: str | None = None
    legacy_habitat: str | None = None
    habitat_type: str | None = None
    boundary_base_map: str | None = None
    digitisation_base_map: str | None = None
    site_ref: str | None = None
    site_name: str | None = None
    general_comments: str | None = None
    quality_determination: str | None = None
    quality_interpretation: str | None = None
    quality_comments: str | None = None
    condition: Condition | None = None
    sources: list[SourceSlot | None] = field(
        default_factory=lambda: [None] * SOURCE_SLOT_COUNT
    )
    secondary_habitats: list[SecondaryHabitat] = field(default_factory=list)
    priority_auto: list[PriorityHabitat] = field(default_factory=list)
    priority_user: list[PriorityHabitat] = field(default_factory=list)
    multiplex: dict[MultiplexGroup, list[MultiplexCode]] = field(
        default_factory=dict
    )

    def __post_init__(self) -> None:
        """Normalise the source slots and multiplex groups.

        Raises:
            ValueError: If more than three sources are supplied.
        """
        if len(self.sources) > SOURCE_SLOT_COUNT:
            raise ValueError(
                f"an incid has at most {SOURCE_SLOT_COUNT} sources, "
                f"got {len(self.sources)}"
            )
        self.sources = list(self.sources) + [None] * (
            SOURCE_SLOT_COUNT - len(self.sources)
        )
        for group in MultiplexGroup:
            self.multiplex.setdefault(group, [])

    @property
    def priority_habitats(self) -> list[PriorityHabitat]:
        """Both priority habitat partitions, Auto first."""
        return self.priority_auto + self.priority_user

    def secondary_codes(self) -> list[str]:
        return [sh.code for sh in self.secondary_habitats if sh.code]

    def scalar_values(self) -> dict[str, Any]:
        """Return the persisted scalar fields of the incid row."""
        return {name: getattr(self, name) for name in SCALAR_FIELDS}

    def deep_copy(self) -> Incid:
        """Copy the aggregate so edits cannot leak into the source copy."""
        return copy.deepcopy(self)
