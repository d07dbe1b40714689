"""Builders for reference lookups and incid aggregates used across tests.

The scenario lookup:

    primary  A1.1  category A, NVC "W8"      -> priority bap1
    primary  A2    category A                 (no priority habitats)
    primary  X9    no category                (data integrity fault)
    secondary s1 (group G1)                   -> priority bap2
    secondary s2 (group G2)                   -> priority bap3
    secondary 161 (group G1)
    primary-secondary: "A1*" -> s1, "A1.1" -> s2, "A2" -> 161
    habitat type HT1: primaries A1.1, A2; s1 mandatory, s2 optional
    sources 1, 2, 3
"""

from __future__ import annotations

from hlu_core.application.services.editor_settings import (
    DEFAULT_BAP_QUALITY_RULES,
    DEFAULT_IMPORTANCE_RULES,
)
from hlu_core.domain.models.classification import (
    HabitatType,
    HabitatTypePrimary,
    HabitatTypeSecondary,
    PrimaryBapXref,
    PrimaryHabitatCode,
    PrimarySecondaryXref,
    SecondaryBapXref,
    SecondaryGroup,
    SecondaryHabitatCode,
    SourceName,
)
from hlu_core.domain.models.incid import Incid
from hlu_core.domain.models.priority_habitat import PriorityHabitat
from hlu_core.domain.models.secondary_habitat import SecondaryHabitat
from hlu_core.domain.models.source_slot import SourceSlot
from hlu_core.domain.models.vague_date import VagueDate
from hlu_core.domain.services.classification_lookup import ClassificationLookup

INCID_KEY = "HLU/0001"

BAP_RULES = DEFAULT_BAP_QUALITY_RULES
IMPORTANCE_RULES = DEFAULT_IMPORTANCE_RULES


def scenario_lookup() -> ClassificationLookup:
    return ClassificationLookup(
        primary_codes=[
            PrimaryHabitatCode("A1.1", "Woodland", category="A", nvc_codes="W8", sort_order=1),
            PrimaryHabitatCode("A2", "Scrub", category="A", nvc_codes="W21", sort_order=2),
            PrimaryHabitatCode("X9", "Orphan", category=None, sort_order=9),
        ],
        secondary_codes=[
            SecondaryHabitatCode("s1", "Ancient", group="G1", sort_order=2),
            SecondaryHabitatCode("s2", "Wet", group="G2", sort_order=1),
            SecondaryHabitatCode("161", "Hedge", group="G1", sort_order=3),
        ],
        secondary_groups=[
            SecondaryGroup("G1", "Habitat", sort_order=1),
            SecondaryGroup("G2", "Structure", sort_order=2),
        ],
        primary_secondaries=[
            PrimarySecondaryXref("A1*", "s1"),
            PrimarySecondaryXref("A1.1", "s2"),
            PrimarySecondaryXref("A2", "161"),
        ],
        primary_baps=[PrimaryBapXref("A1.1", "bap1")],
        secondary_baps=[
            SecondaryBapXref("s1", "bap2"),
            SecondaryBapXref("s2", "bap3"),
        ],
        habitat_types=[HabitatType("HT1", "Woodland type", habitat_class="PHAP")],
        habitat_type_primaries=[
            HabitatTypePrimary("HT1", "A1.1"),
            HabitatTypePrimary("HT1", "A2"),
        ],
        habitat_type_secondaries=[
            HabitatTypeSecondary("HT1", "s1", mandatory=True),
            HabitatTypeSecondary("HT1", "s2", mandatory=False),
        ],
        source_names=[
            SourceName(1, "OS MasterMap"),
            SourceName(2, "Aerial photography"),
            SourceName(3, "Field survey"),
        ],
    )


def complete_bap(
    code: str,
    persisted_id: int,
    determination: str = "D",
    interpretation: str = "I",
    incid: str = INCID_KEY,
) -> PriorityHabitat:
    """A priority habitat row with every mandatory quality filled in."""
    return PriorityHabitat(
        persisted_id=persisted_id,
        incid=incid,
        code=code,
        determination_quality=determination,
        interpretation_quality=interpretation,
    )


def persisted_secondary(
    code: str, persisted_id: int, group: str | None = "G1"
) -> SecondaryHabitat:
    return SecondaryHabitat(
        persisted_id=persisted_id, incid=INCID_KEY, code=code, group=group
    )


def valid_source(
    source_id: int,
    boundary: str = "primary",
    habitat: str = "primary",
    persisted_id: int = -1,
) -> SourceSlot:
    """A source slot that passes every single-slot rule."""
    return SourceSlot(
        persisted_id=persisted_id,
        incid=INCID_KEY,
        source_id=source_id,
        date=VagueDate(40000, 40000, "D"),
        habitat_class="PHAP",
        habitat_type="HT1",
        boundary_importance=boundary,
        habitat_importance=habitat,
    )


def make_incid(
    primary: str | None = "A1.1",
    secondaries: list[SecondaryHabitat] | None = None,
    priority: list[PriorityHabitat] | None = None,
    **fields: object,
) -> Incid:
    """An incid as a repository would hand it over.

    Persisted priority habitats arrive unclassified, in priority_user.
    """
    return Incid(
        key=INCID_KEY,
        primary_code=primary,
        secondary_habitats=list(secondaries or []),
        priority_user=list(priority or []),
        **fields,  # type: ignore[arg-type]
    )
