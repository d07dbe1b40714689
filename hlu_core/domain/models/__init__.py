"""Domain models for the incid editing core.

Contains the incid aggregate, its child records, the classification
reference rows and the value objects shared by the domain services.
Child records are mutable because the host edits them in place;
reference rows and value objects are immutable.
"""

from hlu_core.domain.models.classification import (
    WILDCARD_MARKER,
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
from hlu_core.domain.models.condition import Condition
from hlu_core.domain.models.field_issue import FieldIssue, IssueSeverity
from hlu_core.domain.models.incid import Incid
from hlu_core.domain.models.multiplex_code import MultiplexCode, MultiplexGroup
from hlu_core.domain.models.priority_habitat import PriorityHabitat
from hlu_core.domain.models.records import TRANSIENT_ID
from hlu_core.domain.models.secondary_habitat import SecondaryHabitat
from hlu_core.domain.models.source_slot import (
    SOURCE_SLOT_COUNT,
    UNSET_SOURCE_ID,
    SourceSlot,
)
from hlu_core.domain.models.vague_date import VagueDate

__all__: list[str] = [
    "Condition",
    "FieldIssue",
    "HabitatType",
    "HabitatTypePrimary",
    "HabitatTypeSecondary",
    "Incid",
    "IssueSeverity",
    "MultiplexCode",
    "MultiplexGroup",
    "PrimaryBapXref",
    "PrimaryHabitatCode",
    "PrimarySecondaryXref",
    "PriorityHabitat",
    "SOURCE_SLOT_COUNT",
    "SecondaryBapXref",
    "SecondaryGroup",
    "SecondaryHabitat",
    "SecondaryHabitatCode",
    "SourceName",
    "SourceSlot",
    "TRANSIENT_ID",
    "UNSET_SOURCE_ID",
    "VagueDate",
    "WILDCARD_MARKER",
]
