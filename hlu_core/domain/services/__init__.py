"""Domain services for the incid editing core.

Domain services hold the derivation and validation logic that does not
belong to a single model. They depend only on domain models and errors.
"""

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

__all__: list[str] = [
    "ClassificationLookup",
    "DirtyState",
    "DirtyStateTracker",
    "IncidSnapshot",
    "PrimaryDerivation",
    "PrimaryHabitatSelector",
    "PriorityHabitatReconciler",
    "ReconciliationResult",
    "SecondaryHabitatCollection",
    "assert_reconciliation_invariants",
    "validate_condition",
    "validate_habitat",
    "validate_incid_quality",
    "validate_priority_habitats",
    "validate_sources",
]
