"""Domain errors for the incid editing core.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from HluCoreError.
"""

from hlu_core.domain.errors.editing import (
    IncidNotFoundError,
    IncidNotSaveableError,
    InvalidSourceSlotError,
    NoIncidLoadedError,
)
from hlu_core.domain.errors.lookup import (
    DataIntegrityError,
    PrimaryCodeNotFoundError,
    ReferenceDataError,
)
from hlu_core.domain.errors.reconciliation import ReconciliationInvariantError

__all__: list[str] = [
    "DataIntegrityError",
    "IncidNotFoundError",
    "IncidNotSaveableError",
    "InvalidSourceSlotError",
    "NoIncidLoadedError",
    "PrimaryCodeNotFoundError",
    "ReconciliationInvariantError",
    "ReferenceDataError",
]
