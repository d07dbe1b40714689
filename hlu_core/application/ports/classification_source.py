"""Classification source port.

The reference tables are owned by the host's database. The core only
needs them once, as an immutable ClassificationLookup.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hlu_core.domain.services.classification_lookup import ClassificationLookup


@runtime_checkable
class ClassificationSourceProtocol(Protocol):
    """Protocol for loading the classification reference tables."""

    def load(self) -> ClassificationLookup:
        """Load every reference table into a lookup.

        Returns:
            The lookup. Callers build it once and share it.
        """
        ...
