"""Primary habitat selection domain service.

Choosing a primary habitat drives everything below it: the category and
NVC hint shown alongside it, the set of secondary codes that are legal,
and (through the secondary collection) the mandatory priority habitats.

Data integrity:
    A primary code with no category in the lookup is a reference data
    fault. It is logged and returned as a warning issue on the primary
    field; derivation carries on with no category.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from hlu_core.domain.errors import PrimaryCodeNotFoundError
from hlu_core.domain.models.classification import SecondaryHabitatCode
from hlu_core.domain.models.field_issue import FieldIssue, IssueSeverity
from hlu_core.domain.services.classification_lookup import ClassificationLookup
from hlu_core.domain.services.secondary_habitat_collection import (
    SecondaryHabitatCollection,
)

logger = structlog.get_logger()

PRIMARY_FIELD_ID: str = "primary"


@dataclass(frozen=True)
class PrimaryDerivation:
    """Values derived from a primary habitat code.

    Attributes:
        code: The primary code, or None when cleared.
        category: Category of the code, None when cleared or unknown.
        nvc_codes: NVC hint for the code within the habitat type scope.
        valid_secondaries: Secondary codes legal for the primary code.
        issues: Data integrity warnings raised while deriving.
    """

    code: str | None
    category: str | None = None
    nvc_codes: str | None = None
    valid_secondaries: tuple[SecondaryHabitatCode, ...] = ()
    issues: tuple[FieldIssue, ...] = field(default=())

    @property
    def valid_secondary_codes(self) -> frozenset[str]:
        return frozenset(s.code for s in self.valid_secondaries)


class PrimaryHabitatSelector:
    """Derives category, NVC hint and valid secondaries from a primary code."""

    def __init__(
        self,
        lookup: ClassificationLookup,
        *,
        collection: SecondaryHabitatCollection | None = None,
        preferred_secondary_group: str | None = None,
    ) -> None:
        self._lookup = lookup
        self._collection = collection
        self._preferred_secondary_group = preferred_secondary_group
        self.secondary_group: str | None = preferred_secondary_group
        self.current: PrimaryDerivation = PrimaryDerivation(code=None)

    def attach(self, collection: SecondaryHabitatCollection | None) -> None:
        """Attach the collection revalidated on every primary change."""
        self._collection = collection

    def set_primary(
        self, code: str | None, habitat_type: str | None = None
    ) -> PrimaryDerivation:
        """Select a primary code and derive everything that depends on it.

        Args:
            code: New primary code, or None to clear it.
            habitat_type: Habitat type scoping the NVC hint lookup.

        Returns:
            The derivation, also kept as `current`.
        """
        if not code:
            derivation = PrimaryDerivation(code=None)
            self.secondary_group = None
        else:
            derivation = self._derive(code, habitat_type)
            self.secondary_group = self._preferred_secondary_group

        self.current = derivation
        if self._collection is not None:
            self._collection.revalidate(derivation.valid_secondary_codes)
        return derivation

    def mandatory_secondaries(self, habitat_type: str | None) -> list[str]:
        """Return the secondary codes flagged mandatory for a habitat type."""
        return self._lookup.mandatory_secondaries_for_habitat_type(habitat_type)

    def _derive(self, code: str, habitat_type: str | None) -> PrimaryDerivation:
        issues: list[FieldIssue] = []
        category: str | None
        try:
            category = self._lookup.require_primary_category(code)
        except PrimaryCodeNotFoundError as exc:
            logger.warning("primary_category_missing", code=code, error=str(exc))
            category = None
            issues.append(
                FieldIssue(
                    PRIMARY_FIELD_ID,
                    f"Warning: Primary habitat '{code}' has no category "
                    "in the lookup",
                    IssueSeverity.WARNING,
                )
            )

        return PrimaryDerivation(
            code=code,
            category=category,
            nvc_codes=self._lookup.nvc_codes_for(code, habitat_type),
            valid_secondaries=tuple(self._lookup.secondaries_for(code)),
            issues=tuple(issues),
        )
