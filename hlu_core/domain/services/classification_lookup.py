"""Classification reference lookup.

The ClassificationLookup is a read-only graph over the reference tables:
primary codes and categories, secondary codes and groups, the
primary-secondary cross reference (with prefix wildcards), the primary
and secondary priority habitat cross references, the habitat type cross
references and the source names.

It is built once, never mutated and passed by reference to every domain
service that needs it. Queries are answered from indexes built in the
constructor.

Usage:
    lookup = ClassificationLookup(
        primary_codes=[PrimaryHabitatCode("w1f7", category="W")],
        secondary_codes=[SecondaryHabitatCode("10", group="S")],
        primary_secondaries=[PrimarySecondaryXref("w1*", "10")],
    )
    lookup.secondaries_for("w1f7")  # -> [SecondaryHabitatCode("10", ...)]
"""

from __future__ import annotations

from collections.abc import Iterable

from hlu_core.domain.errors import PrimaryCodeNotFoundError
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


def _distinct(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


class ClassificationLookup:
    """Immutable query surface over the classification reference tables."""

    def __init__(
        self,
        *,
        primary_codes: Iterable[PrimaryHabitatCode] = (),
        secondary_codes: Iterable[SecondaryHabitatCode] = (),
        secondary_groups: Iterable[SecondaryGroup] = (),
        primary_secondaries: Iterable[PrimarySecondaryXref] = (),
        primary_baps: Iterable[PrimaryBapXref] = (),
        secondary_baps: Iterable[SecondaryBapXref] = (),
        habitat_types: Iterable[HabitatType] = (),
        habitat_type_primaries: Iterable[HabitatTypePrimary] = (),
        habitat_type_secondaries: Iterable[HabitatTypeSecondary] = (),
        source_names: Iterable[SourceName] = (),
    ) -> None:
        self._primary_codes: tuple[PrimaryHabitatCode, ...] = tuple(primary_codes)
        self._secondary_codes: tuple[SecondaryHabitatCode, ...] = tuple(
            secondary_codes
        )
        self._secondary_groups: tuple[SecondaryGroup, ...] = tuple(
            sorted(secondary_groups, key=lambda g: (g.sort_order, g.description))
        )
        self._primary_secondaries: tuple[PrimarySecondaryXref, ...] = tuple(
            primary_secondaries
        )
        self._habitat_types: tuple[HabitatType, ...] = tuple(habitat_types)
        self._habitat_type_primaries: tuple[HabitatTypePrimary, ...] = tuple(
            habitat_type_primaries
        )
        self._habitat_type_secondaries: tuple[HabitatTypeSecondary, ...] = tuple(
            habitat_type_secondaries
        )

        self._primary_by_code = {p.code: p for p in self._primary_codes}
        self._secondary_by_code = {s.code: s for s in self._secondary_codes}
        self._sources_by_id = {s.source_id: s for s in source_names}

        self._primary_bap_index: dict[str, list[str]] = {}
        for row in primary_baps:
            self._primary_bap_index.setdefault(row.code_primary, []).append(
                row.bap_habitat
            )
        self._secondary_bap_index: dict[str, list[str]] = {}
        for row in secondary_baps:
            self._secondary_bap_index.setdefault(row.code_secondary, []).append(
                row.bap_habitat
            )

    @classmethod
    def empty(cls) -> ClassificationLookup:
        """Create a lookup with no reference rows at all."""
        return cls()

    # Primary codes

    def primary_code(self, code: str) -> PrimaryHabitatCode | None:
        return self._primary_by_code.get(code)

    def primary_category_of(self, code: str) -> str | None:
        """Return the category of a primary code, or None if unknown."""
        row = self._primary_by_code.get(code)
        return row.category if row is not None else None

    def require_primary_category(self, code: str) -> str:
        """Return the category of a primary code.

        Raises:
            PrimaryCodeNotFoundError: If the code is not in the lookup or
                has no category.
        """
        category = self.primary_category_of(code)
        if category is None:
            raise PrimaryCodeNotFoundError(code)
        return category

    def primary_codes_for_habitat_type(
        self, habitat_type: str | None
    ) -> list[PrimaryHabitatCode]:
        """Return the primary codes selectable under a habitat type.

        With no habitat type every local primary code is available.
        Otherwise only the codes cross referenced to the habitat type are.
        """
        if not habitat_type:
            candidates = [p for p in self._primary_codes if p.is_local]
        else:
            wanted = {
                x.code_primary
                for x in self._habitat_type_primaries
                if x.code_habitat_type == habitat_type
            }
            candidates = [p for p in self._primary_codes if p.code in wanted]
        return sorted(candidates, key=lambda p: (p.sort_order, p.code))

    def nvc_codes_for(self, code: str, habitat_type: str | None = None) -> str | None:
        """Return the NVC hint of a primary code within the habitat type scope."""
        for row in self.primary_codes_for_habitat_type(habitat_type):
            if row.code == code:
                return row.nvc_codes
        return None

    # Secondary codes

    @property
    def secondary_groups(self) -> tuple[SecondaryGroup, ...]:
        return self._secondary_groups

    @property
    def all_secondary_codes(self) -> frozenset[str]:
        """Every known secondary code, regardless of the primary code."""
        return frozenset(self._secondary_by_code)

    def secondary_code(self, code: str) -> SecondaryHabitatCode | None:
        return self._secondary_by_code.get(code)

    def secondary_group_of(self, code: str) -> str | None:
        row = self._secondary_by_code.get(code)
        return row.group if row is not None else None

    def secondaries_for(self, primary_code: str) -> list[SecondaryHabitatCode]:
        """Return the secondary codes valid for a primary code.

        A cross reference row applies when its primary code equals
        primary_code, or when it ends with the wildcard marker and
        primary_code starts with the rest of it. Results are distinct and
        ordered by (sort_order, description).
        """
        codes = _distinct(
            x.code_secondary
            for x in self._primary_secondaries
            if x.matches(primary_code)
        )
        rows = [
            self._secondary_by_code[c]
            for c in codes
            if c in self._secondary_by_code and self._secondary_by_code[c].is_local
        ]
        return sorted(rows, key=lambda s: (s.sort_order, s.description))

    # Priority habitats

    def priority_habitats_for_primary(self, primary_code: str) -> list[str]:
        """Return the priority habitats implied by a primary code (exact match)."""
        return list(self._primary_bap_index.get(primary_code, ()))

    def priority_habitats_for_secondary(self, secondary_code: str) -> list[str]:
        return list(self._secondary_bap_index.get(secondary_code, ()))

    # Habitat types

    def habitat_type(self, code: str) -> HabitatType | None:
        for row in self._habitat_types:
            if row.code == code:
                return row
        return None

    def mandatory_secondaries_for_habitat_type(
        self, habitat_type: str | None
    ) -> list[str]:
        """Return the secondary codes a habitat type requires, in table order."""
        if not habitat_type:
            return []
        return _distinct(
            x.code_secondary
            for x in self._habitat_type_secondaries
            if x.code_habitat_type == habitat_type and x.mandatory
        )

    # Sources

    def source_exists(self, source_id: int) -> bool:
        return source_id in self._sources_by_id

    def source_name(self, source_id: int) -> str | None:
        row = self._sources_by_id.get(source_id)
        return row.source_name if row is not None else None
