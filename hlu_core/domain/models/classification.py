"""Classification reference rows.

Immutable rows of the reference tables the host loads once at startup.
They are grouped into a ClassificationLookup, which is the only thing
the rest of the core queries.

Cross-reference rows from primary codes to secondary codes may carry a
primary code ending in WILDCARD_MARKER, meaning "every primary code that
starts with this prefix".
"""

from __future__ import annotations

from dataclasses import dataclass

WILDCARD_MARKER: str = "*"


@dataclass(frozen=True)
class PrimaryHabitatCode:
    """A primary habitat code.

    Attributes:
        code: Primary habitat code, e.g. "w1f7".
        description: Display description.
        category: Primary category code the habitat belongs to.
        nvc_codes: NVC codes typically associated with the habitat.
        sort_order: Display ordering.
        is_local: Whether the code is in use locally.
    """

    code: str
    description: str = ""
    category: str | None = None
    nvc_codes: str | None = None
    sort_order: int = 0
    is_local: bool = True


@dataclass(frozen=True)
class SecondaryHabitatCode:
    """A secondary habitat code and the group it belongs to."""

    code: str
    description: str = ""
    group: str | None = None
    sort_order: int = 0
    is_local: bool = True


@dataclass(frozen=True)
class SecondaryGroup:
    """A group of secondary habitat codes."""

    code: str
    description: str = ""
    sort_order: int = 0


@dataclass(frozen=True)
class PrimarySecondaryXref:
    """Links a primary code (or primary prefix) to a legal secondary code."""

    code_primary: str
    code_secondary: str

    @property
    def is_wildcard(self) -> bool:
        return self.code_primary.endswith(WILDCARD_MARKER)

    def matches(self, primary_code: str) -> bool:
        """Check whether this row applies to the given primary code.

        Exact match, or prefix match when the row code ends with the
        wildcard marker.
        """
        if self.code_primary == primary_code:
            return True
        if self.is_wildcard:
            return primary_code.startswith(self.code_primary.rstrip(WILDCARD_MARKER))
        return False


@dataclass(frozen=True)
class PrimaryBapXref:
    """Priority habitat implied by a primary code (exact match only)."""

    code_primary: str
    bap_habitat: str


@dataclass(frozen=True)
class SecondaryBapXref:
    """Priority habitat implied by a secondary code."""

    code_secondary: str
    bap_habitat: str


@dataclass(frozen=True)
class HabitatType:
    """A habitat type from a habitat classification (scopes primary codes)."""

    code: str
    description: str = ""
    habitat_class: str | None = None
    sort_order: int = 0


@dataclass(frozen=True)
class HabitatTypePrimary:
    """Primary code available under a habitat type."""

    code_habitat_type: str
    code_primary: str


@dataclass(frozen=True)
class HabitatTypeSecondary:
    """Secondary code suggested (or required) for a habitat type."""

    code_habitat_type: str
    code_secondary: str
    mandatory: bool = False


@dataclass(frozen=True)
class SourceName:
    """An evidence source that incid source slots may reference."""

    source_id: int
    source_name: str
    source_date_default: str | None = None
