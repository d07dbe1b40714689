"""Secondary habitat record.

A secondary habitat qualifies the primary habitat of an incid. Its
validity depends on the current primary code and is recomputed by the
SecondaryHabitatCollection; it is never stored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from hlu_core.domain.models.records import TRANSIENT_ID

_NON_DIGITS = re.compile(r"\D")


def secondary_sort_key(code: str | None) -> int:
    """Derive the numeric ordering key of a secondary code.

    Secondary codes are mostly numeric ("10", "161") but some carry a
    prefix or suffix; only the digits count. Codes without digits sort
    first.
    """
    if not code:
        return 0
    digits = _NON_DIGITS.sub("", code)
    return int(digits) if digits else 0


@dataclass(eq=True)
class SecondaryHabitat:
    """A secondary habitat attached to an incid.

    Attributes:
        persisted_id: Durable id, or TRANSIENT_ID for a new entry.
        incid: Key of the owning incid.
        code: Secondary habitat code.
        group: Secondary group code the entry was added under.
        is_valid: Result of the last revalidation (not persisted).
    """

    persisted_id: int = TRANSIENT_ID
    incid: str | None = None
    code: str | None = None
    group: str | None = None
    is_valid: bool = field(default=True, compare=False)

    @property
    def is_added(self) -> bool:
        """True for an entry that has not been persisted yet."""
        return self.persisted_id == TRANSIENT_ID

    @property
    def sort_key(self) -> int:
        return secondary_sort_key(self.code)

    def to_item_tuple(self) -> tuple[Any, ...]:
        """Return the persisted field values in column order."""
        return (self.persisted_id, self.incid, self.code, self.group)
