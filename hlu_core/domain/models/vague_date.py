"""Vague date value object.

A vague date records when something was observed when the exact day is
not known: a start/end range (days since the epoch date) plus a type code
describing the precision, and the text the user originally typed.

Type codes:
    D, DD       single day, day range
    O, OO       single month, month range
    Y, YY       single year, year range
    Y-, -Y      from year onwards, up to year
    P, PP       single season, season range
    U           unknown
"""

from __future__ import annotations

from dataclasses import dataclass

DATE_UNKNOWN: int = 0
"""Start/end value used when a bound is unknown."""

UNKNOWN_DATE_TYPE: str = "U"

VAGUE_DATE_TYPES: frozenset[str] = frozenset(
    {"D", "DD", "O", "OO", "Y", "YY", "Y-", "-Y", "P", "PP", UNKNOWN_DATE_TYPE}
)


@dataclass(frozen=True, eq=True)
class VagueDate:
    """An imprecise date range.

    Attributes:
        start: Start of the range in days, DATE_UNKNOWN when open.
        end: End of the range in days, DATE_UNKNOWN when open.
        date_type: Vague date type code (see module docstring).
        user_entry: Raw text entered by the user, if any.
    """

    start: int = DATE_UNKNOWN
    end: int = DATE_UNKNOWN
    date_type: str | None = None
    user_entry: str | None = None

    @property
    def is_unknown(self) -> bool:
        """True when the date is explicitly of the unknown type."""
        return self.date_type == UNKNOWN_DATE_TYPE

    @property
    def is_bad(self) -> bool:
        """True when the date could not be interpreted.

        A date is bad when its type code is missing or unrecognised, or when
        both bounds are known and the start falls after the end.
        """
        if self.date_type not in VAGUE_DATE_TYPES:
            return True
        if self.is_unknown:
            return False
        if (
            self.start != DATE_UNKNOWN
            and self.end != DATE_UNKNOWN
            and self.start > self.end
        ):
            return True
        return False

    def to_triple(self) -> tuple[int, int, str | None]:
        """Return the persisted (start, end, type) triple."""
        return (self.start, self.end, self.date_type)

    @classmethod
    def unknown(cls) -> VagueDate:
        """Create an explicitly unknown vague date."""
        return cls(DATE_UNKNOWN, DATE_UNKNOWN, UNKNOWN_DATE_TYPE)
