"""Priority (BAP) habitat record and its record-level validation.

Each incid carries two partitions of priority habitats:

- Auto: habitats implied by the primary and secondary codes. These are
  mandatory and may not use the "potential" determination qualities.
- User: habitats added by the user independently of the codes. When
  potential-priority validation is on, these must use one of the
  "potential" determination qualities.

`is_auto` is re-derived by every reconciliation and is not persisted.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any

from hlu_core.domain.models.records import TRANSIENT_ID
from hlu_core.domain.models.validation_options import (
    BapQualityRules,
    PotentialPriorityDetermQtyValidation,
)

MAX_COMMENTS_LENGTH: int = 254


def _truncate(comments: str | None) -> str | None:
    if comments is None or len(comments) <= MAX_COMMENTS_LENGTH:
        return comments
    return comments[:MAX_COMMENTS_LENGTH]


@dataclass(eq=True)
class PriorityHabitat:
    """A priority habitat assignment.

    Attributes:
        persisted_id: Durable id, or TRANSIENT_ID for a placeholder or a
            user addition that has not been saved.
        incid: Key of the owning incid.
        code: Priority habitat code.
        determination_quality: Determination-quality code.
        interpretation_quality: Interpretation-quality code.
        interpretation_comments: Free text, truncated to 254 characters.
        is_auto: True when the habitat is mandatory for the current codes.
        bulk_mode: True while editing in bulk update mode, which relaxes the
            mandatory quality fields.
    """

    persisted_id: int = TRANSIENT_ID
    incid: str | None = None
    code: str | None = None
    determination_quality: str | None = None
    interpretation_quality: str | None = None
    interpretation_comments: str | None = None
    is_auto: bool = False
    bulk_mode: bool = False

    def __post_init__(self) -> None:
        self.interpretation_comments = _truncate(self.interpretation_comments)

    @property
    def is_added(self) -> bool:
        """True for a record that has not been persisted yet."""
        return self.persisted_id == TRANSIENT_ID

    @classmethod
    def placeholder(cls, incid: str | None, code: str) -> PriorityHabitat:
        """Create a new mandatory habitat with no quality detail."""
        return cls(persisted_id=TRANSIENT_ID, incid=incid, code=code, is_auto=True)

    def reclassified(self, *, is_auto: bool, bulk_mode: bool) -> PriorityHabitat:
        """Copy this record into a partition, keeping identity and detail."""
        return replace(self, is_auto=is_auto, bulk_mode=bulk_mode)

    def to_item_tuple(self) -> tuple[Any, ...]:
        """Return the persisted field values in column order."""
        return (
            self.persisted_id,
            self.incid,
            self.code,
            self.determination_quality,
            self.interpretation_quality,
            self.interpretation_comments,
        )

    def validation_errors(
        self,
        rules: BapQualityRules,
        siblings: Iterable[PriorityHabitat] | None = None,
    ) -> list[str]:
        """Validate the record against the priority habitat rules.

        Args:
            rules: Determination-quality codes with special meaning.
            siblings: Every priority habitat of the incid (both partitions),
                used to detect a code entered twice.

        Returns:
            Error messages; empty when the record is valid.
        """
        errors: list[str] = []

        if not self.is_added and not self.incid:
            errors.append("Error: INCID is a mandatory field")

        if not self.code:
            errors.append("Error: Priority habitat is a mandatory field")
        elif siblings is not None and sum(
            1 for s in siblings if s.code == self.code
        ) > 1:
            errors.append("Error: Duplicate priority habitat")

        determination = self.determination_quality
        if not determination:
            if not self.bulk_mode:
                errors.append("Error: Determination quality is a mandatory field")
        elif not self.is_auto:
            if (
                rules.potential_validation == PotentialPriorityDetermQtyValidation.ERROR
                and determination not in rules.potential_codes
            ):
                errors.append(
                    "Error: Determination quality for potential priority habitats "
                    f"can only be '{rules.user_added_description}' or "
                    f"'{rules.previous_description}'"
                )
        elif determination == rules.user_added:
            errors.append(
                "Error: Determination quality cannot be "
                f"'{rules.user_added_description}' for priority habitats"
            )
        elif determination == rules.previous:
            errors.append(
                "Error: Determination quality cannot be "
                f"'{rules.previous_description}' for priority habitats"
            )

        if not self.bulk_mode and not self.interpretation_quality:
            errors.append("Error: Interpretation quality is a mandatory field")

        return errors

    def is_valid(
        self,
        rules: BapQualityRules,
        siblings: Iterable[PriorityHabitat] | None = None,
    ) -> bool:
        return not self.validation_errors(rules, siblings)
