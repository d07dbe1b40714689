"""Editing and validation option types.

The enumerations mirror the options a user can choose in the host's
settings dialog. The rule objects bundle the configured codes that some
validation rules compare against, so domain services never read
configuration directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SecondaryOrderPolicy(str, Enum):
    """How secondary habitats are ordered for display and storage."""

    AS_ENTERED = "As entered"
    BY_GROUP_THEN_CODE = "By group then code"
    BY_CODE = "By code"


class PrimarySecondaryCodeValidation(Enum):
    """Whether secondary codes must be valid for the primary code."""

    IGNORE = 0
    ERROR = 1


class HabitatSecondaryCodeValidation(Enum):
    """How missing mandatory secondaries for a habitat type are reported."""

    IGNORE = 0
    WARNING = 1
    ERROR = 2


class QualityValidation(Enum):
    """Whether incid quality determination/interpretation are mandatory."""

    OPTIONAL = 0
    MANDATORY = 1


class PotentialPriorityDetermQtyValidation(Enum):
    """Whether user-added priority habitats are restricted to potential codes."""

    IGNORE = 0
    ERROR = 1


@dataclass(frozen=True)
class ImportanceRules:
    """Codes used by the source importance cross-slot checks.

    Attributes:
        skip: Importance value that may repeat across slots and is ignored
            by both checks (e.g. "none").
        first: Highest precedence token; must be applied first.
        second: Allowed only when some slot already holds `first`.
        third: Allowed only when some slot already holds `second`.
    """

    skip: str | None
    first: str | None
    second: str | None
    third: str | None


@dataclass(frozen=True)
class BapQualityRules:
    """Determination-quality codes with special meaning for priority habitats.

    Attributes:
        user_added: Code for "not present but close to definition".
        user_added_description: Display text for `user_added`.
        previous: Code for "previously present, but may no longer exist".
        previous_description: Display text for `previous`.
        potential_validation: Whether user rows must use one of the two codes.
    """

    user_added: str
    user_added_description: str
    previous: str
    previous_description: str
    potential_validation: PotentialPriorityDetermQtyValidation = (
        PotentialPriorityDetermQtyValidation.IGNORE
    )

    @property
    def potential_codes(self) -> frozenset[str]:
        return frozenset({self.user_added, self.previous})
