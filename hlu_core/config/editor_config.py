"""Incid editor configuration.

Defines the editing and validation options with environment variable
overrides. Invalid values fall back to the defaults.

Environment Variables (Secondary habitats):
- HLU_SECONDARY_ORDER: "As entered", "By group then code" or "By code"
  (default: As entered)
- HLU_PREFERRED_SECONDARY_GROUP: Group selected after a primary change
- HLU_SECONDARY_DELIMITER: Joins secondary codes (default: ".")

Environment Variables (Validation):
- HLU_PRIMARY_SECONDARY_VALIDATION: 0 ignore, 1 error (default: 1)
- HLU_HABITAT_SECONDARY_VALIDATION: 0 ignore, 1 warning, 2 error (default: 2)
- HLU_QUALITY_VALIDATION: 0 optional, 1 mandatory (default: 0)
- HLU_POTENTIAL_PRIORITY_VALIDATION: 0 ignore, 1 error (default: 0)
- HLU_BAP_DUPLICATE_THRESHOLD: Duplicate codes tolerated (default: 2)

Environment Variables (Source importance):
- HLU_IMPORTANCE_SKIP: Value ignored by the cross-slot checks (default: none)
- HLU_IMPORTANCE_FIRST / _SECOND / _THIRD: Precedence tokens
  (default: primary, secondary, tertiary)

Environment Variables (Priority habitat qualities):
- HLU_BAP_USER_ADDED_CODE / _DESCRIPTION (default: NP)
- HLU_BAP_PREVIOUS_CODE / _DESCRIPTION (default: PP)

Environment Variables (Modes):
- HLU_BULK_MODE: "true" enables bulk update mode (default: false)
- HLU_OSMM_BULK_MODE: "true" enables OSMM bulk update mode (default: false)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from hlu_core.application.services.editor_settings import EditorSettings
from hlu_core.domain.models.validation_options import (
    BapQualityRules,
    HabitatSecondaryCodeValidation,
    ImportanceRules,
    PotentialPriorityDetermQtyValidation,
    PrimarySecondaryCodeValidation,
    QualityValidation,
    SecondaryOrderPolicy,
)

E = TypeVar("E", bound=Enum)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_str_env(key: str, default: str | None) -> str | None:
    value = os.environ.get(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def _get_bool_env(key: str, default: bool) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


def _get_enum_env(key: str, enum_type: type[E], default: E) -> E:
    """Get an enum member from its value (numeric options accept digits)."""
    value = os.environ.get(key)
    if value is None:
        return default
    for member in enum_type:
        if str(member.value) == value.strip():
            return member
    return default


@dataclass(frozen=True)
class EditorConfig:
    """Configuration of incid editing and validation.

    Attributes:
        secondary_order: Ordering of secondary habitats.
        preferred_secondary_group: Group selected after a primary change.
        secondary_delimiter: Joins secondary codes in the summary.
        primary_secondary_validation: Secondaries must suit the primary.
        habitat_secondary_validation: Missing mandatory secondaries of the
            habitat type are ignored, a warning or an error.
        quality_validation: Incid quality fields optional or mandatory.
        potential_priority_validation: User priority habitats restricted
            to the potential determination qualities.
        bap_duplicate_threshold: Duplicate priority habitat codes tolerated
            before the duplicate flag is raised. Default: 2.
        importance_skip: Importance value the cross-slot checks ignore.
        importance_first: First precedence token.
        importance_second: Second precedence token.
        importance_third: Third precedence token.
        bap_user_added_code: Determination quality "not present but close
            to definition".
        bap_previous_code: Determination quality "previously present, but
            may no longer exist".
        bulk_mode: Bulk update mode.
        osmm_bulk_mode: OSMM bulk update mode.
    """

    secondary_order: SecondaryOrderPolicy = SecondaryOrderPolicy.AS_ENTERED
    preferred_secondary_group: str | None = None
    secondary_delimiter: str = "."
    primary_secondary_validation: PrimarySecondaryCodeValidation = (
        PrimarySecondaryCodeValidation.ERROR
    )
    habitat_secondary_validation: HabitatSecondaryCodeValidation = (
        HabitatSecondaryCodeValidation.ERROR
    )
    quality_validation: QualityValidation = QualityValidation.OPTIONAL
    potential_priority_validation: PotentialPriorityDetermQtyValidation = (
        PotentialPriorityDetermQtyValidation.IGNORE
    )
    bap_duplicate_threshold: int = 2
    importance_skip: str | None = "none"
    importance_first: str = "primary"
    importance_second: str = "secondary"
    importance_third: str = "tertiary"
    bap_user_added_code: str = "NP"
    bap_user_added_description: str = "Not present but close to definition"
    bap_previous_code: str = "PP"
    bap_previous_description: str = "Previously present, but may no longer exist"
    bulk_mode: bool = False
    osmm_bulk_mode: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.secondary_delimiter:
            raise ValueError("secondary_delimiter must not be empty")
        if self.bap_duplicate_threshold < 0:
            raise ValueError(
                "bap_duplicate_threshold must be non-negative, "
                f"got {self.bap_duplicate_threshold}"
            )
        tokens = [self.importance_first, self.importance_second, self.importance_third]
        if any(not t for t in tokens):
            raise ValueError("importance precedence tokens must not be empty")
        if len(set(tokens)) != len(tokens):
            raise ValueError(f"importance precedence tokens must differ, got {tokens}")
        if self.importance_skip in tokens:
            raise ValueError(
                f"importance_skip ({self.importance_skip!r}) cannot also be "
                "a precedence token"
            )
        if self.bap_user_added_code == self.bap_previous_code:
            raise ValueError(
                "bap_user_added_code and bap_previous_code must differ, "
                f"both are {self.bap_user_added_code!r}"
            )
        if self.osmm_bulk_mode and not self.bulk_mode:
            raise ValueError("osmm_bulk_mode requires bulk_mode")

    @classmethod
    def from_environment(cls) -> EditorConfig:
        """Create config from HLU_* environment variables with defaults."""
        defaults = cls()
        return cls(
            secondary_order=_get_enum_env(
                "HLU_SECONDARY_ORDER", SecondaryOrderPolicy, defaults.secondary_order
            ),
            preferred_secondary_group=_get_str_env(
                "HLU_PREFERRED_SECONDARY_GROUP", defaults.preferred_secondary_group
            ),
            secondary_delimiter=os.environ.get("HLU_SECONDARY_DELIMITER")
            or defaults.secondary_delimiter,
            primary_secondary_validation=_get_enum_env(
                "HLU_PRIMARY_SECONDARY_VALIDATION",
                PrimarySecondaryCodeValidation,
                defaults.primary_secondary_validation,
            ),
            habitat_secondary_validation=_get_enum_env(
                "HLU_HABITAT_SECONDARY_VALIDATION",
                HabitatSecondaryCodeValidation,
                defaults.habitat_secondary_validation,
            ),
            quality_validation=_get_enum_env(
                "HLU_QUALITY_VALIDATION", QualityValidation, defaults.quality_validation
            ),
            potential_priority_validation=_get_enum_env(
                "HLU_POTENTIAL_PRIORITY_VALIDATION",
                PotentialPriorityDetermQtyValidation,
                defaults.potential_priority_validation,
            ),
            bap_duplicate_threshold=max(
                0,
                _get_int_env(
                    "HLU_BAP_DUPLICATE_THRESHOLD", defaults.bap_duplicate_threshold
                ),
            ),
            importance_skip=_get_str_env("HLU_IMPORTANCE_SKIP", defaults.importance_skip),
            importance_first=_get_str_env("HLU_IMPORTANCE_FIRST", None)
            or defaults.importance_first,
            importance_second=_get_str_env("HLU_IMPORTANCE_SECOND", None)
            or defaults.importance_second,
            importance_third=_get_str_env("HLU_IMPORTANCE_THIRD", None)
            or defaults.importance_third,
            bap_user_added_code=_get_str_env("HLU_BAP_USER_ADDED_CODE", None)
            or defaults.bap_user_added_code,
            bap_user_added_description=_get_str_env(
                "HLU_BAP_USER_ADDED_DESCRIPTION", None
            )
            or defaults.bap_user_added_description,
            bap_previous_code=_get_str_env("HLU_BAP_PREVIOUS_CODE", None)
            or defaults.bap_previous_code,
            bap_previous_description=_get_str_env("HLU_BAP_PREVIOUS_DESCRIPTION", None)
            or defaults.bap_previous_description,
            bulk_mode=_get_bool_env("HLU_BULK_MODE", defaults.bulk_mode),
            osmm_bulk_mode=_get_bool_env("HLU_OSMM_BULK_MODE", defaults.osmm_bulk_mode),
        )

    @property
    def importance_rules(self) -> ImportanceRules:
        return ImportanceRules(
            skip=self.importance_skip,
            first=self.importance_first,
            second=self.importance_second,
            third=self.importance_third,
        )

    @property
    def bap_quality_rules(self) -> BapQualityRules:
        return BapQualityRules(
            user_added=self.bap_user_added_code,
            user_added_description=self.bap_user_added_description,
            previous=self.bap_previous_code,
            previous_description=self.bap_previous_description,
            potential_validation=self.potential_priority_validation,
        )

    def to_settings(self) -> EditorSettings:
        """Build the settings handed to the editor service."""
        return EditorSettings(
            order_policy=self.secondary_order,
            preferred_secondary_group=self.preferred_secondary_group,
            secondary_delimiter=self.secondary_delimiter,
            primary_secondary_validation=self.primary_secondary_validation,
            habitat_secondary_validation=self.habitat_secondary_validation,
            quality_validation=self.quality_validation,
            importance_rules=self.importance_rules,
            bap_quality_rules=self.bap_quality_rules,
            duplicate_threshold=self.bap_duplicate_threshold,
            bulk_mode=self.bulk_mode,
            osmm_bulk_mode=self.osmm_bulk_mode,
        )


# Default config, matching the settings the editor uses when none are given
DEFAULT_EDITOR_CONFIG = EditorConfig()

# Bulk update config used by bulk edit sessions
BULK_EDITOR_CONFIG = EditorConfig(bulk_mode=True)
