"""Editing rules handed to the incid editor service.

The application layer cannot read configuration itself; bootstrap builds
these settings from EditorConfig.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from hlu_core.domain.models.validation_options import (
    BapQualityRules,
    HabitatSecondaryCodeValidation,
    ImportanceRules,
    PotentialPriorityDetermQtyValidation,
    PrimarySecondaryCodeValidation,
    QualityValidation,
    SecondaryOrderPolicy,
)
from hlu_core.domain.services.priority_habitat_reconciler import (
    DEFAULT_DUPLICATE_THRESHOLD,
)

DEFAULT_IMPORTANCE_RULES = ImportanceRules(
    skip="none", first="primary", second="secondary", third="tertiary"
)

DEFAULT_BAP_QUALITY_RULES = BapQualityRules(
    user_added="NP",
    user_added_description="Not present but close to definition",
    previous="PP",
    previous_description="Previously present, but may no longer exist",
    potential_validation=PotentialPriorityDetermQtyValidation.IGNORE,
)


@dataclass(frozen=True)
class EditorSettings:
    """Rules and modes used while editing an incid.

    Attributes:
        order_policy: Ordering of secondary habitats.
        preferred_secondary_group: Group selected after a primary change.
        secondary_delimiter: Joins secondary codes in the summary.
        primary_secondary_validation: Secondaries must suit the primary.
        habitat_secondary_validation: Reporting of missing mandatory
            secondaries of the habitat type.
        quality_validation: Incid quality fields mandatory or optional.
        importance_rules: Source importance skip and precedence tokens.
        bap_quality_rules: Priority habitat determination-quality codes.
        duplicate_threshold: Duplicate priority habitat codes tolerated
            before has_duplicates is raised.
        bulk_mode: Bulk update mode; relaxes mandatory quality fields.
        osmm_bulk_mode: OSMM bulk update mode; requires a source.
    """

    order_policy: SecondaryOrderPolicy = SecondaryOrderPolicy.AS_ENTERED
    preferred_secondary_group: str | None = None
    secondary_delimiter: str = "."
    primary_secondary_validation: PrimarySecondaryCodeValidation = (
        PrimarySecondaryCodeValidation.ERROR
    )
    habitat_secondary_validation: HabitatSecondaryCodeValidation = (
        HabitatSecondaryCodeValidation.ERROR
    )
    quality_validation: QualityValidation = QualityValidation.OPTIONAL
    importance_rules: ImportanceRules = field(default=DEFAULT_IMPORTANCE_RULES)
    bap_quality_rules: BapQualityRules = field(default=DEFAULT_BAP_QUALITY_RULES)
    duplicate_threshold: int = DEFAULT_DUPLICATE_THRESHOLD
    bulk_mode: bool = False
    osmm_bulk_mode: bool = False
