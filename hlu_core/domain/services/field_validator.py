"""Field validation domain service.

Pure functions that check the condition, the three source slots and the
habitat and quality fields of an incid. Nothing here raises for a
business condition: every problem comes back as a FieldIssue attached to
the field it concerns.

Source importance cross-slot checks:
    Boundary importance and habitat importance are each treated as a
    three-element sequence indexed by slot and run through two checks.
    - Duplicate: two slots holding the same value (other than the skip
      token) are both flagged.
    - Ordered application: the second token needs the first token in some
      slot and the third token needs the second.
"""

from __future__ import annotations

from collections.abc import Sequence

from hlu_core.domain.models.condition import Condition
from hlu_core.domain.models.field_issue import (
    FieldIssue,
    IssueSeverity,
    source_field_id,
    unique_issues,
)
from hlu_core.domain.models.incid import Incid
from hlu_core.domain.models.priority_habitat import PriorityHabitat
from hlu_core.domain.models.source_slot import SourceSlot, slot_has_source
from hlu_core.domain.models.validation_options import (
    BapQualityRules,
    HabitatSecondaryCodeValidation,
    ImportanceRules,
    QualityValidation,
)
from hlu_core.domain.services.classification_lookup import ClassificationLookup

NO_HABITAT_CLASS: str = "none"

# (field name, label) of the source slot fields other than the source id
_SOURCE_FIELDS: tuple[tuple[str, str], ...] = (
    ("date", "Date"),
    ("habitat_class", "Habitat class"),
    ("habitat_type", "Habitat type"),
    ("boundary_importance", "Boundary importance"),
    ("habitat_importance", "Habitat importance"),
)

_IMPORTANCE_FIELDS: tuple[tuple[str, str], ...] = (
    ("boundary_importance", "Boundary importance"),
    ("habitat_importance", "Habitat importance"),
)


def _error(field_id: str, message: str) -> FieldIssue:
    return FieldIssue(field_id, f"Error: {message}", IssueSeverity.ERROR)


def _filled(value: object) -> bool:
    return value is not None and value != ""


# Condition


def validate_condition(condition: Condition | None) -> list[FieldIssue]:
    """Check the condition code, qualifier and date belong together."""
    if condition is None:
        return []

    issues: list[FieldIssue] = []
    if not condition.code:
        if _filled(condition.qualifier):
            issues.append(
                _error(
                    "condition.qualifier",
                    "Condition qualifier is not valid without a condition",
                )
            )
        if condition.date is not None:
            issues.append(
                _error("condition.date", "Condition date is not valid without a condition")
            )
        return issues

    if not condition.qualifier:
        issues.append(
            _error("condition.qualifier", "Condition qualifier is mandatory for a condition")
        )
    if condition.date is None:
        issues.append(
            _error("condition.date", "Condition date is mandatory for a condition")
        )
    elif condition.date.is_bad:
        issues.append(_error("condition.date", "Invalid condition vague date"))
    return issues


# Sources


def duplicate_slots(values: Sequence[str | None], skip: str | None) -> set[int]:
    """Return the slots whose value also appears in another slot.

    Empty values and the skip token never count as duplicates.
    """
    flagged: set[int] = set()
    for n, value in enumerate(values):
        if not value or value == skip:
            continue
        for m, other in enumerate(values):
            if m != n and other == value:
                flagged.update((n, m))
    return flagged


def out_of_order_slots(values: Sequence[str | None], rules: ImportanceRules) -> set[int]:
    """Return the slots whose token is applied before the token it needs.

    The skip token is never checked and never satisfies a precedence.
    """
    present = {v for v in values if v and v != rules.skip}
    flagged: set[int] = set()
    for n, value in enumerate(values):
        if not value or value == rules.skip:
            continue
        if value == rules.second and rules.first not in present:
            flagged.add(n)
        elif value == rules.third and rules.second not in present:
            flagged.add(n)
    return flagged


def validate_importance(
    values: Sequence[str | None],
    rules: ImportanceRules,
    field_name: str,
    label: str,
) -> list[FieldIssue]:
    """Run the duplicate and ordered-application checks for one field."""
    issues: list[FieldIssue] = []
    for slot in sorted(duplicate_slots(values, rules.skip)):
        issues.append(
            _error(
                source_field_id(slot, field_name),
                f"{label} of two sources cannot be equal for the same INCID",
            )
        )
    for slot in sorted(out_of_order_slots(values, rules)):
        issues.append(
            _error(
                source_field_id(slot, field_name),
                f"{label} must be applied in the order "
                f"{rules.first}, {rules.second} then {rules.third}",
            )
        )
    return issues


def _validate_set_slot(
    slot: int, source: SourceSlot, lookup: ClassificationLookup
) -> list[FieldIssue]:
    issues: list[FieldIssue] = []
    if source.source_id is not None and not lookup.source_exists(source.source_id):
        issues.append(
            _error(source_field_id(slot, "source_id"), "Source name is not a valid source")
        )

    if source.date is None:
        issues.append(
            _error(source_field_id(slot, "date"), "Date is mandatory for each source")
        )
    elif source.date.is_bad:
        issues.append(_error(source_field_id(slot, "date"), "Invalid vague date"))

    if not source.habitat_class:
        issues.append(
            _error(
                source_field_id(slot, "habitat_class"),
                "Habitat class is mandatory for each source",
            )
        )
    elif (source.habitat_class.lower() == NO_HABITAT_CLASS) != (not source.habitat_type):
        issues.append(
            _error(
                source_field_id(slot, "habitat_type"),
                "Habitat type is mandatory if habitat class is filled in",
            )
        )

    for field_name, label in _IMPORTANCE_FIELDS:
        if not getattr(source, field_name):
            issues.append(
                _error(
                    source_field_id(slot, field_name),
                    f"{label} is mandatory for each source",
                )
            )
    return issues


def _validate_unset_slot(slot: int, source: SourceSlot | None) -> list[FieldIssue]:
    if source is None:
        return []
    issues: list[FieldIssue] = []
    for field_name, label in _SOURCE_FIELDS:
        if _filled(getattr(source, field_name)):
            issues.append(
                _error(
                    source_field_id(slot, field_name),
                    f"{label} cannot be filled in if no source has been specified",
                )
            )
    if issues:
        issues.insert(
            0,
            _error(
                source_field_id(slot, "source_id"),
                "Source name is mandatory for each source",
            ),
        )
    return issues


def validate_sources(
    sources: Sequence[SourceSlot | None],
    lookup: ClassificationLookup,
    rules: ImportanceRules,
    *,
    require_any_source: bool = False,
) -> list[FieldIssue]:
    """Validate the three source slots of an incid.

    Args:
        sources: The source slots, index 0..2, each possibly None.
        lookup: Used to check source ids exist.
        rules: Skip and precedence tokens of the importance checks.
        require_any_source: OSMM bulk update mode; at least one slot must
            name a source.

    Returns:
        Issues in slot order, importance cross-slot issues last.
    """
    issues: list[FieldIssue] = []
    for slot, source in enumerate(sources):
        if slot_has_source(source):
            issues.extend(_validate_set_slot(slot, source, lookup))  # type: ignore[arg-type]
        else:
            issues.extend(_validate_unset_slot(slot, source))

    if require_any_source and not any(slot_has_source(s) for s in sources):
        issues.insert(
            0,
            _error(source_field_id(0, "source_id"), "At least one source must be specified"),
        )

    for field_name, label in _IMPORTANCE_FIELDS:
        values = [
            getattr(s, field_name) if slot_has_source(s) else None for s in sources
        ]
        issues.extend(validate_importance(values, rules, field_name, label))
    return unique_issues(issues)


# Habitat and quality


def validate_habitat(
    incid: Incid,
    lookup: ClassificationLookup,
    mode: HabitatSecondaryCodeValidation,
    *,
    bulk_mode: bool = False,
) -> list[FieldIssue]:
    """Check the primary code is set and the habitat type's secondaries exist."""
    issues: list[FieldIssue] = []
    if not incid.primary_code and not bulk_mode:
        issues.append(_error("primary", "Primary Habitat is mandatory for every INCID"))

    if any(not sh.is_valid for sh in incid.secondary_habitats):
        issues.append(
            _error(
                "secondary_habitats",
                "One or more secondary habitats are not valid for the primary habitat",
            )
        )

    if mode == HabitatSecondaryCodeValidation.IGNORE:
        return issues
    required = lookup.mandatory_secondaries_for_habitat_type(incid.habitat_type)
    present = set(incid.secondary_codes())
    if any(code not in present for code in required):
        message = "One or more mandatory secondary habitats for habitat type not found"
        if mode == HabitatSecondaryCodeValidation.ERROR:
            issues.append(_error("secondary_habitats", message))
        else:
            issues.append(
                FieldIssue(
                    "secondary_habitats", f"Warning: {message}", IssueSeverity.WARNING
                )
            )
    return issues


def validate_incid_quality(
    incid: Incid, mode: QualityValidation, *, bulk_mode: bool = False
) -> list[FieldIssue]:
    if mode != QualityValidation.MANDATORY or bulk_mode:
        return []
    issues: list[FieldIssue] = []
    if not incid.quality_determination:
        issues.append(
            _error(
                "quality_determination",
                "Determination quality is mandatory for every INCID",
            )
        )
    if not incid.quality_interpretation:
        issues.append(
            _error(
                "quality_interpretation",
                "Interpretation quality is mandatory for every INCID",
            )
        )
        if incid.quality_comments:
            issues.append(
                _error(
                    "quality_comments",
                    "Interpretation comments cannot be filled in "
                    "if no interpretation quality",
                )
            )
    return issues


def validate_priority_habitats(
    records: Sequence[PriorityHabitat], rules: BapQualityRules
) -> list[FieldIssue]:
    """Report record validation errors of every priority habitat."""
    issues: list[FieldIssue] = []
    for index, record in enumerate(records):
        for message in record.validation_errors(rules, records):
            issues.append(
                FieldIssue(f"priority_habitats[{index}]", message, IssueSeverity.ERROR)
            )
    return issues
