"""Validation issue value objects.

Validation never raises: every rule produces FieldIssue values that the
host attaches to the named field. Errors block saving, warnings do not.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class IssueSeverity(str, Enum):
    """Severity of a field issue."""

    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, eq=True)
class FieldIssue:
    """A validation message attached to one field.

    Attributes:
        field_id: Dotted field identifier, e.g. "condition.qualifier" or
            "source[1].boundary_importance".
        message: Human-readable message, prefixed "Error:" or "Warning:".
        severity: Whether the issue blocks saving.
    """

    field_id: str
    message: str
    severity: IssueSeverity = IssueSeverity.ERROR

    @property
    def is_error(self) -> bool:
        return self.severity == IssueSeverity.ERROR


def source_field_id(slot: int, field_name: str) -> str:
    """Build the field identifier for a field of a source slot (0-based)."""
    return f"source[{slot}].{field_name}"


def unique_issues(issues: list[FieldIssue]) -> list[FieldIssue]:
    """Drop repeated issues while keeping first-seen order."""
    seen: set[FieldIssue] = set()
    result: list[FieldIssue] = []
    for issue in issues:
        if issue not in seen:
            seen.add(issue)
            result.append(issue)
    return result
