"""YAML classification source adapter.

Loads the classification reference tables from a YAML document, one
top-level key per table. Each entry uses the field names of the matching
reference row, for example:

    primary_codes:
      - {code: w1f7, description: Lowland mixed deciduous woodland,
         category: W, nvc_codes: W8, sort_order: 10}
    primary_secondaries:
      - {code_primary: "w1*", code_secondary: "161"}
    primary_baps:
      - {code_primary: w1f7, bap_habitat: "bap-wood"}
    source_names:
      - {source_id: 1, source_name: OS MasterMap}

Missing tables are empty. Unknown keys inside an entry are ignored.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Any

import structlog
import yaml

from hlu_core.domain.errors import ReferenceDataError
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
from hlu_core.domain.services.classification_lookup import ClassificationLookup

logger = structlog.get_logger()

# Table key -> reference row type
TABLES: dict[str, type] = {
    "primary_codes": PrimaryHabitatCode,
    "secondary_codes": SecondaryHabitatCode,
    "secondary_groups": SecondaryGroup,
    "primary_secondaries": PrimarySecondaryXref,
    "primary_baps": PrimaryBapXref,
    "secondary_baps": SecondaryBapXref,
    "habitat_types": HabitatType,
    "habitat_type_primaries": HabitatTypePrimary,
    "habitat_type_secondaries": HabitatTypeSecondary,
    "source_names": SourceName,
}


def _build_rows(table: str, row_type: type, entries: Any) -> list[Any]:
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ReferenceDataError(table, "expected a list of entries")

    names = {f.name for f in dataclasses.fields(row_type)}
    rows = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ReferenceDataError(table, f"entry {index} is not a mapping")
        try:
            rows.append(row_type(**{k: v for k, v in entry.items() if k in names}))
        except TypeError as exc:
            raise ReferenceDataError(table, f"entry {index}: {exc}") from exc
    return rows


def lookup_from_mapping(data: dict[str, Any] | None) -> ClassificationLookup:
    """Build a lookup from an already parsed document.

    Raises:
        ReferenceDataError: If a table or entry has the wrong shape.
    """
    data = data or {}
    if not isinstance(data, dict):
        raise ReferenceDataError("<document>", "expected a mapping of tables")
    tables = {
        name: _build_rows(name, row_type, data.get(name))
        for name, row_type in TABLES.items()
    }
    return ClassificationLookup(**tables)


class YamlClassificationSource:
    """Implements ClassificationSourceProtocol over a YAML file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> ClassificationLookup:
        """Read the YAML file and build the lookup.

        Raises:
            OSError: If the file cannot be read.
            ReferenceDataError: If the document has the wrong shape.
        """
        with open(self._path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        lookup = lookup_from_mapping(data)
        logger.info(
            "classification_loaded",
            path=str(self._path),
            tables=sorted(k for k in (data or {}) if k in TABLES),
        )
        return lookup
