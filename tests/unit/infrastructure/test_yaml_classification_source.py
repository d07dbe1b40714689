"""Unit tests for the YAML classification source adapter."""

from __future__ import annotations

from pathlib import Path

import pytest

from hlu_core.application.ports.classification_source import (
    ClassificationSourceProtocol,
)
from hlu_core.domain.errors import DataIntegrityError, ReferenceDataError
from hlu_core.infrastructure.adapters.yaml_classification_source import (
    YamlClassificationSource,
    lookup_from_mapping,
)

CLASSIFICATION_YAML = """\
primary_codes:
  - {code: w1f7, description: Lowland mixed deciduous woodland,
     category: W, nvc_codes: W8, sort_order: 10}
  - {code: g1a, description: Lowland dry acid grassland, category: G, sort_order: 20}
secondary_codes:
  - {code: "161", description: Ancient woodland, group: WDL, sort_order: 161}
  - {code: "910", description: Bracken, group: STR, sort_order: 910}
secondary_groups:
  - {code: WDL, description: Woodland, sort_order: 1}
primary_secondaries:
  - {code_primary: "w1*", code_secondary: "161"}
primary_baps:
  - {code_primary: w1f7, bap_habitat: bap-wood}
secondary_baps:
  - {code_secondary: "161", bap_habitat: bap-ancient}
source_names:
  - {source_id: 1, source_name: OS MasterMap, legacy_column: ignored}
"""


@pytest.fixture
def classification_file(tmp_path: Path) -> Path:
    path = tmp_path / "classification.yaml"
    path.write_text(CLASSIFICATION_YAML, encoding="utf-8")
    return path


class TestYamlClassificationSource:
    """Tests for loading a lookup from a YAML file."""

    def test_is_a_classification_source(self, classification_file: Path) -> None:
        source = YamlClassificationSource(classification_file)
        assert isinstance(source, ClassificationSourceProtocol)
        assert source.path == classification_file

    def test_loads_tables(self, classification_file: Path) -> None:
        lookup = YamlClassificationSource(str(classification_file)).load()

        assert lookup.primary_category_of("w1f7") == "W"
        assert lookup.secondaries_for("w1f7")[0].code == "161"
        assert lookup.priority_habitats_for_primary("w1f7") == ["bap-wood"]
        assert lookup.priority_habitats_for_secondary("161") == ["bap-ancient"]
        assert lookup.source_name(1) == "OS MasterMap"

    def test_missing_tables_are_empty(self, classification_file: Path) -> None:
        lookup = YamlClassificationSource(classification_file).load()
        assert lookup.mandatory_secondaries_for_habitat_type("HT1") == []

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            YamlClassificationSource(tmp_path / "absent.yaml").load()

    def test_empty_document(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        lookup = YamlClassificationSource(path).load()
        assert lookup.all_secondary_codes == frozenset()


class TestLookupFromMapping:
    """Tests for malformed reference data."""

    def test_table_not_a_list(self) -> None:
        with pytest.raises(ReferenceDataError) as exc_info:
            lookup_from_mapping({"primary_codes": {"code": "w1f7"}})
        assert exc_info.value.table == "primary_codes"

    def test_entry_not_a_mapping(self) -> None:
        with pytest.raises(ReferenceDataError, match="entry 0 is not a mapping"):
            lookup_from_mapping({"secondary_codes": ["161"]})

    def test_entry_missing_required_field(self) -> None:
        with pytest.raises(ReferenceDataError, match="entry 0"):
            lookup_from_mapping({"source_names": [{"source_id": 1}]})

    def test_document_not_a_mapping(self) -> None:
        with pytest.raises(DataIntegrityError):
            lookup_from_mapping(["primary_codes"])  # type: ignore[arg-type]
