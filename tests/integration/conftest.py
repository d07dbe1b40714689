"""
Integration test configuration.

Provides a YAML classification file shaped like the production reference
tables and an editor wired through the composition root.

Usage:
    @pytest.mark.integration
    def test_example(yaml_editor: IncidEditorService) -> None:
        yaml_editor.load("HLU/0100")
        ...
"""

from pathlib import Path

import pytest

from hlu_core.application.services import IncidEditorService
from hlu_core.bootstrap.editor import create_yaml_editor
from hlu_core.config import EditorConfig
from hlu_core.domain.models import Incid, SecondaryHabitat
from hlu_core.infrastructure.stubs import (
    InMemoryIncidRepository,
    RecordingChangeNotifier,
)

CLASSIFICATION_YAML = """\
primary_codes:
  - {code: w1f7, description: Lowland mixed deciduous woodland,
     category: W, nvc_codes: W8, sort_order: 10}
  - {code: w1g, description: Other broadleaved woodland,
     category: W, nvc_codes: W10, sort_order: 20}
  - {code: g1a, description: Lowland dry acid grassland,
     category: G, nvc_codes: U1, sort_order: 30}
secondary_groups:
  - {code: WDL, description: Woodland, sort_order: 1}
  - {code: STR, description: Structure, sort_order: 2}
secondary_codes:
  - {code: "161", description: Ancient woodland, group: WDL, sort_order: 161}
  - {code: "162", description: Ancient replanted woodland, group: WDL, sort_order: 162}
  - {code: "910", description: Bracken, group: STR, sort_order: 910}
primary_secondaries:
  - {code_primary: "w1*", code_secondary: "161"}
  - {code_primary: "w1*", code_secondary: "162"}
  - {code_primary: "g1a", code_secondary: "910"}
primary_baps:
  - {code_primary: w1f7, bap_habitat: bap-lmdw}
  - {code_primary: g1a, bap_habitat: bap-ldag}
secondary_baps:
  - {code_secondary: "161", bap_habitat: bap-ancient}
habitat_types:
  - {code: WD, description: Woodland, habitat_class: PHAP}
habitat_type_primaries:
  - {code_habitat_type: WD, code_primary: w1f7}
  - {code_habitat_type: WD, code_primary: w1g}
habitat_type_secondaries:
  - {code_habitat_type: WD, code_secondary: "161", mandatory: true}
source_names:
  - {source_id: 1, source_name: OS MasterMap}
  - {source_id: 2, source_name: Aerial photography}
"""

INCID_KEY = "HLU/0100"


@pytest.fixture
def classification_path(tmp_path: Path) -> Path:
    path = tmp_path / "classification.yaml"
    path.write_text(CLASSIFICATION_YAML, encoding="utf-8")
    return path


@pytest.fixture
def repository() -> InMemoryIncidRepository:
    """Repository holding one woodland incid with a saved secondary."""
    return InMemoryIncidRepository(
        [
            Incid(
                key=INCID_KEY,
                primary_code="w1f7",
                secondary_habitats=[
                    SecondaryHabitat(
                        persisted_id=1, incid=INCID_KEY, code="162", group="WDL"
                    )
                ],
            )
        ]
    )


@pytest.fixture
def notifier() -> RecordingChangeNotifier:
    return RecordingChangeNotifier()


@pytest.fixture
def yaml_editor(
    classification_path: Path,
    repository: InMemoryIncidRepository,
    notifier: RecordingChangeNotifier,
) -> IncidEditorService:
    return create_yaml_editor(
        repository,
        classification_path,
        config=EditorConfig(),
        notifier=notifier,
    )
