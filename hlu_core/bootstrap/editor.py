"""Bootstrap wiring for the incid editor service."""

from __future__ import annotations

from pathlib import Path

from hlu_core.application.ports.change_notifier import ChangeNotifierProtocol
from hlu_core.application.ports.classification_source import (
    ClassificationSourceProtocol,
)
from hlu_core.application.ports.incid_repository import IncidRepositoryProtocol
from hlu_core.application.services.incid_editor_service import IncidEditorService
from hlu_core.config.editor_config import EditorConfig
from hlu_core.infrastructure.adapters.yaml_classification_source import (
    YamlClassificationSource,
)


def create_editor(
    repository: IncidRepositoryProtocol,
    source: ClassificationSourceProtocol,
    *,
    config: EditorConfig | None = None,
    notifier: ChangeNotifierProtocol | None = None,
) -> IncidEditorService:
    """Build an editor service.

    The lookup is loaded once from the source and shared by every domain
    service of the editor. Config defaults to the HLU_* environment.
    """
    config = config or EditorConfig.from_environment()
    return IncidEditorService(
        repository,
        source.load(),
        config.to_settings(),
        notifier,
    )


def create_yaml_editor(
    repository: IncidRepositoryProtocol,
    classification_path: Path | str,
    *,
    config: EditorConfig | None = None,
    notifier: ChangeNotifierProtocol | None = None,
) -> IncidEditorService:
    """Build an editor whose reference tables come from a YAML file."""
    return create_editor(
        repository,
        YamlClassificationSource(classification_path),
        config=config,
        notifier=notifier,
    )


__all__ = ["create_editor", "create_yaml_editor"]
