"""Application services for the incid editing core."""

from hlu_core.application.services.editor_settings import EditorSettings
from hlu_core.application.services.incid_editor_service import (
    IncidEditorService,
    ValidationReport,
)

__all__: list[str] = ["EditorSettings", "IncidEditorService", "ValidationReport"]
