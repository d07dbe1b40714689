"""Configuration for the incid editing core."""

from hlu_core.config.editor_config import (
    DEFAULT_EDITOR_CONFIG,
    EditorConfig,
)

__all__: list[str] = ["DEFAULT_EDITOR_CONFIG", "EditorConfig"]
