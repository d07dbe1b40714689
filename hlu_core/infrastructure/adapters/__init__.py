"""Infrastructure adapters implementing the application ports."""

from hlu_core.infrastructure.adapters.yaml_classification_source import (
    YamlClassificationSource,
)

__all__: list[str] = ["YamlClassificationSource"]
