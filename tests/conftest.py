"""
Pytest configuration and shared fixtures for the incid editing core tests.

Testing Standards:
- Unit tests go in tests/unit/<layer>/
- Integration tests go in tests/integration/
- Shared builders live in tests/helpers/
"""

from __future__ import annotations

import pytest

from hlu_core.application.services.editor_settings import EditorSettings
from hlu_core.application.services.incid_editor_service import IncidEditorService
from hlu_core.domain.services.classification_lookup import ClassificationLookup
from hlu_core.infrastructure.stubs import (
    InMemoryIncidRepository,
    RecordingChangeNotifier,
)
from tests.helpers import scenario_lookup


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from hlu_core import __version__

    return __version__


@pytest.fixture
def lookup() -> ClassificationLookup:
    """The scenario lookup described in tests/helpers/lookup_builder.py."""
    return scenario_lookup()


@pytest.fixture
def repository() -> InMemoryIncidRepository:
    return InMemoryIncidRepository()


@pytest.fixture
def notifier() -> RecordingChangeNotifier:
    return RecordingChangeNotifier()


@pytest.fixture
def editor(
    repository: InMemoryIncidRepository,
    lookup: ClassificationLookup,
    notifier: RecordingChangeNotifier,
) -> IncidEditorService:
    """Editor with default settings over an empty in-memory repository."""
    return IncidEditorService(repository, lookup, EditorSettings(), notifier)
