"""Infrastructure stubs for development and testing.

Available stubs:
- InMemoryIncidRepository: dict-backed incid store that assigns ids on save
- RecordingChangeNotifier: records change notifications in order

WARNING: These stubs are NOT for production use.
"""

from hlu_core.infrastructure.stubs.in_memory_incid_repository_stub import (
    InMemoryIncidRepository,
)
from hlu_core.infrastructure.stubs.recording_change_notifier_stub import (
    RecordingChangeNotifier,
)

__all__: list[str] = ["InMemoryIncidRepository", "RecordingChangeNotifier"]
