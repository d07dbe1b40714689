"""Change notifier stub that records every notification."""

from __future__ import annotations

from hlu_core.application.ports.change_notifier import ChangeNotifierProtocol


class RecordingChangeNotifier(ChangeNotifierProtocol):
    """Stub implementation of ChangeNotifierProtocol for testing.

    Usage:
        notifier = RecordingChangeNotifier()
        editor = IncidEditorService(repository, lookup, notifier=notifier)
        editor.add_secondary("161")
        assert "secondary_habitats" in notifier.names
    """

    def __init__(self) -> None:
        self.names: list[str] = []

    def notify_changed(self, name: str) -> None:
        self.names.append(name)

    def count(self, name: str) -> int:
        return self.names.count(name)

    def clear(self) -> None:
        self.names.clear()
