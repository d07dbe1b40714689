"""Change notifier port.

The host binds UI controls to the incid aggregates. After every edit
cycle the editor tells it which aggregates changed so it can refresh
them; the core never touches the UI itself.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ChangeNotifierProtocol(Protocol):
    """Protocol for change notifications to the host."""

    def notify_changed(self, name: str) -> None:
        """Signal that an aggregate changed.

        Args:
            name: "incid" for the incid's own fields, otherwise the
                aggregate name, e.g. "secondary_habitats".
        """
        ...
