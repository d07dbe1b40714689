"""Incid editing session errors.

Raised by the application service when the host asks for something that
cannot be done in the current session state.
"""

from hlu_core.domain.exceptions import HluCoreError


class IncidNotFoundError(HluCoreError):
    """Raised when the repository has no incid with the requested key."""

    def __init__(self, incid: str) -> None:
        self.incid = incid
        super().__init__(f"Incid {incid!r} not found")


class NoIncidLoadedError(HluCoreError):
    """Raised when an edit is attempted before any incid is loaded."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot {operation}: no incid is loaded")


class IncidNotSaveableError(HluCoreError):
    """Raised when save is requested while validation errors remain.

    Attributes:
        incid: Key of the incid.
        messages: The blocking error messages.
    """

    def __init__(self, incid: str, messages: list[str]) -> None:
        self.incid = incid
        self.messages = messages
        summary = "; ".join(messages[:3])
        if len(messages) > 3:
            summary += f" (+{len(messages) - 3} more)"
        super().__init__(f"Incid {incid!r} cannot be saved: {summary}")


class InvalidSourceSlotError(HluCoreError):
    """Raised when a source slot index is outside 0..2."""

    def __init__(self, slot: int) -> None:
        self.slot = slot
        super().__init__(f"Source slot must be 0, 1 or 2, got {slot}")
