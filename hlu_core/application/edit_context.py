"""Edit context for structured logging.

Holds the key of the incid being edited in a context variable, so every
log entry written during an edit can carry it without passing it around.

Usage:
    # In the editor service
    set_current_incid(incid.key)

    # In structlog configuration
    processors = [..., incid_context_processor, ...]
"""

from contextvars import ContextVar
from typing import Any

_current_incid: ContextVar[str] = ContextVar("current_incid", default="")


def get_current_incid() -> str:
    """Get the key of the incid being edited, or "" when none is loaded."""
    return _current_incid.get()


def set_current_incid(incid: str) -> None:
    _current_incid.set(incid)


def clear_current_incid() -> None:
    _current_incid.set("")


def incid_context_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding the current incid key to every entry.

    An `incid` already present in the event is left alone.
    """
    incid = get_current_incid()
    if incid:
        event_dict.setdefault("incid", incid)
    return event_dict
