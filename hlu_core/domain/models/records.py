"""Shared helpers for incid child records."""

from __future__ import annotations

from typing import Any, Protocol

TRANSIENT_ID: int = -1
"""persisted_id of a record that has not been given a durable id yet."""


class ChildRecord(Protocol):
    """Structural type shared by every tracked incid child record."""

    persisted_id: int

    @property
    def is_added(self) -> bool: ...

    def to_item_tuple(self) -> tuple[Any, ...]: ...
