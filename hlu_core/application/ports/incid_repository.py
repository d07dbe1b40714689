"""Incid repository port.

Persistence and its transaction layer live outside the core. The
repository hands over whole incid aggregates and takes them back on save.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hlu_core.domain.models.incid import Incid


@runtime_checkable
class IncidRepositoryProtocol(Protocol):
    """Protocol for loading and saving incid aggregates."""

    def get_incid(self, key: str) -> Incid | None:
        """Return the incid with this key, or None if there is none.

        The returned aggregate must be private to the caller; edits to it
        must not reach the store until save_incid is called.
        """
        ...

    def save_incid(self, incid: Incid) -> Incid:
        """Store the incid and its child records.

        Transient child records (persisted_id -1) are given durable ids.
        Priority habitats are stored together; the Auto/User split is
        not persisted.

        Returns:
            The aggregate as stored, with durable ids.
        """
        ...
