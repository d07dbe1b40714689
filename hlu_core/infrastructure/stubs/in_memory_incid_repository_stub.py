"""In-memory incid repository stub.

Implements IncidRepositoryProtocol over a dict. Incids are deep copied on
the way in and out, so edits never reach the store before save.
"""

from __future__ import annotations

from itertools import count

from hlu_core.application.ports.incid_repository import IncidRepositoryProtocol
from hlu_core.domain.models.incid import Incid
from hlu_core.domain.models.records import TRANSIENT_ID


class InMemoryIncidRepository(IncidRepositoryProtocol):
    """Stub implementation of IncidRepositoryProtocol for testing.

    Usage:
        repository = InMemoryIncidRepository([Incid(key="HLU/0001")])
        incid = repository.get_incid("HLU/0001")
        repository.save_incid(incid)
        assert repository.save_count == 1
    """

    def __init__(self, incids: list[Incid] | None = None, first_id: int = 1000) -> None:
        self._incids: dict[str, Incid] = {}
        self._ids = count(first_id)
        self.save_count = 0
        for incid in incids or []:
            self.add(incid)

    def add(self, incid: Incid) -> None:
        """Store an incid as is, without assigning ids."""
        self._incids[incid.key] = incid.deep_copy()

    def stored(self, key: str) -> Incid | None:
        """Return the stored aggregate itself (not a copy)."""
        return self._incids.get(key)

    def get_incid(self, key: str) -> Incid | None:
        incid = self._incids.get(key)
        return incid.deep_copy() if incid is not None else None

    def save_incid(self, incid: Incid) -> Incid:
        stored = incid.deep_copy()
        children = [
            *stored.secondary_habitats,
            *stored.priority_habitats,
            *(s for s in stored.sources if s is not None),
            *(code for codes in stored.multiplex.values() for code in codes),
        ]
        if stored.condition is not None:
            children.append(stored.condition)
        for record in children:
            if record.persisted_id == TRANSIENT_ID:
                record.persisted_id = next(self._ids)

        self._incids[stored.key] = stored
        self.save_count += 1
        return stored.deep_copy()

    def clear(self) -> None:
        self._incids.clear()
        self.save_count = 0
