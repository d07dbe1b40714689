"""Incid condition assessment (at most one per incid)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from hlu_core.domain.models.records import TRANSIENT_ID
from hlu_core.domain.models.vague_date import VagueDate


@dataclass(eq=True)
class Condition:
    """Condition of the habitat on an incid.

    Attributes:
        persisted_id: Durable id, or TRANSIENT_ID when new.
        incid: Key of the owning incid.
        code: Condition code; None means no condition recorded.
        qualifier: Condition qualifier code.
        date: When the condition was assessed.
    """

    persisted_id: int = TRANSIENT_ID
    incid: str | None = None
    code: str | None = None
    qualifier: str | None = None
    date: VagueDate | None = None

    @property
    def is_added(self) -> bool:
        return self.persisted_id == TRANSIENT_ID

    def to_item_tuple(self) -> tuple[Any, ...]:
        start, end, date_type = (
            self.date.to_triple() if self.date is not None else (None, None, None)
        )
        return (
            self.persisted_id,
            self.incid,
            self.code,
            self.qualifier,
            start,
            end,
            date_type,
        )
