"""IHS multiplex code records (matrix, formation and management codes)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from hlu_core.domain.models.records import TRANSIENT_ID


class MultiplexGroup(str, Enum):
    """The IHS multiplex code groups carried on an incid."""

    MATRIX = "ihs_matrix"
    FORMATION = "ihs_formation"
    MANAGEMENT = "ihs_management"


@dataclass(eq=True)
class MultiplexCode:
    """One code of an IHS multiplex group."""

    persisted_id: int = TRANSIENT_ID
    incid: str | None = None
    code: str | None = None

    @property
    def is_added(self) -> bool:
        return self.persisted_id == TRANSIENT_ID

    def to_item_tuple(self) -> tuple[Any, ...]:
        return (self.persisted_id, self.incid, self.code)
