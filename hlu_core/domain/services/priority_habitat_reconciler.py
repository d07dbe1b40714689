"""Priority habitat reconciliation domain service.

Works out which priority habitats an incid must carry and reconciles
that mandatory set against the priority habitat rows it already has.

Algorithm:
    1. The mandatory set M is the priority habitats of the primary code
       (exact match) followed by those of each secondary code in
       collection order, distinct, first seen wins.
    2. Auto holds one record per code in M, in M order: the first
       persisted row with that code when there is one (keeping its id and
       quality detail), otherwise a transient placeholder.
    3. User holds the previous User entries that were not taken for Auto,
       kept as the same objects in their previous order, then every
       persisted row not used for Auto and not already represented by one
       of those entries.

Nothing is ever dropped: rows leaving M are demoted to User, and surplus
rows sharing a mandatory code stay in User, where the duplicate flags
report them.

Reconciliation is idempotent: feeding Auto ++ User back in as the
persisted rows, with User as the previous User, yields equal partitions.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import structlog

from hlu_core.domain.errors import ReconciliationInvariantError
from hlu_core.domain.models.priority_habitat import PriorityHabitat
from hlu_core.domain.models.records import TRANSIENT_ID
from hlu_core.domain.models.validation_options import BapQualityRules
from hlu_core.domain.services.classification_lookup import ClassificationLookup

logger = structlog.get_logger()

DEFAULT_DUPLICATE_THRESHOLD: int = 2


@dataclass(frozen=True)
class ReconciliationResult:
    """Outcome of one reconciliation run.

    Attributes:
        mandatory_codes: The mandatory set M, in derivation order.
        auto: Mandatory priority habitats, one per code in M.
        user: User-added priority habitats.
        auto_has_invalid: Some Auto record fails record validation.
        user_has_invalid: Some User record fails record validation.
        duplicate_codes: Codes occurring more than once across both
            partitions, first seen order.
        has_duplicates: Whether the duplicate count exceeds the threshold.
    """

    mandatory_codes: tuple[str, ...]
    auto: tuple[PriorityHabitat, ...]
    user: tuple[PriorityHabitat, ...]
    auto_has_invalid: bool = False
    user_has_invalid: bool = False
    duplicate_codes: tuple[str, ...] = ()
    has_duplicates: bool = False

    @property
    def combined(self) -> list[PriorityHabitat]:
        """Auto followed by User."""
        return list(self.auto) + list(self.user)

    @property
    def auto_codes(self) -> list[str]:
        return [a.code for a in self.auto if a.code]


def _same_record(a: PriorityHabitat, b: PriorityHabitat) -> bool:
    """Same object, or the same durable row."""
    return a is b or (a.persisted_id != TRANSIENT_ID and a.persisted_id == b.persisted_id)


def _represented_by(row: PriorityHabitat, carried: Sequence[PriorityHabitat]) -> bool:
    """Check whether a persisted row is already covered by a carried entry.

    Persisted rows match on their durable id; transient rows have none, so
    they match on code.
    """
    for entry in carried:
        if _same_record(entry, row):
            return True
        if row.persisted_id == TRANSIENT_ID == entry.persisted_id and entry.code == row.code:
            return True
    return False


class PriorityHabitatReconciler:
    """Derives and reconciles the Auto/User priority habitat partitions."""

    def __init__(
        self,
        lookup: ClassificationLookup,
        quality_rules: BapQualityRules,
        *,
        duplicate_threshold: int = DEFAULT_DUPLICATE_THRESHOLD,
    ) -> None:
        self._lookup = lookup
        self._quality_rules = quality_rules
        self._duplicate_threshold = duplicate_threshold

    def mandatory_set(
        self, primary: str | None, secondaries: Iterable[str | None]
    ) -> list[str]:
        """Return the mandatory priority habitat codes.

        Depends only on the codes and the lookup.
        """
        codes: list[str] = []
        if primary:
            codes.extend(self._lookup.priority_habitats_for_primary(primary))
        for secondary in secondaries:
            if secondary:
                codes.extend(self._lookup.priority_habitats_for_secondary(secondary))

        seen: set[str] = set()
        mandatory: list[str] = []
        for code in codes:
            if code not in seen:
                seen.add(code)
                mandatory.append(code)
        return mandatory

    def reconcile(
        self,
        *,
        primary: str | None,
        secondaries: Iterable[str | None],
        persisted_rows: Sequence[PriorityHabitat],
        previous_user: Sequence[PriorityHabitat] = (),
        bulk_mode: bool = False,
        incid: str | None = None,
    ) -> ReconciliationResult:
        """Reconcile the mandatory set against the incid's priority habitats.

        Args:
            primary: Current primary code.
            secondaries: Current secondary codes in collection order.
            persisted_rows: Every priority habitat currently attached to the
                incid, classification unknown.
            previous_user: The User partition of the previous run.
            bulk_mode: Whether the incid is edited in bulk update mode.
            incid: Key of the incid, used for new placeholders and logs.

        Returns:
            The new partitions and their flags.
        """
        mandatory = self.mandatory_set(primary, secondaries)
        auto, used = self._build_auto(mandatory, persisted_rows, incid)
        user = self._build_user(persisted_rows, previous_user, used, bulk_mode)

        combined = auto + user
        code_counts = Counter(p.code for p in combined if p.code)
        duplicate_codes = tuple(c for c, n in code_counts.items() if n > 1)

        result = ReconciliationResult(
            mandatory_codes=tuple(mandatory),
            auto=tuple(auto),
            user=tuple(user),
            auto_has_invalid=any(
                not a.is_valid(self._quality_rules, combined) for a in auto
            ),
            user_has_invalid=any(
                not u.is_valid(self._quality_rules, combined) for u in user
            ),
            duplicate_codes=duplicate_codes,
            has_duplicates=len(duplicate_codes) > self._duplicate_threshold,
        )

        logger.debug(
            "priority_habitats_reconciled",
            incid=incid,
            mandatory=mandatory,
            auto=len(auto),
            user=len(user),
            placeholders=sum(1 for a in auto if a.is_added),
            duplicates=list(duplicate_codes),
        )
        return result

    def _build_auto(
        self,
        mandatory: list[str],
        persisted_rows: Sequence[PriorityHabitat],
        incid: str | None,
    ) -> tuple[list[PriorityHabitat], set[int]]:
        if not mandatory:
            return [], set()

        position = {code: index for index, code in enumerate(mandatory)}
        prev_auto = [r for r in persisted_rows if r.code in position]
        new_auto = [
            r
            for r in persisted_rows
            if r.code in position and not any(r is p for p in prev_auto)
        ]

        chosen: dict[str, PriorityHabitat] = {}
        used: set[int] = set()
        for row in sorted(prev_auto + new_auto, key=lambda r: position[r.code]):
            if row.code not in chosen:
                chosen[row.code] = row.reclassified(is_auto=True, bulk_mode=False)
                used.add(id(row))

        auto: list[PriorityHabitat] = []
        for code in mandatory:
            if code in chosen:
                auto.append(chosen[code])
            else:
                auto.append(PriorityHabitat.placeholder(incid, code))
        return auto, used

    def _build_user(
        self,
        persisted_rows: Sequence[PriorityHabitat],
        previous_user: Sequence[PriorityHabitat],
        used: set[int],
        bulk_mode: bool,
    ) -> list[PriorityHabitat]:
        used_rows = [r for r in persisted_rows if id(r) in used]

        carried: list[PriorityHabitat] = []
        for entry in previous_user:
            if any(_same_record(entry, r) for r in used_rows):
                continue
            entry.is_auto = False
            entry.bulk_mode = bulk_mode
            carried.append(entry)

        discovered = [
            row.reclassified(is_auto=False, bulk_mode=bulk_mode)
            for row in persisted_rows
            if id(row) not in used and not _represented_by(row, carried)
        ]
        return carried + discovered


def assert_reconciliation_invariants(
    result: ReconciliationResult, incid: str | None = None
) -> None:
    """Check the structural invariants of a reconciliation result.

    Raises:
        ReconciliationInvariantError: If a mandatory code is missing from
            Auto, Auto holds a code twice, or a record sits in the wrong
            partition.
    """
    auto_codes = [a.code for a in result.auto]
    missing = [c for c in result.mandatory_codes if c not in auto_codes]
    if missing:
        raise ReconciliationInvariantError(
            incid, f"mandatory codes missing from Auto: {missing}"
        )
    if len(set(auto_codes)) != len(auto_codes):
        raise ReconciliationInvariantError(incid, "Auto contains a code twice")
    if any(not a.is_auto for a in result.auto):
        raise ReconciliationInvariantError(incid, "Auto record not marked auto")
    if any(u.is_auto for u in result.user):
        raise ReconciliationInvariantError(incid, "User record marked auto")
