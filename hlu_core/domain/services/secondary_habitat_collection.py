"""Secondary habitat collection domain service.

Holds the ordered secondary habitats of one incid, keeps them sorted by
the configured order policy and recomputes each entry's validity. Every
change fires a single change signal; the editing service listens to it
and reruns priority habitat reconciliation.

The collection wraps the incid's own list and mutates it in place, so the
aggregate always reflects the collection.

Usage:
    collection = SecondaryHabitatCollection(
        incid.secondary_habitats,
        incid_key=incid.key,
        known_codes=lookup.all_secondary_codes,
        on_changed=editor.secondaries_changed,
    )
    collection.add("161", "SEC")
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from itertools import count

import structlog

from hlu_core.domain.models.secondary_habitat import SecondaryHabitat
from hlu_core.domain.models.validation_options import (
    PrimarySecondaryCodeValidation,
    SecondaryOrderPolicy,
)

logger = structlog.get_logger()

ChangeListener = Callable[[], None]


class SecondaryHabitatCollection:
    """Ordered, validated set of secondary habitats for one incid.

    Attributes:
        order_policy: How entries are sorted after every change.
        validation: Whether validity is checked against the codes valid for
            the primary code (ERROR) or against every known code (IGNORE).
    """

    def __init__(
        self,
        entries: list[SecondaryHabitat],
        *,
        incid_key: str | None = None,
        known_codes: frozenset[str] = frozenset(),
        order_policy: SecondaryOrderPolicy = SecondaryOrderPolicy.AS_ENTERED,
        validation: PrimarySecondaryCodeValidation = (
            PrimarySecondaryCodeValidation.ERROR
        ),
        on_changed: ChangeListener | None = None,
    ) -> None:
        self._entries = entries
        self._incid_key = incid_key
        self._known_codes = known_codes
        self._valid_codes: frozenset[str] = frozenset()
        self.order_policy = order_policy
        self.validation = validation
        self._on_changed = on_changed
        self._sequence = count()
        self._entered: dict[int, int] = {}
        self._changed = False
        for entry in entries:
            self._entered[id(entry)] = next(self._sequence)
        self._sort()

    def __iter__(self) -> Iterator[SecondaryHabitat]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, code: object) -> bool:
        return any(e.code == code for e in self._entries)

    @property
    def entries(self) -> list[SecondaryHabitat]:
        return self._entries

    @property
    def is_changed(self) -> bool:
        """True once any add, remove or replace has altered the collection."""
        return self._changed

    @property
    def has_invalid(self) -> bool:
        """True when any entry failed the last revalidation."""
        return any(not e.is_valid for e in self._entries)

    def codes(self) -> list[str]:
        return [e.code for e in self._entries if e.code]

    def summary(self, delimiter: str = ".") -> str:
        """Join the codes in display order with the given delimiter."""
        return delimiter.join(self.codes())

    def set_order_policy(self, policy: SecondaryOrderPolicy) -> None:
        self.order_policy = policy
        self._sort()

    # Mutation

    def add(self, code: str | None, group: str | None) -> bool:
        """Append a new secondary habitat.

        Returns:
            False, leaving the collection untouched, when code is empty or
            already present; True otherwise.
        """
        if not code or code in self:
            logger.debug("secondary_add_ignored", code=code)
            return False

        entry = SecondaryHabitat(incid=self._incid_key, code=code, group=group)
        self._track(entry)
        self._entries.append(entry)
        self._after_change()
        return True

    def remove(self, entry: SecondaryHabitat) -> bool:
        """Remove an entry (matched by identity, then by equality)."""
        for index, current in enumerate(self._entries):
            if current is entry:
                break
        else:
            if entry not in self._entries:
                return False
            index = self._entries.index(entry)

        removed = self._entries.pop(index)
        self._entered.pop(id(removed), None)
        self._after_change()
        return True

    def remove_code(self, code: str) -> bool:
        for entry in self._entries:
            if entry.code == code:
                return self.remove(entry)
        return False

    def replace(self, entries: Iterable[SecondaryHabitat]) -> None:
        """Replace the whole collection (bulk paste).

        The listener is detached while the list is rebuilt, so downstream
        recomputation runs once.
        """
        new_entries = list(entries)
        with self.suspended():
            self._entries[:] = []
            self._entered.clear()
            for entry in new_entries:
                if entry.incid is None:
                    entry.incid = self._incid_key
                self._track(entry)
                self._entries.append(entry)
            self._after_change()
        logger.debug("secondaries_replaced", count=len(new_entries))
        self._notify()

    @contextmanager
    def suspended(self) -> Iterator[None]:
        """Detach the change listener for the duration of the block."""
        listener = self._on_changed
        self._on_changed = None
        try:
            yield
        finally:
            self._on_changed = listener

    # Validity

    def revalidate(self, valid_codes: Iterable[str] | None = None) -> bool:
        """Recompute each entry's validity.

        Args:
            valid_codes: Secondary codes valid for the current primary code.
                When omitted the set from the previous call is reused.

        Returns:
            True when every entry is valid.
        """
        if valid_codes is not None:
            self._valid_codes = frozenset(valid_codes)

        allowed = (
            self._valid_codes
            if self.validation == PrimarySecondaryCodeValidation.ERROR
            else self._known_codes
        )
        for entry in self._entries:
            entry.is_valid = entry.code in allowed
        return not self.has_invalid

    # Internals

    def _track(self, entry: SecondaryHabitat) -> None:
        self._entered[id(entry)] = next(self._sequence)

    def _after_change(self) -> None:
        self._changed = True
        self._sort()
        self.revalidate()
        self._notify()

    def _notify(self) -> None:
        if self._on_changed is not None:
            self._on_changed()

    def _sort(self) -> None:
        if self.order_policy == SecondaryOrderPolicy.BY_GROUP_THEN_CODE:
            self._entries.sort(key=lambda e: (e.group or "", e.sort_key, e.code or ""))
        elif self.order_policy == SecondaryOrderPolicy.BY_CODE:
            self._entries.sort(key=lambda e: (e.sort_key, e.code or ""))
        else:
            self._entries.sort(key=self._entered_key)

    def _entered_key(self, entry: SecondaryHabitat) -> tuple[int, int]:
        if entry.is_added:
            return (1, self._entered.get(id(entry), 0))
        return (0, entry.persisted_id)
