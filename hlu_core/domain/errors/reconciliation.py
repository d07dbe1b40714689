"""Priority habitat reconciliation invariant errors.

These are programming errors: a reconciliation result that breaks one of
its invariants. They are expected to fail tests loudly and never to occur
at runtime.
"""

from hlu_core.domain.exceptions import HluCoreError


class ReconciliationInvariantError(HluCoreError):
    """Raised when a reconciliation result violates an invariant.

    Attributes:
        incid: Key of the incid being reconciled (may be None).
        violation: Short description of the broken invariant.
    """

    def __init__(self, incid: str | None, violation: str) -> None:
        self.incid = incid
        self.violation = violation
        super().__init__(
            f"Priority habitat reconciliation for incid {incid!r} is invalid: "
            f"{violation}"
        )
