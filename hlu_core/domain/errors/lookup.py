"""Reference data integrity errors.

A referenced code that is missing from the classification lookup is a
data-integrity fault. The strict lookup accessors raise these errors;
domain services catch them, log them and carry on with empty defaults,
so they never escape the core during normal editing.
"""

from hlu_core.domain.exceptions import HluCoreError


class DataIntegrityError(HluCoreError):
    """Base class for reference data integrity faults."""

    pass


class PrimaryCodeNotFoundError(DataIntegrityError):
    """Raised when a primary habitat code has no category in the lookup.

    Attributes:
        code: The primary habitat code that could not be resolved.
    """

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Primary habitat code {code!r} not found in lookup")


class ReferenceDataError(DataIntegrityError):
    """Raised when reference tables cannot be turned into a lookup.

    Attributes:
        table: Name of the offending reference table.
        reason: What is wrong with it.
    """

    def __init__(self, table: str, reason: str) -> None:
        self.table = table
        self.reason = reason
        super().__init__(f"Reference table {table!r} is invalid: {reason}")
