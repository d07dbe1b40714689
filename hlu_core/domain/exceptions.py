"""Base exception classes for the HLU incid domain layer."""


class HluCoreError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class so hosts
    can catch everything raised by the core with a single handler.

    Business conditions (invalid field values, missing mandatory data)
    are never raised; they are returned as FieldIssue values.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
