"""Application error types.

Business-rule failures (closed vote, already voted) are plain ``ValueError``s
raised by the service layer. Everything that goes wrong inside the database or
the AI provider is reported as one of the failure classes below.
"""


class NotFoundError(ValueError):
    """The referenced vote or reset request does not exist."""


class FieldValidationError(ValueError):
    """Input that failed a vote-dependent rule, tied to one request field."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class OperationFailedError(Exception):
    """A storage operation failed. The original error is chained as ``__cause__``."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Operation failed: {operation}")


class SummarizationError(Exception):
    """The generative model call failed or returned unusable output."""
