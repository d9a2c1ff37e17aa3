"""
Error types for ticket processing.

Batch-level errors carry a ``kind`` that the Lambda entry point reports back
to the caller ("invalid-argument" or "internal"). Recipient-level validation
errors are never reported to the caller; the processor logs and skips them.
"""


class TicketError(Exception):
    """Base class for errors that abort a whole ticket batch."""

    kind = "internal"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(TicketError):
    """Raised when the request payload is missing or malformed."""

    kind = "invalid-argument"


class InternalError(TicketError):
    """Raised when processing fails after the request was accepted."""

    kind = "internal"


class TemplateNotFoundError(InternalError):
    """Raised when a category template is absent from the template store."""
    pass


class CorruptTemplateError(InternalError):
    """Raised when a template does not parse as a PDF document."""
    pass


class EnqueueError(InternalError):
    """Raised when an outbound message cannot be written to the mail queue."""
    pass


class InvalidRecipientError(ValueError):
    """Raised when a single recipient record fails validation."""
    pass


class UnknownCategoryError(InvalidRecipientError):
    """Raised when a recipient's ticket type is not a known category."""
    pass
