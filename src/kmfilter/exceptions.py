"""
Exception hierarchy for kmfilter.

Configuration and I/O failures are fatal for a run and are reported once by
the command line layer; malformed abundance tokens are never errors.
"""


class KmFilterException(Exception):
    """Base exception for all kmfilter errors."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize exception with message and optional details.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# Input validation exceptions
class ValidationException(KmFilterException):
    """Base exception for validation errors."""
    pass


class InvalidInputFileError(ValidationException):
    """Input matrix is missing or cannot be read."""
    pass


# Resource exceptions
class ResourceException(KmFilterException):
    """Base exception for resource-related errors."""
    pass


class OutputWriteError(ResourceException):
    """Output target cannot be opened for writing."""
    pass
