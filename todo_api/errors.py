"""
Application exceptions.

Client-facing errors carry the message returned in the response body;
storage failures are left as the driver's own exceptions.
"""


class TodoAPIError(Exception):
    """Base class for Todo API errors."""


class ConfigurationError(TodoAPIError):
    """Raised when configuration cannot be loaded at startup."""


class TodoValidationError(TodoAPIError):
    """Raised when a request fails validation before reaching storage."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


EMPTY_BODY_MESSAGE = "Todo body cannot be empty"
INVALID_ID_MESSAGE = "Invalid Todo ID"
