"""
MongoDB Connection Model Exceptions.

Custom exception hierarchy for the package.
"""


class ConnectionModelError(Exception):
    """Base exception for all connection model errors."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(ConnectionModelError, ValueError):
    """Raised when a connection model violates one of its field rules.

    ``field`` names the offending field, when there is one.
    """

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, code="invalid-argument")


class OptionsLoadError(ConnectionModelError, OSError):
    """Raised when a TLS file referenced by a model cannot be read."""

    def __init__(self, message: str, field: str | None = None, path: str | None = None):
        self.field = field
        self.path = path
        super().__init__(message, code="io-error")

    def __str__(self) -> str:
        return self.message
