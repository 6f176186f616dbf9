"""Exception hierarchy for the bare-metal client.

Every error raised by this library inherits from BaremetalError, so
callers can catch all of them with a single except clause. Errors raised
by a custom transport are not wrapped and propagate as they are.
"""

from __future__ import annotations


class BaremetalError(Exception):
    """Base exception for all bare-metal client errors."""


class ConfigurationError(BaremetalError):
    """Raised for invalid configuration or missing required settings."""


class FieldRequiredError(BaremetalError, ValueError):
    """Raised when a required request field is empty after default resolution."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"field {field} cannot be empty in request")


class ResponseError(BaremetalError):
    """Raised by ScalewayClient when the API answers with an error status."""

    def __init__(self, status: int, body: str, message: str | None = None) -> None:
        self.status = status
        self.body = body
        self.message = message or body
        super().__init__(f"scaleway API error {status}: {self.message}")


class TypeMismatchError(BaremetalError, TypeError):
    """Raised when a list response is appended to a list of another kind."""

    def __init__(self, expected: type, actual: type) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{actual.__name__} type cannot be appended to type {expected.__name__}"
        )


class InstallNotStartedError(BaremetalError):
    """Raised when waiting for an installation that was never requested."""

    def __init__(self, server_id: str) -> None:
        self.server_id = server_id
        super().__init__(f"server {server_id} has no installation in progress")


class WaitTimeoutError(BaremetalError, TimeoutError):
    """Raised when the wait driver reaches its deadline.

    Carries the last value returned by the polled function, and the last
    tolerated error if there was one.
    """

    def __init__(
        self,
        timeout: float,
        last_value: object = None,
        last_error: BaseException | None = None,
    ) -> None:
        self.timeout = timeout
        self.last_value = last_value
        self.last_error = last_error
        message = f"timeout after {timeout:.1f}s"
        if last_error is not None:
            message = f"{message}: {last_error}"
        super().__init__(message)


class WaitError(BaremetalError):
    """Raised by the wait helpers around any error that ends a wait."""

    def __init__(self, message: str, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"{message}: {cause}")
