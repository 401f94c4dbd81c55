"""Transport-level error types.

Loads turn these into degraded results; writes let them propagate to the
caller so the failure can be shown and the user can retry.
"""


class BackendError(Exception):
    """Base class for failures talking to the ERP backend."""


class TransportError(BackendError):
    """Request never produced a usable HTTP response (connection refused, DNS, ...)."""


class RequestTimeout(TransportError):
    """Request exceeded its timeout."""


class ApiError(BackendError):
    """Backend answered with a non-2xx status or ``success: false``."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"


class MalformedResponse(ApiError):
    """Response body is not the JSON envelope the backend promises."""
