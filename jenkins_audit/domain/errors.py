from __future__ import annotations


class AuditError(Exception):
    """Base class for every error raised by the audit."""
    pass


class FetchError(AuditError):
    """One resource could not be retrieved or understood."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class TransportError(FetchError):
    """Connection failure or non-2xx response."""
    pass


class TransportTimeout(TransportError):
    pass


class DecodeError(FetchError):
    """Raised when a payload does not match the expected record shape."""
    pass


class FatalFetchError(AuditError):
    """
    Raised when the root listing or a view detail cannot be fetched.
    Aborts the whole run; the underlying FetchError is chained as __cause__.
    """
    pass
