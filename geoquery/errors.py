from __future__ import annotations

from typing import Optional


class GeoQueryError(Exception):
    """Base class for failures surfaced to the console user."""

    reason = "Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ParseError(GeoQueryError):
    """Raised when user-supplied text is not a valid coordinate, vertex list or radius."""

    reason = "InvalidFormat"


class BackendError(GeoQueryError):
    """Raised when a call to the spatial-index service does not succeed.

    ``status_class`` is one of ``client`` (4xx), ``server`` (5xx or any other
    non-2xx), ``network`` (no response) or ``response`` (unreadable body).
    """

    reason = "RequestFailed"

    def __init__(
        self,
        message: str,
        *,
        status_class: str,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.status_class = status_class
        self.status_code = status_code

    @classmethod
    def from_status(cls, message: str, status_code: int) -> "BackendError":
        status_class = "client" if 400 <= status_code < 500 else "server"
        return cls(f"{message} (HTTP {status_code})", status_class=status_class, status_code=status_code)


__all__ = [
    "GeoQueryError",
    "ParseError",
    "BackendError",
]
