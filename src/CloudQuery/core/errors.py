"""Error types raised or carried by CloudQuery."""

from __future__ import annotations


class CloudQueryError(Exception):
    """Base class for all CloudQuery errors."""


class InconsistentClassError(CloudQueryError, ValueError):
    """Two queries with different class names were combined."""

    def __init__(self, left: str, right: str) -> None:
        super().__init__(f"Different class names: {left!r} and {right!r}")
        self.left = left
        self.right = right


class EncodingError(CloudQueryError, TypeError):
    """A value could not be encoded to its wire representation."""


class RemoteError(CloudQueryError):
    """Failure reported by the transport or by the remote service.

    Attributes:
        code: Service error code, or -1 for network failures.
        message: Human-readable description.
        status_code: HTTP status code when a response was received.
    """

    def __init__(self, code: int, message: str, *, status_code: int | None = None) -> None:
        super().__init__(f"[{code}] {message}")
        self.code = code
        self.message = message
        self.status_code = status_code

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RemoteError):
            return NotImplemented
        return (self.code, self.message, self.status_code) == (other.code, other.message, other.status_code)

    def __hash__(self) -> int:
        return hash((self.code, self.message, self.status_code))
