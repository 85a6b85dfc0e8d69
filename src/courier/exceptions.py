"""src/courier/exceptions.py

Courier exceptions hierarchy.

Two families live here. ``NetworkError`` and its subclasses describe
transport faults (connect, read, write, TLS) and derive from ``OSError``.
``HTTPError`` and its subclasses describe protocol and status failures and
may carry the response that triggered them.
"""

# pylint: disable=redefined-builtin

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from courier.client.response import Response


class CourierError(Exception):
    """Base exception for all Courier errors."""


class RequestError(CourierError):
    """The request cannot be sent as built (bad URL, unsupported scheme)."""


class ConfigurationError(CourierError):
    """The session lacks a capability the request needs (e.g. TLS)."""


class NetworkError(CourierError, OSError):
    """
    Base exception for network-related errors.
    Wraps socket errors and other connection issues.
    """


class TimeoutError(NetworkError):
    """
    Base exception for timeouts.
    """

    def __init__(self, message: str = "Operation timed out"):
        super().__init__(message)


class ConnectTimeout(TimeoutError):
    """Timeout during connection establishment."""


class ReadTimeout(TimeoutError):
    """Timeout during data reception."""


class WriteTimeout(TimeoutError):
    """Timeout while transmitting the request."""


class TlsError(NetworkError):
    """TLS/SSL handshake or verification errors."""


class HTTPError(CourierError):
    """
    Base exception for protocol and status failures.

    Attributes:
        response: The response that triggered the error, when one exists.
    """

    def __init__(self, message: str, response: Optional["Response"] = None):
        super().__init__(message)
        self.response = response

    @property
    def status_code(self) -> Optional[int]:
        """Status code of the attached response, if any."""
        if self.response is None:
            return None
        return self.response.status_code


class InternalError(HTTPError):
    """Engine-detected condition unrelated to a valid HTTP status."""


class IncompleteBodyError(InternalError):
    """The connection closed before the framed body was complete."""


class ResponseError(HTTPError):
    """Structural response failure (no response, redirect bound exceeded)."""


class ClientError(HTTPError):
    """4xx status surfaced as an error."""


class ServerError(HTTPError):
    """5xx status surfaced as an error."""


class HeaderError(ServerError):
    """Body-framing headers could not be parsed."""
