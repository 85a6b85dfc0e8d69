"""src/courier/transport/connection.py

TCP and TLS connection management module.

A connection is bound to one host:port, carries one request/response
exchange and is then closed; nothing is reused across requests.
"""

import logging
import socket
import ssl
from typing import Any, Optional, Union

from courier.exceptions import (
    ConfigurationError,
    ConnectTimeout,
    NetworkError,
    ReadTimeout,
    TlsError,
    WriteTimeout,
)
from courier.transport.tls import SSLContextFactory, create_ssl_context
from courier.utils.timing import Timeout

__all__ = ["Connection", "TLSConnection", "open_connection"]

logger = logging.getLogger(__name__)


class Connection:
    """
    Plain TCP transport: send raw bytes, receive up to N bytes, close.

    Attributes:
        host: The target hostname or IP address.
        port: The target port number.
        timeout: Connection timeout configuration.
        sock: The underlying socket object.
    """

    __slots__ = ("host", "port", "timeout", "sock")

    def __init__(
        self,
        host: str,
        port: int,
        timeout: Union[float, Timeout, None] = None,
    ) -> None:
        """
        Initialize connection parameters.
        """
        self.host = host
        self.port = port

        self.timeout = Timeout.coerce(timeout) if timeout is not None else None

        self.sock: Optional[socket.socket] = None

    def _wrap(self, raw_sock: socket.socket) -> socket.socket:
        """Hook for subclasses layering a protocol over the TCP socket."""
        return raw_sock

    def open(self) -> socket.socket:
        """
        Open the TCP connection (and whatever ``_wrap`` layers on top).
        """
        connect_to = self.timeout.connect_timeout() if self.timeout else None

        logger.debug("connecting to %s:%d", self.host, self.port)
        try:
            raw_sock = socket.create_connection(
                (self.host, self.port), timeout=connect_to
            )
            try:
                self.sock = self._wrap(raw_sock)
            except BaseException:
                raw_sock.close()
                raise

            # After connection is established, switch timeout to 'read_timeout'
            self.sock.settimeout(self.timeout.read_timeout() if self.timeout else None)
            return self.sock

        except NetworkError:
            raise

        except socket.timeout as e:
            raise ConnectTimeout(
                f"Timeout connecting to {self.host}:{self.port}"
            ) from e

        except ssl.SSLError as e:
            raise TlsError(f"TLS Verification Error: {e}") from e

        except OSError as e:
            raise NetworkError(
                f"Connection error to {self.host}:{self.port} - {e}"
            ) from e

    def send(self, data: bytes) -> None:
        """Transmit ``data`` in full."""
        if self.sock is None:
            raise NetworkError("Connection is not open")
        try:
            self.sock.sendall(data)
        except socket.timeout as exc:
            raise WriteTimeout(f"Write timed out: {exc}") from exc
        except OSError as exc:
            raise NetworkError(f"Network error during write: {exc}") from exc
        logger.debug("sent %d bytes to %s:%d", len(data), self.host, self.port)

    def recv(self, size: int = 65536) -> bytes:
        """
        Receive up to ``size`` bytes, blocking until some arrive.

        Returns:
            The bytes received; ``b""`` once the peer has closed.
        """
        if self.sock is None:
            raise NetworkError("Connection is not open")
        try:
            return self.sock.recv(size)
        except socket.timeout as exc:
            raise ReadTimeout(f"Read timed out: {exc}") from exc
        except OSError as exc:
            raise NetworkError(f"Network error during read: {exc}") from exc

    def close(self) -> None:
        """
        Close the connection if it is open.
        """
        if self.sock:
            try:
                self.sock.close()
            except OSError:
                logger.debug("error closing socket to %s:%d", self.host, self.port)
            self.sock = None
            logger.debug("closed connection to %s:%d", self.host, self.port)

    def __enter__(self) -> "Connection":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        self.close()


class TLSConnection(Connection):
    """
    TLS-wrapped TCP transport.

    Attributes:
        ssl_context: Context used for the handshake.
    """

    __slots__ = ("ssl_context",)

    def __init__(
        self,
        host: str,
        port: int,
        timeout: Union[float, Timeout, None] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        super().__init__(host, port, timeout=timeout)
        self.ssl_context = ssl_context or create_ssl_context()

    def _wrap(self, raw_sock: socket.socket) -> socket.socket:
        logger.debug("establishing TLS layer with %s", self.host)
        try:
            return self.ssl_context.wrap_socket(raw_sock, server_hostname=self.host)
        except socket.timeout as e:
            raise ConnectTimeout(f"Timeout during TLS handshake: {e}") from e


def open_connection(
    scheme: str,
    host: str,
    port: int,
    timeout: Union[float, Timeout, None] = None,
    ssl_context_factory: Optional[SSLContextFactory] = create_ssl_context,
) -> Connection:
    """
    Build the transport for ``scheme`` (not yet opened).

    Raises:
        ConfigurationError: If ``https`` is requested but no TLS provider
            is configured.
    """
    if scheme == "https":
        if ssl_context_factory is None:
            raise ConfigurationError(
                "https requested but no TLS provider is configured"
            )
        return TLSConnection(
            host, port, timeout=timeout, ssl_context=ssl_context_factory()
        )

    return Connection(host, port, timeout=timeout)
