"""src/courier/client/session.py

HTTP Session: the request/response engine.

A session holds the state shared by the requests it sends: cookies,
credentials, the user agent, redirect policy and the history log. Every
exchange opens its own connection and closes it before returning or
raising.
"""

import logging
from typing import Dict, List, Optional, Tuple, Union

from courier.client.auth import build_basic_auth_header
from courier.client.cookies import CookieJar
from courier.client.request import Request
from courier.client.response import Response
from courier.exceptions import ClientError, HTTPError, ResponseError, ServerError
from courier.http.body import ByteReader, read_content
from courier.transport.connection import Connection, open_connection
from courier.transport.proxy import get_environ_proxy
from courier.transport.tls import SSLContextFactory, create_ssl_context
from courier.utils.timing import Timeout

__all__ = ["Session"]

logger = logging.getLogger(__name__)

DEFAULT_MAX_HEADER_SIZE = 65536

# pylint: disable=too-many-instance-attributes,too-many-arguments


class Session:
    """
    HTTP/1.1 client engine.

    Not thread-safe: ``history`` and ``cookies`` are updated in place
    without locking, so one session must serve one exchange at a time.
    Separate sessions are independent.

    Attributes:
        timeout: Seconds (or a :class:`Timeout`) for connect, read and write.
        user_agent: Sent as User-Agent when set.
        max_redirects: Redirects followed per call before giving up.
        raise_on_error: Raise ClientError/ServerError for 4xx/5xx responses.
        cookies: Cookie jar shared by every request of the session.
        history: Snapshots (body cleared) of every response received.
        trust_env: Read proxy settings from the environment.
        ssl_context_factory: TLS provider; None disables https.
        limits: Resource limits (max_header_size, max_body_size).
    """

    __slots__ = (
        "timeout",
        "user_agent",
        "max_redirects",
        "raise_on_error",
        "cookies",
        "history",
        "trust_env",
        "ssl_context_factory",
        "limits",
        "_basic_auth",
    )

    def __init__(
        self,
        *,
        timeout: Union[float, Timeout, None] = 5,
        user_agent: Optional[str] = None,
        max_redirects: int = 5,
        raise_on_error: bool = False,
        auth: Optional[Tuple[str, str]] = None,
        cookies: Optional[CookieJar] = None,
        trust_env: bool = True,
        ssl_context_factory: Optional[SSLContextFactory] = create_ssl_context,
        limits: Optional[Dict[str, int]] = None,
    ) -> None:
        """
        Initialize a new HTTP session.

        Args:
            timeout: Timeout in seconds for every socket operation.
            user_agent: User-Agent header value.
            max_redirects: Maximum number of redirects to follow.
            raise_on_error: Raise on 4xx/5xx instead of returning.
            auth: ``(login, password)`` for Basic authentication.
            cookies: Existing cookie jar to use.
            trust_env: Honour http_proxy / no_proxy environment variables.
            ssl_context_factory: Callable returning an ``ssl.SSLContext``.
            limits: Resource limits (max_header_size, max_body_size).
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_redirects = max_redirects
        self.raise_on_error = raise_on_error
        self.cookies = cookies if cookies is not None else CookieJar()
        self.history: List[Response] = []
        self.trust_env = trust_env
        self.ssl_context_factory = ssl_context_factory
        self.limits = limits
        self._basic_auth: Optional[Tuple[str, str]] = auth

    def set_basic_auth(self, username: str, password: str) -> None:
        """
        Set Basic Auth credentials for the session.

        Args:
            username: Username for authentication.
            password: Password for authentication.
        """
        self._basic_auth = (username, password)

    def request(self, request: Request) -> Response:
        """
        Send ``request``, following redirects, and return the final response.

        Every response received, redirects included, is appended to
        ``history`` and has its cookies stored.

        Raises:
            ResponseError: More than ``max_redirects`` redirects were needed.
            ClientError: 4xx status while ``raise_on_error`` is set.
            ServerError: 5xx status while ``raise_on_error`` is set.
            InternalError: The server sent nothing or broke HTTP framing.
            NetworkError: Transport failure, including timeouts.
        """
        hops = 0
        while True:
            response = self._send(request)
            self.history.append(response.snapshot())
            hops += 1
            # Stored before the status policy so error responses keep their cookies
            self.cookies.extract_cookies(response)

            if not response.is_redirect:
                self._check_status(response)
                return response

            if hops > self.max_redirects:
                raise ResponseError("Max redirects exceeded", response)

            request = request.redirect(response)
            logger.debug(
                "following %d redirect to %s", response.status_code, request.url
            )

    def _check_status(self, response: Response) -> None:
        if not self.raise_on_error:
            return
        if 400 <= response.status_code < 500:
            raise ClientError(response.status_line, response)
        if response.status_code >= 500:
            raise ServerError(response.status_line, response)

    def _prepare(self, request: Request) -> None:
        """Attach cookies, User-Agent and credentials to ``request``."""
        self.cookies.add_cookie_header(request)
        if self.user_agent:
            request.headers["User-Agent"] = self.user_agent
        if self._basic_auth:
            request.headers["Authorization"] = build_basic_auth_header(
                self._basic_auth[0], self._basic_auth[1]
            )

    def _connect(self, request: Request) -> Tuple[Connection, bool]:
        """
        Choose the transport for ``request``.

        Returns:
            The (unopened) connection, and whether it leads to a proxy.
        """
        proxy = get_environ_proxy(request.url) if self.trust_env else None
        if proxy is None:
            conn = open_connection(
                request.scheme,
                request.host,
                request.port,
                timeout=self.timeout,
                ssl_context_factory=self.ssl_context_factory,
            )
            return conn, False

        if proxy.has_credentials:
            request.headers["Proxy-Authorization"] = build_basic_auth_header(
                proxy.username, proxy.password or ""
            )
        request.headers["Connection"] = "close"
        conn = open_connection(
            "http",
            proxy.host,
            proxy.port,
            timeout=self.timeout,
            ssl_context_factory=self.ssl_context_factory,
        )
        return conn, True

    def _send(self, request: Request) -> Response:
        """Perform one exchange; the connection is closed on every path."""
        self._prepare(request)
        conn, via_proxy = self._connect(request)
        request.headers.setdefault("Connection", "close")

        logger.debug("%s %s", request.method, request.url)
        response: Optional[Response] = None
        try:
            conn.open()
            conn.send(request.build(absolute_target=via_proxy))
            response = self._read_response(conn, request)
        finally:
            conn.close()

        if response is None:
            raise ResponseError("No response")

        logger.debug("got %03d %s", response.status_code, response.reason)
        return response

    def _read_response(self, conn: Connection, request: Request) -> Response:
        """
        Read and assemble the response.

        Raises:
            InternalError: The server closed before completing the head.
        """
        limits = self.limits or {}
        reader = ByteReader(conn)
        head = reader.read_head(
            limits.get("max_header_size", DEFAULT_MAX_HEADER_SIZE)
        )

        response = Response(head, request=request, limits=self.limits)
        if not response.has_content:
            response.set_body(b"")
            return response

        try:
            body = read_content(
                reader, response.headers, limits.get("max_body_size")
            )
        except HTTPError as exc:
            if exc.response is None:
                exc.response = response
            raise

        response.set_body(body)
        return response

    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> Response:
        """Send a GET request."""
        return self.request(Request("GET", url, headers=headers))

    def head(self, url: str, headers: Optional[Dict[str, str]] = None) -> Response:
        """Send a HEAD request."""
        return self.request(Request("HEAD", url, headers=headers))

    def post(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Union[str, bytes]] = None,
    ) -> Response:
        """Send a POST request."""
        return self.request(Request("POST", url, headers=headers, body=body))
