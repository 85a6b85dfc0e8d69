"""src/courier/client/request.py

HTTP request model and wire serialization.
"""

from typing import TYPE_CHECKING, Dict, Optional, Union

from courier.http.headers import Headers
from courier.http.url import URL

if TYPE_CHECKING:  # pragma: no cover
    from courier.client.response import Response

__all__ = ["Request", "REDIRECT_STATUSES"]

REDIRECT_STATUSES = (301, 302, 303, 307, 308)

# Recomputed for every hop by the session
_PER_HOP_HEADERS = ("Host", "Cookie", "Proxy-Authorization")


class Request:
    """
    An HTTP request: method, target URL, headers and optional body.

    Headers are an ordered, case-insensitive mapping where assigning a name
    again overwrites it. The session adds ``Connection``, ``User-Agent``,
    ``Authorization``, ``Proxy-Authorization`` and ``Cookie`` in place
    while it sends the request.

    Attributes:
        method: Upper-cased HTTP method.
        url: Parsed target URL.
        headers: Request headers.
        body: Body bytes, or None.
    """

    __slots__ = ("method", "url", "headers", "body")

    def __init__(
        self,
        method: str,
        url: Union[str, URL],
        headers: Optional[Union[Dict[str, str], Headers]] = None,
        body: Optional[Union[str, bytes]] = None,
    ) -> None:
        self.method = method.upper()
        self.url = url if isinstance(url, URL) else URL(url)
        self.headers = (
            headers.copy() if isinstance(headers, Headers) else Headers(headers)
        )
        self.body = body.encode("utf-8") if isinstance(body, str) else body

    @property
    def scheme(self) -> str:
        """URL scheme, ``http`` or ``https``."""
        return self.url.scheme

    @property
    def host(self) -> str:
        """Target host."""
        return self.url.host

    @property
    def port(self) -> int:
        """Target port (scheme default when the URL has none)."""
        return self.url.port

    @property
    def path(self) -> str:
        """Origin-form request target: path plus query."""
        return self.url.target

    def __repr__(self) -> str:
        return f"<Request [{self.method} {self.url}]>"

    def build(self, absolute_target: bool = False) -> bytes:
        """
        Builds the raw HTTP request bytes.

        Args:
            absolute_target: Use the absolute URL as request target, as a
                forward proxy expects.

        Raises:
            ValueError: If a header name or value contains CR, LF or NUL.
        """
        target = self.url.absolute if absolute_target else self.url.target
        request_line = f"{self.method} {target} HTTP/1.1\r\n"

        final_headers = Headers({"Host": self.url.host_header})
        for k, v in self.headers.multi_items():
            if k.lower() == "host":
                final_headers[k] = v
            else:
                final_headers.add(k, v)

        body_bytes = self.body or b""
        if body_bytes and "Content-Length" not in final_headers:
            final_headers["Content-Length"] = str(len(body_bytes))

        headers_str = ""
        for k, v in final_headers.multi_items():
            # Validate against HTTP header injection attacks
            if "\r" in k or "\n" in k or "\r" in v or "\n" in v:
                raise ValueError(f"Invalid character in header {k}: {v!r}")
            if "\x00" in k or "\x00" in v:
                raise ValueError(f"Null byte in header {k}: {v!r}")
            headers_str += f"{k}: {v}\r\n"

        return (request_line + headers_str + "\r\n").encode("utf-8") + body_bytes

    def redirect(self, response: "Response") -> "Request":
        """
        Derive the request that follows ``response``'s ``Location``.

        301, 302 and 303 switch any method but HEAD to GET and drop the
        body; 307/308 keep method and body. A caller-supplied Authorization
        header does not follow a redirect to another host.
        """
        location = response.headers["Location"]
        new_url = URL(self.url.join(location))

        method = self.method
        body = self.body
        headers = self.headers.copy()
        for name in _PER_HOP_HEADERS:
            headers.pop(name, None)

        status = response.status_code
        if method != "HEAD" and status in (301, 302, 303):
            method = "GET"
            body = None
            for name in list(headers):
                lowered = name.lower()
                if lowered.startswith("content-") or lowered == "transfer-encoding":
                    del headers[name]

        if (new_url.host, new_url.port) != (self.url.host, self.url.port):
            headers.pop("Authorization", None)

        return Request(method, new_url, headers=headers, body=body)
