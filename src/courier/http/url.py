"""src/courier/http/url.py

URL parser for Courier.
"""

import urllib.parse

from courier.exceptions import RequestError

__all__ = ["URL", "DEFAULT_PORTS"]

DEFAULT_PORTS = {"http": 80, "https": 443}


class URL:
    """Utility class for URL parsing and information."""

    __slots__ = ("raw", "parsed", "scheme", "host", "port", "path", "query")

    def __init__(self, url: str):
        self.raw = url
        self.parsed = urllib.parse.urlsplit(url)
        self.scheme = self.parsed.scheme.lower()
        if self.scheme not in DEFAULT_PORTS:
            raise RequestError(f"Unsupported URL scheme: {url!r}")

        if not self.parsed.hostname:
            raise RequestError(f"Invalid URL: could not determine host: {url!r}")

        self.host = self.parsed.hostname
        try:
            port = self.parsed.port
        except ValueError as exc:
            raise RequestError(f"Invalid port in URL: {url!r}") from exc

        self.port = port or DEFAULT_PORTS[self.scheme]
        self.path = self.parsed.path or "/"
        self.query = self.parsed.query

    @property
    def target(self) -> str:
        """Origin-form request target: path plus query."""
        if self.query:
            return f"{self.path}?{self.query}"
        return self.path

    @property
    def host_header(self) -> str:
        """Value for the Host header; the port is omitted when it is the default."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port == DEFAULT_PORTS[self.scheme]:
            return host
        return f"{host}:{self.port}"

    @property
    def absolute(self) -> str:
        """Absolute-form request target (used when talking to a proxy)."""
        return f"{self.scheme}://{self.host_header}{self.target}"

    def join(self, location: str) -> str:
        """Resolve ``location`` (absolute or relative) against this URL."""
        return urllib.parse.urljoin(self.raw, location)

    def __str__(self) -> str:
        return self.raw
