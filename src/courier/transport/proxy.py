"""src/courier/transport/proxy.py

Proxy discovery from the process environment.

``http_proxy`` (then ``HTTP_PROXY``) applies to ``http://`` targets; hosts
listed in ``no_proxy`` / ``NO_PROXY`` bypass it.
"""

import logging
import os
import urllib.parse
from dataclasses import dataclass
from typing import Mapping, Optional

from courier.exceptions import RequestError
from courier.http.url import URL

__all__ = ["Proxy", "get_environ_proxy", "bypass_proxy"]

logger = logging.getLogger(__name__)

PROXY_VARIABLES = ("http_proxy", "HTTP_PROXY")
NO_PROXY_VARIABLES = ("no_proxy", "NO_PROXY")


@dataclass(frozen=True)
class Proxy:
    """
    A forward proxy endpoint.

    Attributes:
        host: Proxy hostname.
        port: Proxy port.
        username: Optional login embedded in the proxy URL.
        password: Optional password embedded in the proxy URL.
    """

    host: str
    port: int
    username: Optional[str] = None
    password: Optional[str] = None

    @classmethod
    def from_url(cls, proxy_url: str) -> "Proxy":
        """Parse ``scheme://[user:pass@]host:port`` (the scheme may be omitted)."""
        if "://" not in proxy_url:
            proxy_url = f"http://{proxy_url}"

        try:
            url = URL(proxy_url)
        except RequestError as exc:
            raise RequestError(f"Invalid proxy URL: {proxy_url!r}") from exc

        username = url.parsed.username
        password = url.parsed.password
        return cls(
            host=url.host,
            port=url.port,
            username=urllib.parse.unquote(username) if username is not None else None,
            password=urllib.parse.unquote(password) if password is not None else None,
        )

    @property
    def has_credentials(self) -> bool:
        """Whether the proxy URL carried a login."""
        return self.username is not None


def bypass_proxy(host: str, environ: Mapping[str, str]) -> bool:
    """Whether ``host`` matches an entry of no_proxy / NO_PROXY."""
    for name in NO_PROXY_VARIABLES:
        value = environ.get(name)
        if value:
            break
    else:
        return False

    host = host.lower()
    for entry in value.split(","):
        entry = entry.strip().lower()
        if not entry:
            continue
        if entry == "*":
            return True
        # ".example.com" and "example.com" both cover subdomains
        entry = entry.lstrip(".").split(":", 1)[0]
        if host == entry or host.endswith(f".{entry}"):
            return True
    return False


def get_environ_proxy(
    url: URL, environ: Optional[Mapping[str, str]] = None
) -> Optional[Proxy]:
    """
    Return the proxy to use for ``url``, or None to connect directly.

    Args:
        url: Target of the request.
        environ: Mapping to read from; defaults to ``os.environ``.
    """
    if url.scheme != "http":
        return None

    env = os.environ if environ is None else environ
    for name in PROXY_VARIABLES:
        value = env.get(name)
        if value:
            break
    else:
        return None

    if bypass_proxy(url.host, env):
        logger.debug("bypassing proxy for %s", url.host)
        return None

    proxy = Proxy.from_url(value)
    logger.debug("using proxy %s:%d for %s", proxy.host, proxy.port, url.host)
    return proxy
