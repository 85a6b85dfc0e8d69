"""src/courier/client/cookies.py

Cookie jar used by the session.

Cookies are keyed by (domain, path, name). Only the two operations the
session needs are exposed as policy: attach the applicable cookies to an
outgoing request, and extract ``Set-Cookie`` headers from a response.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from http.cookies import CookieError, Morsel, SimpleCookie
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

from courier.http.url import URL

if TYPE_CHECKING:  # pragma: no cover
    from courier.client.request import Request
    from courier.client.response import Response

__all__ = ["Cookie", "CookieJar"]

logger = logging.getLogger(__name__)


@dataclass
class Cookie:
    """A stored cookie."""

    name: str
    value: str
    domain: str
    path: str = "/"
    host_only: bool = True
    secure: bool = False

    def matches(self, url: URL) -> bool:
        """Whether this cookie should be sent to ``url``."""
        if self.secure and url.scheme != "https":
            return False
        return _domain_match(url.host, self.domain, self.host_only) and _path_match(
            url.path, self.path
        )


def _domain_match(host: str, domain: str, host_only: bool) -> bool:
    host = host.lower()
    if host == domain:
        return True
    return not host_only and host.endswith(f".{domain}")


def _path_match(request_path: str, cookie_path: str) -> bool:
    if request_path == cookie_path:
        return True
    if not request_path.startswith(cookie_path):
        return False
    return cookie_path.endswith("/") or request_path[len(cookie_path)] == "/"


def _default_path(request_path: str) -> str:
    if not request_path.startswith("/") or request_path.count("/") == 1:
        return "/"
    return request_path[: request_path.rfind("/")]


def _is_expired(morsel: Morsel) -> bool:
    max_age = morsel["max-age"]
    if max_age:
        try:
            return int(max_age) <= 0
        except ValueError:
            return False

    expires = morsel["expires"]
    if expires:
        try:
            when = parsedate_to_datetime(expires)
        except (TypeError, ValueError):
            return False
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        return when <= datetime.now(timezone.utc)

    return False


class CookieJar:
    """
    In-memory cookie store.

    Not thread-safe: a jar belongs to one session, which serves one
    exchange at a time.
    """

    __slots__ = ("_cookies",)

    def __init__(self) -> None:
        self._cookies: Dict[Tuple[str, str, str], Cookie] = {}

    def __len__(self) -> int:
        return len(self._cookies)

    def __iter__(self) -> Iterator[Cookie]:
        return iter(list(self._cookies.values()))

    def __contains__(self, name: object) -> bool:
        return any(cookie.name == name for cookie in self._cookies.values())

    def __repr__(self) -> str:
        return f"<CookieJar {[c.name for c in self._cookies.values()]}>"

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Value of the first cookie called ``name``, whatever its domain."""
        for cookie in self._cookies.values():
            if cookie.name == name:
                return cookie.value
        return default

    def set(self, cookie: Cookie) -> None:
        """Store ``cookie``, replacing one with the same domain, path and name."""
        self._cookies[(cookie.domain, cookie.path, cookie.name)] = cookie

    def clear(self) -> None:
        """Forget every cookie."""
        self._cookies.clear()

    def cookies_for(self, url: URL) -> List[Cookie]:
        """Cookies applicable to ``url``, longest path first."""
        matching = [c for c in self._cookies.values() if c.matches(url)]
        return sorted(matching, key=lambda c: len(c.path), reverse=True)

    def add_cookie_header(self, request: "Request") -> None:
        """
        Set the Cookie header on ``request`` from the applicable cookies.

        Leaves the request untouched when nothing applies.
        """
        cookies = self.cookies_for(request.url)
        if cookies:
            pairs = [f"{c.name}={c.value}" for c in cookies]
            request.headers["Cookie"] = "; ".join(pairs)

    def extract_cookies(self, response: "Response") -> None:
        """
        Store cookies from the response's Set-Cookie headers.

        The response must carry the request that produced it; the request
        URL supplies the default domain and path.
        """
        if response.request is None:
            return

        url = response.request.url
        for header in response.headers.get_all("Set-Cookie"):
            parsed: SimpleCookie = SimpleCookie()
            try:
                parsed.load(header)
            except CookieError:
                logger.warning("ignoring unparseable Set-Cookie: %r", header)
                continue

            for name, morsel in parsed.items():
                self._store(name, morsel, url)

    def _store(self, name: str, morsel: Morsel, url: URL) -> None:
        domain = morsel["domain"].lstrip(".").lower()
        host_only = not domain
        if host_only:
            domain = url.host.lower()
        elif not _domain_match(url.host, domain, host_only=False):
            logger.debug(
                "rejecting cookie %s for domain %s from %s", name, domain, url.host
            )
            return

        path = morsel["path"] or _default_path(url.path)
        key = (domain, path, name)

        if _is_expired(morsel):
            self._cookies.pop(key, None)
            return

        self._cookies[key] = Cookie(
            name=name,
            value=morsel.value,
            domain=domain,
            path=path,
            host_only=host_only,
            secure=bool(morsel["secure"]),
        )
