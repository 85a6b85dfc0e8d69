"""src/courier/client/response.py

HTTP Response handling module.

This module provides the Response class: status line and headers parsed
from the raw response head, then a body populated once the content reader
has assembled it.
"""

import codecs
import json as std_json
import logging
from typing import TYPE_CHECKING, Any, Dict, Optional, cast

from courier.client.request import REDIRECT_STATUSES
from courier.exceptions import InternalError
from courier.http.headers import Headers
from courier.http.http11 import HttpParser

if TYPE_CHECKING:  # pragma: no cover
    from courier.client.request import Request

__all__ = ["Response"]

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = "utf-8"


class Response:
    """
    Represents a parsed HTTP response.

    Attributes:
        status_line: HTTP status line (e.g., "HTTP/1.1 200 OK").
        status_code: HTTP status code as integer.
        http_version: Protocol version from the status line.
        reason: Reason phrase from the status line.
        headers: Response headers (case-insensitive).
        body: Raw body bytes; None until the body has been read.
        content: Decoded body text; None until decoded (and for bodyless
            responses).
        request: The request that produced this response.
        url: URL of the request that produced this response.
    """

    # pylint: disable=too-many-instance-attributes
    __slots__ = (
        "status_line",
        "status_code",
        "http_version",
        "reason",
        "headers",
        "body",
        "content",
        "request",
        "url",
        "_frozen",
    )

    def __init__(
        self,
        raw_head: bytes,
        request: Optional["Request"] = None,
        limits: Optional[Dict[str, int]] = None,
    ) -> None:
        """
        Initialize Response by parsing the raw response head.

        Args:
            raw_head: Status line and headers, up to and including the
                blank line.
            request: The request that produced this response.
            limits: Resource limits; only ``max_header_size`` applies here.

        Raises:
            InternalError: If the head cannot be parsed.
        """
        limits = limits or {}
        parser = HttpParser(limits.get("max_header_size", 65536))
        status_code, status_line, headers, _ = parser.parse_response(raw_head)
        version, _, reason = parser.parse_status_line(status_line)

        self.status_line: str = status_line
        self.status_code: int = status_code
        self.http_version: str = version
        self.reason: str = reason
        self.headers: Headers = headers
        self.body: Optional[bytes] = None
        self.content: Optional[str] = None
        self.request = request
        self.url: Optional[str] = str(request.url) if request is not None else None
        self._frozen = False

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}]>"

    @property
    def status(self) -> int:
        """Alias for status_code for compatibility."""
        return self.status_code

    @property
    def ok(self) -> bool:
        """True for statuses below 400."""
        return self.status_code < 400

    @property
    def is_redirect(self) -> bool:
        """A redirect status carrying a Location to follow."""
        return self.status_code in REDIRECT_STATUSES and "Location" in self.headers

    @property
    def location(self) -> Optional[str]:
        """Absolute redirect target, resolved against the request URL."""
        location = self.headers.get("Location")
        if location is None or self.request is None:
            return location
        return self.request.url.join(location)

    @property
    def has_content(self) -> bool:
        """
        Whether this response carries a body.

        1xx, 204 and 304 responses, and any response to HEAD, do not.
        """
        if 100 <= self.status_code < 200 or self.status_code in (204, 304):
            return False
        return self.request is None or self.request.method != "HEAD"

    def set_body(self, raw: bytes) -> None:
        """
        Attach the assembled body and decode it.

        Raises:
            InternalError: If the body was already populated, or this is a
                history snapshot.
        """
        if self._frozen or self.body is not None:
            raise InternalError("Response body already populated", self)

        self.body = raw
        if self.has_content:
            self.content = raw.decode(self.charset, errors="replace")

    @property
    def charset(self) -> str:
        """Charset from Content-Type, falling back to utf-8."""
        content_type = cast(str, self.headers.get("Content-Type", ""))
        if "charset=" not in content_type:
            return DEFAULT_CHARSET

        charset = content_type.split("charset=")[-1].split(";")[0]
        charset = charset.strip().strip('"')
        try:
            codecs.lookup(charset)
        except LookupError:
            logger.warning("unknown response charset %r, using utf-8", charset)
            return DEFAULT_CHARSET
        return charset

    def text(self) -> str:
        """
        Return decoded text ("" when there is no content).
        """
        return self.content or ""

    def json(self) -> Any:
        """
        Returns JSON-decoded body.
        """
        try:
            return std_json.loads(self.text())
        except (std_json.JSONDecodeError, TypeError, ValueError) as exc:
            raise InternalError("Failed to decode JSON response", self) from exc

    def snapshot(self) -> "Response":
        """
        Copy of this response for the history log: status and headers are
        kept, body and content are cleared, and the copy cannot be given a
        body afterwards.
        """
        clone = Response.__new__(Response)
        for slot in Response.__slots__:
            setattr(clone, slot, getattr(self, slot))
        clone.headers = self.headers.copy()
        clone.body = None
        clone.content = None
        clone._frozen = True  # pylint: disable=protected-access
        return clone
