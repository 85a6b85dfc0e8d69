"""src/courier/http/body.py

HTTP body management (chunked, fixed-length, read-until-close) for Courier.

Every reader here pulls from a :class:`ByteReader`, which keeps the bytes
already received beyond the point consumed so far. A chunk-size line or a
header block may straddle any number of ``recv()`` calls.
"""

import logging
import re
from typing import Optional, Protocol

from courier.exceptions import HeaderError, IncompleteBodyError, InternalError
from courier.http.headers import Headers
from courier.http.http11 import find_header_end

__all__ = [
    "ByteReader",
    "parse_chunk_size",
    "content_length",
    "read_exact",
    "read_chunked",
    "read_until_close",
    "read_content",
]

logger = logging.getLogger(__name__)

CRLF = b"\r\n"
_HEX_RE = re.compile(r"[0-9A-Fa-f]+")
_DIGITS_RE = re.compile(r"[0-9]+")


class Receiver(Protocol):
    """Anything exposing a blocking ``recv``; ``b""`` means end of stream."""

    def recv(self, size: int) -> bytes: ...  # pragma: no cover


class ByteReader:
    """
    Line-buffered reader over a transport.

    Attributes:
        source: Transport the bytes are pulled from.
        chunk_size: Maximum bytes requested per ``recv`` call.
    """

    __slots__ = ("source", "chunk_size", "_buf", "_eof")

    def __init__(
        self, source: Receiver, initial: bytes = b"", chunk_size: int = 65536
    ) -> None:
        self.source = source
        self.chunk_size = chunk_size
        self._buf = bytearray(initial)
        self._eof = False

    @property
    def buffered(self) -> bytes:
        """Bytes received but not yet consumed."""
        return bytes(self._buf)

    def _fill(self) -> bool:
        """Receive once more; False when the peer has closed."""
        if self._eof:
            return False
        data = self.source.recv(self.chunk_size)
        if not data:
            self._eof = True
            return False
        self._buf += data
        return True

    def read_head(self, max_size: int = 65536) -> bytes:
        """
        Read up to and including the header/body separator.

        Raises:
            InternalError: If the peer closed before the separator arrived
                (including without sending a single byte), or the header
                block grew past ``max_size``.
        """
        while True:
            end = find_header_end(self._buf)
            if end is not None:
                head = bytes(self._buf[:end])
                del self._buf[:end]
                return head

            if len(self._buf) > max_size:
                raise InternalError(
                    f"Headers exceed maximum size of {max_size} bytes"
                )

            if not self._fill():
                raise InternalError("Server returned no data")

    def read_line(self, eof_ok: bool = False) -> Optional[bytes]:
        """
        Read one CRLF-terminated line, returned without its terminator.

        Raises:
            IncompleteBodyError: If the peer closed before the line ended,
                unless ``eof_ok`` is set, in which case None is returned.
        """
        start = 0
        while True:
            pos = self._buf.find(CRLF, start)
            if pos != -1:
                line = bytes(self._buf[:pos])
                del self._buf[: pos + len(CRLF)]
                return line

            # A CR at the very end may pair with an LF still in flight
            start = max(len(self._buf) - 1, 0)
            if not self._fill():
                if eof_ok:
                    return None
                raise IncompleteBodyError("Connection closed during chunk header")

    def read_exact(self, n: int) -> bytes:
        """
        Read exactly ``n`` bytes.

        Raises:
            IncompleteBodyError: If the peer closed first.
        """
        while len(self._buf) < n:
            if not self._fill():
                raise IncompleteBodyError(
                    f"Connection closed after {len(self._buf)} of {n} bytes"
                )
        data = bytes(self._buf[:n])
        del self._buf[:n]
        return data

    def read_to_end(self, max_size: Optional[int] = None) -> bytes:
        """Read until the peer closes the connection."""
        _check_body_size(len(self._buf), max_size)
        while self._fill():
            _check_body_size(len(self._buf), max_size)
        data = bytes(self._buf)
        self._buf.clear()
        return data


def _check_body_size(size: int, max_size: Optional[int]) -> None:
    if max_size is not None and size > max_size:
        raise InternalError(f"Response body exceeds maximum size of {max_size} bytes")


def parse_chunk_size(line: bytes) -> int:
    """
    Parse a chunk-size line such as ``b"1a"``, ``b"5;ext=1"`` or ``b"5  "``.

    Raises:
        HeaderError: If the size is not hexadecimal.
    """
    size_text = line.split(b";", 1)[0].strip().decode("ascii", errors="replace")
    if not _HEX_RE.fullmatch(size_text):
        raise HeaderError(f"Invalid chunk size: {line!r}")
    return int(size_text, 16)


def content_length(headers: Headers) -> Optional[int]:
    """
    Return the declared Content-Length, or None when absent.

    Identical repeated values (``"5, 5"``) are accepted.

    Raises:
        HeaderError: If the value is not a non-negative integer or the
            repeated values disagree.
    """
    raw = headers.get("Content-Length")
    if raw is None:
        return None

    values = {v.strip() for v in raw.split(",")}
    if len(values) != 1:
        raise HeaderError(f"Conflicting Content-Length values: {raw!r}")

    value = values.pop()
    if not _DIGITS_RE.fullmatch(value):
        raise HeaderError(f"Invalid Content-Length: {raw!r}")
    return int(value)


def read_exact(reader: ByteReader, n: int, max_size: Optional[int] = None) -> bytes:
    """Read a body of exactly ``n`` bytes (fixed Content-Length framing)."""
    _check_body_size(n, max_size)
    return reader.read_exact(n)


def read_chunked(reader: ByteReader, max_size: Optional[int] = None) -> bytes:
    """Decode a chunked transfer-encoded body into memory."""
    body = bytearray()
    while True:
        line = reader.read_line()
        size = parse_chunk_size(line or b"")

        if size == 0:
            # Trailer fields, if any, end with an empty line
            while reader.read_line(eof_ok=True):
                pass
            break

        _check_body_size(len(body) + size, max_size)
        body += reader.read_exact(size)
        # Chunk data is followed by CRLF
        reader.read_exact(len(CRLF))

    return bytes(body)


def read_until_close(reader: ByteReader, max_size: Optional[int] = None) -> bytes:
    """Read a body terminated by the server closing the connection."""
    return reader.read_to_end(max_size)


def is_chunked(headers: Headers) -> bool:
    """Whether Transfer-Encoding lists ``chunked``."""
    codings = headers.get("Transfer-Encoding", "").lower().split(",")
    return "chunked" in (c.strip() for c in codings)


def read_content(
    reader: ByteReader, headers: Headers, max_size: Optional[int] = None
) -> bytes:
    """
    Read a response body using the framing its headers declare.

    Chunked wins over Content-Length; with neither, read until close.
    """
    if is_chunked(headers):
        logger.debug("reading chunked body")
        return read_chunked(reader, max_size)

    length = content_length(headers)
    if length is not None:
        logger.debug("reading body of %d bytes", length)
        return read_exact(reader, length, max_size)

    logger.debug("no content-length, reading until close")
    return read_until_close(reader, max_size)
