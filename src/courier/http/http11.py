"""src/courier/http/http11.py

HTTP/1.1 response head scanning and parsing.
"""

from typing import List, Optional, Tuple, Union

from courier.exceptions import InternalError
from courier.http.headers import Headers

__all__ = ["find_header_end", "HttpParser"]

CRLFCRLF = b"\r\n\r\n"
LFLF = b"\n\n"


def find_header_end(buffer: Union[bytes, bytearray, memoryview]) -> Optional[int]:
    """
    Locate the end of the header block in ``buffer``.

    ``CRLFCRLF`` is preferred; a bare ``LFLF`` is accepted from servers that
    do not send carriage returns.

    Returns:
        Offset just past the separator, so ``buffer[offset:]`` is the start
        of the body, or None when no separator has arrived yet.
    """
    data = bytes(buffer)
    pos = data.find(CRLFCRLF)
    if pos != -1:
        return pos + len(CRLFCRLF)

    pos = data.find(LFLF)
    if pos != -1:
        return pos + len(LFLF)

    return None


class HttpParser:
    """
    HTTP/1.1 response head parser.

    Handles:
    - Status line parsing.
    - Header parsing with duplicate handling.
    - Defensive sizing.
    """

    def __init__(self, max_header_size: int = 65536):
        self.max_header_size = max_header_size

    def parse_response(self, data: bytes) -> Tuple[int, str, Headers, bytes]:
        """
        Parse a raw HTTP response head (plus whatever body bytes follow).

        Returns:
            Tuple of (status_code, status_line, headers, remaining_body)

        Raises:
            InternalError: If the head is incomplete, too large or the status
                line is invalid.
        """
        end = find_header_end(data)
        if end is None:
            raise InternalError("Incomplete response: headers delimiter not found")

        if end > self.max_header_size:
            raise InternalError(
                f"Headers exceed maximum size of {self.max_header_size} bytes"
            )

        # iso-8859-1 maps every byte, so decoding cannot fail
        header_text = data[:end].decode("iso-8859-1")
        lines = [line.rstrip("\r") for line in header_text.split("\n")]

        status_line = lines[0]
        status_code = self.parse_status_line(status_line)[1]
        headers = self._parse_headers(lines[1:])

        return status_code, status_line, headers, data[end:]

    @staticmethod
    def parse_status_line(status_line: str) -> Tuple[str, int, str]:
        """
        Split ``HTTP/1.1 200 OK`` into version, code and reason.

        Raises:
            InternalError: If the line is not an HTTP/1.x status line.
        """
        parts = status_line.split(" ", 2)
        if len(parts) < 2 or not parts[0].startswith("HTTP/"):
            raise InternalError(f"Invalid status line: {status_line!r}")

        version, code = parts[0], parts[1]
        reason = parts[2] if len(parts) > 2 else ""
        try:
            status_code = int(code)
        except ValueError as exc:
            raise InternalError(f"Invalid status line: {status_line!r}") from exc

        if not 100 <= status_code <= 999:
            raise InternalError(f"Invalid status code: {status_code}")

        return version, status_code, reason.strip()

    def _parse_headers(self, lines: List[str]) -> Headers:
        """
        Parse header lines into a Headers mapping.
        Repeated fields keep every value.
        """
        headers = Headers()

        for line in lines:
            if not line:
                continue

            if ":" not in line:
                # Tolerate garbage lines from non-conformant servers
                continue

            key, value = line.split(":", 1)
            key = key.strip()
            if not key:
                continue

            headers.add(key, value.strip())

        return headers
