"""src/courier/http/__init__.py

HTTP/1.1 wire handling for Courier: header scanning and parsing,
body framing (chunked, fixed-length, read-until-close) and headers.
"""

from .body import ByteReader, read_chunked, read_content
from .headers import Headers
from .http11 import HttpParser, find_header_end

__all__ = [
    "ByteReader",
    "Headers",
    "HttpParser",
    "find_header_end",
    "read_chunked",
    "read_content",
]
