"""src/courier/__init__.py

Courier - blocking HTTP/1.1 client engine for Python.

Courier is a zero-dependency HTTP client built entirely on Python's standard
library. It opens one connection per exchange, parses the response from the
raw byte stream, decodes chunked and length-delimited bodies, follows
redirects up to a bound and keeps cookies and credentials per session.

Key Features:
    - Zero external dependencies
    - HTTP/1.1 with chunked, fixed-length and read-until-close bodies
    - Plain and TLS transports selected by URL scheme
    - Redirects, cookies, Basic auth and environment proxies
    - Typed errors for protocol and status failures
    - Full type hints (PEP 561)

Example:
    Session usage::

        from courier import Session

        session = Session(user_agent="example/1.0", raise_on_error=True)
        response = session.get('https://api.example.com/data')
        print(response.status_code, response.json())

    One-shot usage::

        from courier import get_text

        print(get_text('https://example.com/'))
"""

import logging

from courier.client.cookies import CookieJar
from courier.client.facade import fetch, get_headers, get_text, print_body, save_body
from courier.client.request import Request
from courier.client.response import Response
from courier.client.session import Session
from courier.exceptions import (
    ClientError,
    CourierError,
    HeaderError,
    HTTPError,
    InternalError,
    NetworkError,
    ResponseError,
    ServerError,
)
from courier.utils.timing import Timeout
from courier.version import __version__

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Request",
    "Response",
    "Session",
    "CookieJar",
    "Timeout",
    "fetch",
    "get_text",
    "get_headers",
    "print_body",
    "save_body",
    "CourierError",
    "HTTPError",
    "InternalError",
    "ResponseError",
    "ClientError",
    "ServerError",
    "HeaderError",
    "NetworkError",
    "__version__",
]
