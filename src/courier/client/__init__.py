"""src/courier/client/__init__.py"""

from .auth import build_basic_auth_header
from .cookies import Cookie, CookieJar
from .facade import fetch, get_headers, get_text, print_body, save_body
from .request import Request
from .response import Response
from .session import Session

__all__ = [
    "Session",
    "Request",
    "Response",
    "Cookie",
    "CookieJar",
    "build_basic_auth_header",
    "fetch",
    "get_text",
    "get_headers",
    "print_body",
    "save_body",
]
