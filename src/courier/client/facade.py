"""src/courier/client/facade.py

One-shot convenience helpers.

Each helper builds a throwaway :class:`Session`, issues a GET and returns
one piece of the response. Keyword arguments are passed through to the
session (``timeout``, ``user_agent``, ``auth``, ``raise_on_error``...).
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional, TextIO, Union

from courier.client.response import Response
from courier.client.session import Session

__all__ = ["fetch", "get_text", "get_headers", "print_body", "save_body"]


def fetch(url: str, **session_options: Any) -> Response:
    """GET ``url`` with a fresh session and return the response."""
    return Session(**session_options).get(url)


# -- Body ------------------------------------------------------------------


def get_text(url: str, **session_options: Any) -> str:
    """Return the decoded body of ``url``."""
    return fetch(url, **session_options).text()


def print_body(
    url: str, file: Optional[TextIO] = None, **session_options: Any
) -> int:
    """
    Print the decoded body of ``url``.

    Args:
        url: URL to fetch.
        file: Stream to print to (defaults to stdout).

    Returns:
        The response status code.
    """
    response = fetch(url, **session_options)
    print(response.text(), file=file or sys.stdout)
    return response.status_code


def save_body(
    url: str, path: Union[str, Path], **session_options: Any
) -> int:
    """
    Save the raw body of ``url`` to ``path``.

    Returns:
        The response status code.
    """
    response = fetch(url, **session_options)
    Path(path).write_bytes(response.body or b"")
    return response.status_code


# -- Headers ---------------------------------------------------------------


def get_headers(url: str, *names: str, **session_options: Any) -> Dict[str, str]:
    """
    Return response headers of ``url``.

    Args:
        url: URL to fetch.
        *names: Header names to keep; all headers when omitted.

    Returns:
        Mapping of header name to value; requested headers that are
        missing are left out.
    """
    headers = fetch(url, **session_options).headers
    if not names:
        return dict(headers.items())
    return {name: headers[name] for name in names if name in headers}
