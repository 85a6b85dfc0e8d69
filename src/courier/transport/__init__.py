"""src/courier/transport/__init__.py

Transport layer module for Courier.

This module provides low-level connection management: plain TCP and
TLS-wrapped connections selected by URL scheme, and proxy discovery.
"""

from .connection import Connection, TLSConnection, open_connection
from .proxy import Proxy, get_environ_proxy

__all__ = [
    "Connection",
    "TLSConnection",
    "open_connection",
    "Proxy",
    "get_environ_proxy",
]
