import _thread
import threading
from contextlib import contextmanager
from typing import List, Optional, Sequence, Tuple, Union

import pytest


class ScriptedConnection:
    """Stand-in transport that replays canned server bytes.

    Each queued chunk is returned by one ``recv`` call (split further when
    larger than the requested size); ``b""`` follows once the script is
    exhausted, as a closed socket would.
    """

    def __init__(
        self,
        chunks: Sequence[bytes] = (),
        host: str = "example.com",
        port: int = 80,
    ):
        self.chunks: List[bytes] = list(chunks)
        self.host = host
        self.port = port
        self.sent = bytearray()
        self.opened = False
        self.closed = False
        self.recv_calls = 0

    def open(self) -> None:
        self.opened = True

    def send(self, data: bytes) -> None:
        self.sent += data

    def recv(self, size: int = 65536) -> bytes:
        self.recv_calls += 1
        if not self.chunks:
            return b""
        chunk = self.chunks.pop(0)
        if len(chunk) > size:
            self.chunks.insert(0, chunk[size:])
            chunk = chunk[:size]
        return chunk

    def close(self) -> None:
        self.closed = True

    @property
    def request_text(self) -> str:
        return self.sent.decode("utf-8")


class ScriptedTransport:
    """Hands out scripted connections in order, recording what was asked for."""

    def __init__(self) -> None:
        self.connections: List[ScriptedConnection] = []
        self.calls: List[Tuple[str, str, int]] = []

    def queue(
        self, *responses: Union[bytes, Sequence[bytes]]
    ) -> List[ScriptedConnection]:
        queued = []
        for response in responses:
            chunks = [response] if isinstance(response, bytes) else list(response)
            conn = ScriptedConnection(chunks)
            self.connections.append(conn)
            queued.append(conn)
        return queued

    def open_connection(
        self,
        scheme: str,
        host: str,
        port: int,
        timeout: Optional[float] = None,
        ssl_context_factory: Optional[object] = None,
    ) -> ScriptedConnection:
        self.calls.append((scheme, host, port))
        conn = self.connections.pop(0)
        conn.host, conn.port = host, port
        return conn


@pytest.fixture(autouse=True)
def no_environment_proxy(monkeypatch):
    """Keep the developer's proxy settings out of the tests."""
    for name in ("http_proxy", "HTTP_PROXY", "no_proxy", "NO_PROXY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def scripted_connection():
    """Factory for ScriptedConnection instances."""
    return ScriptedConnection


@pytest.fixture
def transport(monkeypatch) -> ScriptedTransport:
    """Replace the session's transport factory with scripted connections."""
    scripted = ScriptedTransport()
    monkeypatch.setattr(
        "courier.client.session.open_connection", scripted.open_connection
    )
    return scripted


@pytest.fixture
def timeout_context():
    """Fixture providing a timeout context manager."""

    @contextmanager
    def _timeout_context(seconds):
        def timeout_handler():
            _thread.interrupt_main()

        timer = threading.Timer(seconds, timeout_handler)
        timer.start()
        try:
            yield
        except KeyboardInterrupt:
            pytest.fail(f"Test timed out after {seconds} seconds")
        finally:
            timer.cancel()

    return _timeout_context
