"""tests/unit/test_request.py

Unit tests for courier.client.request.Request: construction, wire
serialization and redirect derivation.
"""

import pytest

from courier.client.request import Request
from courier.client.response import Response
from courier.http.headers import Headers


def make_redirect(status: int, location: str, request: Request) -> Response:
    """Build a redirect response for ``request``."""
    head = f"HTTP/1.1 {status} Redirect\r\nLocation: {location}\r\n\r\n".encode()
    return Response(head, request=request)


class TestRequestInit:
    """Tests for Request construction."""

    def test_resolved_parts(self):
        """Scheme, host, port and path come from the URL."""
        req = Request("get", "https://example.com:8443/a?b=c")

        assert req.method == "GET"
        assert req.scheme == "https"
        assert req.host == "example.com"
        assert req.port == 8443
        assert req.path == "/a?b=c"

    def test_str_body_encoded(self):
        """String bodies are encoded as UTF-8."""
        req = Request("POST", "http://example.com/", body="héllo")

        assert req.body == "héllo".encode("utf-8")

    def test_headers_copied(self):
        """A Headers argument is copied, not shared."""
        headers = Headers({"X-A": "1"})
        req = Request("GET", "http://example.com/", headers=headers)
        req.headers["X-B"] = "2"

        assert "X-B" not in headers

    def test_repr(self):
        """repr shows method and URL."""
        assert repr(Request("GET", "http://example.com/")) == (
            "<Request [GET http://example.com/]>"
        )


class TestBuild:
    """Tests for Request.build()."""

    def test_request_line_and_host(self):
        """Origin-form target, Host first, blank line at the end."""
        raw = Request("GET", "http://example.com/path?q=1").build()

        assert raw == b"GET /path?q=1 HTTP/1.1\r\nHost: example.com\r\n\r\n"

    def test_host_includes_non_default_port(self):
        """Host carries a non-default port."""
        raw = Request("GET", "http://example.com:8080/").build()

        assert b"Host: example.com:8080\r\n" in raw

    def test_absolute_target_for_proxy(self):
        """Proxies receive the absolute URL as target."""
        raw = Request("GET", "http://example.com/x").build(absolute_target=True)

        assert raw.startswith(b"GET http://example.com/x HTTP/1.1\r\n")

    def test_headers_and_body(self):
        """Headers in order, Content-Length added, body appended."""
        req = Request(
            "POST",
            "http://example.com/echo",
            headers={"Content-Type": "text/plain", "Connection": "close"},
            body=b"data",
        )

        raw = req.build()

        assert raw == (
            b"POST /echo HTTP/1.1\r\n"
            b"Host: example.com\r\n"
            b"Content-Type: text/plain\r\n"
            b"Connection: close\r\n"
            b"Content-Length: 4\r\n"
            b"\r\n"
            b"data"
        )

    def test_explicit_host_overrides(self):
        """A caller-supplied Host replaces the computed one."""
        raw = Request("GET", "http://10.0.0.1/", headers={"host": "virtual"}).build()

        assert raw.count(b"Host:") == 1
        assert b"Host: virtual\r\n" in raw

    def test_build_does_not_mutate_headers(self):
        """Serialization leaves the request's headers untouched."""
        req = Request("POST", "http://example.com/", body=b"x")
        req.build()

        assert list(req.headers) == []

    @pytest.mark.parametrize(
        "name,value",
        [("X-Bad", "a\r\nInjected: 1"), ("X-Bad\n", "v"), ("X-Null", "a\x00b")],
    )
    def test_header_injection_rejected(self, name, value):
        """CR, LF and NUL in headers are refused."""
        with pytest.raises(ValueError):
            Request("GET", "http://example.com/", headers={name: value}).build()


class TestRedirect:
    """Tests for Request.redirect()."""

    def test_relative_location(self):
        """Relative targets resolve against the current URL."""
        req = Request("GET", "http://example.com/a/b")

        new = req.redirect(make_redirect(302, "c", req))

        assert str(new.url) == "http://example.com/a/c"
        assert new.method == "GET"

    @pytest.mark.parametrize("status", [301, 302, 303])
    def test_post_becomes_get(self, status):
        """301/302/303 turn POST into a bodiless GET."""
        req = Request(
            "POST",
            "http://example.com/form",
            headers={"Content-Type": "text/plain", "X-Keep": "1"},
            body=b"payload",
        )

        new = req.redirect(make_redirect(status, "/done", req))

        assert new.method == "GET"
        assert new.body is None
        assert "Content-Type" not in new.headers
        assert new.headers["X-Keep"] == "1"

    @pytest.mark.parametrize("status", [307, 308])
    def test_method_and_body_preserved(self, status):
        """307/308 keep the method and body."""
        req = Request("PUT", "http://example.com/r", body=b"payload")

        new = req.redirect(make_redirect(status, "/r2", req))

        assert new.method == "PUT"
        assert new.body == b"payload"

    def test_head_stays_head(self):
        """HEAD is never rewritten."""
        req = Request("HEAD", "http://example.com/")

        assert req.redirect(make_redirect(303, "/x", req)).method == "HEAD"

    def test_per_hop_headers_dropped(self):
        """Cookie and Proxy-Authorization are recomputed for the next hop."""
        req = Request(
            "GET",
            "http://example.com/",
            headers={"Cookie": "a=b", "Proxy-Authorization": "Basic x", "X-A": "1"},
        )

        new = req.redirect(make_redirect(302, "/next", req))

        assert "Cookie" not in new.headers
        assert "Proxy-Authorization" not in new.headers
        assert new.headers["X-A"] == "1"

    def test_authorization_dropped_across_hosts(self):
        """Credentials do not follow a redirect to another host."""
        req = Request(
            "GET", "http://example.com/", headers={"Authorization": "Basic x"}
        )

        other = req.redirect(make_redirect(302, "http://evil.example.org/", req))
        same = req.redirect(make_redirect(302, "/elsewhere", req))

        assert "Authorization" not in other.headers
        assert same.headers["Authorization"] == "Basic x"

    def test_original_untouched(self):
        """Deriving a redirect does not mutate the original request."""
        req = Request(
            "POST", "http://example.com/", headers={"Cookie": "a=b"}, body=b"x"
        )

        req.redirect(make_redirect(303, "/y", req))

        assert req.method == "POST"
        assert req.headers["Cookie"] == "a=b"
        assert req.body == b"x"
