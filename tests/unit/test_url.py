"""tests/unit/test_url.py"""

import pytest

from courier.exceptions import RequestError
from courier.http.url import URL


class TestURL:
    """Tests for URL parsing."""

    def test_http_defaults(self):
        """Default port and path for http."""
        url = URL("http://example.com")

        assert url.scheme == "http"
        assert url.host == "example.com"
        assert url.port == 80
        assert url.path == "/"
        assert url.target == "/"

    def test_https_default_port(self):
        """https defaults to 443."""
        assert URL("https://example.com/a").port == 443

    def test_explicit_port_and_query(self):
        """Ports and query strings are preserved."""
        url = URL("http://example.com:8080/search?q=1&x=2")

        assert url.port == 8080
        assert url.target == "/search?q=1&x=2"
        assert url.host_header == "example.com:8080"
        assert url.absolute == "http://example.com:8080/search?q=1&x=2"

    def test_host_header_omits_default_port(self):
        """No port in the Host header when it is the default."""
        assert URL("https://example.com:443/").host_header == "example.com"

    def test_ipv6_host_header(self):
        """IPv6 literals are bracketed again in Host."""
        assert URL("http://[::1]:8000/").host_header == "[::1]:8000"

    def test_scheme_case_insensitive(self):
        """Schemes are normalised to lower case."""
        assert URL("HTTP://example.com/").scheme == "http"

    @pytest.mark.parametrize(
        "raw",
        ["ftp://example.com/", "example.com/path", "http:///nohost", "http://h:99999/"],
    )
    def test_unusable_urls(self, raw):
        """Unsupported schemes, missing hosts and bad ports raise RequestError."""
        with pytest.raises(RequestError):
            URL(raw)

    def test_join(self):
        """Relative and absolute locations resolve against the URL."""
        url = URL("http://example.com/a/b?x=1")

        assert url.join("/c") == "http://example.com/c"
        assert url.join("d") == "http://example.com/a/d"
        assert url.join("https://other.org/") == "https://other.org/"

    def test_str(self):
        """str() gives the URL as written."""
        assert str(URL("http://example.com/x")) == "http://example.com/x"
