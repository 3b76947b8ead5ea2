"""
Tests for URL input normalisation (siteguard/services/url_input.py) and the
AnalyzeRequest schema that wraps it (siteguard/models/schemas.py).

Covers: scheme normalisation, bare IPv6 and host:port input, the
configurable max-length guard, hostname check, whitespace stripping and
unsupported scheme rejection.
"""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from siteguard.core.errors import InvalidURLError
from siteguard.models.schemas import AnalyzeRequest
from siteguard.services.url_input import is_secure_scheme, normalize_url


def _v(url: str) -> str:
    """Validate through the request schema and return the normalised URL."""
    return AnalyzeRequest(url=url).url


# ── valid inputs ──────────────────────────────────────────────

def test_https_url_passes_unchanged():
    assert _v("https://example.com") == "https://example.com"


def test_http_url_passes_unchanged():
    assert _v("http://example.com/path") == "http://example.com/path"


def test_bare_domain_gets_https_prepended():
    assert _v("example.com") == "https://example.com"


def test_bare_domain_with_port_gets_https():
    assert _v("example.com:8443/login") == "https://example.com:8443/login"


def test_whitespace_is_stripped():
    assert _v("  https://example.com  ") == "https://example.com"


def test_query_and_fragment_preserved():
    url = "https://example.com/search?q=hello+world#top"
    assert _v(url) == url


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("[::1]", "https://[::1]"),
        ("[2001:db8::1]/path", "https://[2001:db8::1]/path"),
        ("[2001:db8::1]:8443/login", "https://[2001:db8::1]:8443/login"),
        ("localhost:8080", "https://localhost:8080"),
        ("203.0.113.5:443", "https://203.0.113.5:443"),
    ],
)
def test_bare_host_with_colon_is_not_a_scheme(raw: str, expected: str):
    assert _v(raw) == expected


def test_length_limit_follows_settings():
    long_url = "https://example.com/" + "a" * 3000
    with patch("siteguard.services.url_input.settings.MAX_URL_LENGTH", 4096):
        assert _v(long_url) == long_url
    with patch("siteguard.services.url_input.settings.MAX_URL_LENGTH", 100):
        with pytest.raises(ValidationError):
            _v("https://example.com/" + "a" * 200)


# ── invalid inputs ────────────────────────────────────────────

@pytest.mark.parametrize(
    "url",
    [
        "ftp://example.com",
        "javascript://evil.com",
        "javascript:alert(1)",
        "mailto:someone@example.com",
        "data:text/html,<script>alert(1)</script>",
    ],
)
def test_unsupported_scheme_rejected(url: str):
    with pytest.raises(ValidationError) as exc:
        _v(url)
    assert "Unsupported scheme" in str(exc.value)


def test_url_too_long_rejected():
    with pytest.raises(ValidationError):
        _v("https://example.com/" + "a" * 2100)


def test_empty_string_rejected():
    with pytest.raises(ValidationError):
        _v("")


def test_whitespace_only_rejected():
    with pytest.raises(ValidationError):
        _v("   ")


@pytest.mark.parametrize(
    "url",
    [
        "https://", "http:///path", "https://exa mple.com", "https://[::1",
        "https://example.com:99999", "[::1", "example.com:notaport",
    ],
)
def test_unparseable_url_raises_invalid_url_error(url: str):
    with pytest.raises(InvalidURLError):
        normalize_url(url)


def test_invalid_url_error_is_value_error():
    assert issubclass(InvalidURLError, ValueError)


# ── is_secure_scheme ──────────────────────────────────────────

def test_is_secure_scheme():
    assert is_secure_scheme("https://example.com") is True
    assert is_secure_scheme("HTTPS://example.com") is True
    assert is_secure_scheme("http://example.com") is False
