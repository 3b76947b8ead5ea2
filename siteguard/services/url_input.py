"""URL normalisation and fail-fast validation of user input."""

import re
from urllib.parse import urlparse

from siteguard.core.config import settings
from siteguard.core.errors import InvalidURLError

# RFC 3986 scheme token; anything else before a ':' is part of the host.
_SCHEME_TOKEN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")


def normalize_url(raw: str) -> str:
    """
    Strip whitespace, prepend https:// when no scheme is given and make sure
    the result parses with a hostname. Raises InvalidURLError otherwise.
    """
    if not isinstance(raw, str):
        raise InvalidURLError("URL must be a string")

    v = raw.strip()
    if not v:
        raise InvalidURLError("Please enter a website URL")
    if len(v) > settings.MAX_URL_LENGTH:
        raise InvalidURLError(f"URL exceeds maximum length of {settings.MAX_URL_LENGTH}")
    if any(ch.isspace() for ch in v):
        raise InvalidURLError("URL must not contain whitespace")

    if not any(v.lower().startswith(f"{s}://") for s in settings.ALLOWED_SCHEMES):
        if "://" in v:
            scheme = v.split("://")[0].lower()
            raise InvalidURLError(
                f"Unsupported scheme '{scheme}'. Allowed: {settings.ALLOWED_SCHEMES}"
            )
        scheme = _leading_scheme(v)
        if scheme is not None:
            # "javascript:alert(1)", "data:text/html,..." and friends
            raise InvalidURLError(
                f"Unsupported scheme '{scheme}'. Allowed: {settings.ALLOWED_SCHEMES}"
            )
        v = f"https://{v}"

    try:
        parsed = urlparse(v)
        hostname = parsed.hostname
        parsed.port  # raises on a non-numeric or out-of-range port
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL format: {e}") from e

    if not parsed.netloc or not hostname:
        raise InvalidURLError("Invalid URL: no hostname found")

    return v


def _leading_scheme(v: str) -> str | None:
    """
    Scheme of a scheme-only URI such as 'mailto:x@y', or None when the
    input is a bare host: 'example.com:8080/path', '[::1]', '[2001:db8::1]:443'.
    """
    host_part = v.split("/", 1)[0]
    if ":" not in host_part or host_part.startswith("["):
        return None
    prefix, _, rest = host_part.partition(":")
    if not _SCHEME_TOKEN.match(prefix):
        return None
    _, _, port = host_part.rpartition(":")
    if port.isdigit() and rest == port:
        return None
    return prefix.lower()


def is_secure_scheme(url: str) -> bool:
    return urlparse(url).scheme.lower() in settings.SECURE_SCHEMES
