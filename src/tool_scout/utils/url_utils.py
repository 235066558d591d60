"""URL parsing and normalization utilities."""
from typing import Optional
from urllib.parse import urlparse, urljoin, urldefrag
import re
import time


_SKIPPED_PREFIXES = ("#", "mailto:", "tel:", "javascript:", "data:")


def normalize_url(url: str) -> str:
    """
    Normalize a user supplied URL.

    Surrounding whitespace is removed and ``https://`` is prepended when the
    value has no http(s) scheme. Applying it twice is a no-op.

    Args:
        url: Raw URL string, scheme optional

    Returns:
        URL starting with ``http://`` or ``https://``
    """
    url = (url or "").strip()
    lowered = url.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return url
    return f"https://{url.lstrip('/')}"


def is_valid_url(url: str) -> bool:
    """
    Check if a URL has an http(s) scheme and a host.

    Args:
        url: URL string to validate

    Returns:
        True if URL is valid, False otherwise
    """
    try:
        result = urlparse(url)
        return result.scheme in ("http", "https") and bool(result.hostname)
    except ValueError:
        return False


def get_hostname(url: str) -> Optional[str]:
    """
    Extract the lower-cased hostname from a URL.

    Args:
        url: URL to extract hostname from

    Returns:
        Hostname or None if invalid URL
    """
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


def canonical_url(url: str) -> str:
    """
    Comparison key for a URL.

    Scheme and host are lower-cased, the fragment is dropped and an empty
    path becomes ``/``, so ``https://Example.com`` and
    ``https://example.com/#top`` share one key.
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return url
    return parsed._replace(
        scheme=parsed.scheme.lower(),
        netloc=parsed.netloc.lower(),
        path=parsed.path or "/",
        fragment=""
    ).geturl()


def resolve_link(base_url: str, href: Optional[str]) -> Optional[str]:
    """
    Resolve an ``href`` against the page it was found on.

    Fragment-only, mailto, tel, javascript and data links are dropped, as is
    anything that does not resolve to an http(s) URL. The fragment of the
    resolved URL is removed so ``/page`` and ``/page#top`` are one URL.

    Args:
        base_url: URL of the page holding the link
        href: Raw attribute value

    Returns:
        Absolute URL or None
    """
    if not href:
        return None
    href = href.strip()
    if not href or href.lower().startswith(_SKIPPED_PREFIXES):
        return None
    try:
        absolute, _fragment = urldefrag(urljoin(base_url, href))
    except ValueError:
        return None
    return absolute if is_valid_url(absolute) else None


def tool_name_from_url(url: str) -> str:
    """
    Derive a tool name from its domain (``www.foo-bar.ai`` -> ``foo-bar``).

    Falls back to a timestamped generic name for unparseable input.
    """
    host = get_hostname(url)
    if not host:
        return f"tool-{int(time.time() * 1000)}"
    return re.sub(r"^www\.", "", host).split(".")[0]


def sanitize_filename(name: str) -> str:
    """Replace anything but ASCII letters and digits with dashes, lower-cased."""
    return re.sub(r"[^a-z0-9]", "-", name, flags=re.IGNORECASE).lower()
