"""URL normalization used as the thread store's primary key."""

from urllib.parse import unquote, urlsplit, urlunsplit

# Query parameters that only carry campaign/click tracking
TRACKING_PARAMS = frozenset(
    {
        "gclid",
        "dclid",
        "fbclid",
        "msclkid",
        "yclid",
        "igshid",
        "mc_cid",
        "mc_eid",
        "_ga",
        "_gl",
        "ref_src",
    }
)
TRACKING_PREFIXES = ("utm_",)

DEFAULT_PORTS = {"http": 80, "https": 443}


def _is_tracking_param(key: str) -> bool:
    key = unquote(key).lower()
    return key in TRACKING_PARAMS or key.startswith(TRACKING_PREFIXES)


def _normalize_query(query: str) -> str:
    pairs = [part for part in query.split("&") if part]
    kept = [part for part in pairs if not _is_tracking_param(part.split("=", 1)[0])]
    # sorted() is stable, so repeated keys keep their relative order
    kept.sort(key=lambda part: part.split("=", 1)[0])
    return "&".join(kept)


def strip_www(hostname: str) -> str:
    """Strip a single leading ``www.`` label."""
    return hostname[4:] if hostname.startswith("www.") else hostname


def normalize_url(url: str) -> str:
    """
    Canonicalize a URL so equivalent page addresses share one thread.

    Strips the fragment and tracking parameters, sorts the remaining query
    parameters, lowercases the scheme and host, strips a leading ``www.``,
    drops default ports and a single trailing slash from non-root paths.

    Args:
        url: Raw URL as seen by the browser

    Returns:
        Normalized URL, or the trimmed input if it cannot be parsed as a URL
    """
    raw = (url or "").strip()
    try:
        parts = urlsplit(raw)
        hostname = parts.hostname
        port = parts.port
    except ValueError:
        return raw

    if not parts.scheme or not hostname:
        return raw

    scheme = parts.scheme.lower()
    netloc = strip_www(hostname.lower())
    if ":" in netloc:
        netloc = f"[{netloc}]"
    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        netloc = f"{netloc}:{port}"

    path = parts.path or "/"
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]

    return urlunsplit((scheme, netloc, path, _normalize_query(parts.query), ""))


def filename_domain(url: str) -> str:
    """
    Get the hostname used to prefix thread filenames.

    Raises:
        ValueError: If the URL has no hostname
    """
    hostname = urlsplit(url.strip()).hostname
    if not hostname:
        raise ValueError(f"URL has no hostname: {url!r}")
    return strip_www(hostname.lower())
