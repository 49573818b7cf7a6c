from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

_TRACKING_QUERY_PARAMS = {
    "fbclid",
    "gclid",
    "igshid",
    "mc_cid",
    "mc_eid",
    "mkt_tok",
    "ref",
    "ref_content",
    "ref_feature",
    "ref_medium",
}
_DEFAULT_PORTS = {"http": 80, "https": 443}


def canonicalize_url(url: str) -> str:
    """Key form of a listing url.

    Scheme and host are lowercased, default ports and fragments dropped, and
    campaign parameters removed. The path is kept as published, so
    ``https://x.devpost.com/`` and ``https://x.devpost.com/project/`` keep
    their trailing slashes.
    """
    parsed = urlsplit((url or "").strip())
    if not parsed.scheme or not parsed.hostname:
        return (url or "").strip()

    scheme = parsed.scheme.lower()
    host = parsed.hostname
    if parsed.port and parsed.port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{parsed.port}"

    query = urlencode(
        [
            (key, value)
            for key, value in parse_qsl(parsed.query, keep_blank_values=True)
            if not _is_tracking_param(key)
        ]
    )
    return urlunsplit((scheme, host, parsed.path or "/", query, ""))


def _is_tracking_param(key: str) -> bool:
    lowered = key.lower()
    return lowered.startswith("utm_") or lowered in _TRACKING_QUERY_PARAMS


def resolve_listing_url(raw_url: object, base_url: str) -> str:
    """Return the canonical absolute url for a listing, or "" when none can be resolved."""
    if not isinstance(raw_url, str):
        return ""

    value = raw_url.strip()
    if not value:
        return ""

    if value.startswith("//"):
        value = f"https:{value}"
    elif not value.startswith(("http://", "https://")):
        value = urljoin(base_url, value)

    parsed = urlsplit(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        return ""
    try:
        return canonicalize_url(value)
    except ValueError:
        # malformed port
        return ""


def site_root(url: str) -> str:
    parsed = urlsplit(url)
    if not parsed.scheme or not parsed.netloc:
        return url
    return urlunsplit((parsed.scheme, parsed.netloc, "/", "", ""))
