"""
URL normalization and resolution helpers for SiteCrawl.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from site_crawl.errors import MalformedAddressError

__all__ = ("normalize_url", "host_key", "resolve_url")

_DEFAULT_PORTS = {"http": 80, "https": 443, "ftp": 21, "ws": 80, "wss": 443}
_WEB_SCHEMES = ("http", "https")
# port of the scheme-neutral key; "http://" + key must map back to key
_NEUTRAL_PORT = 80


def _strip_www(host: str) -> str:
    return host[4:] if host.startswith("www.") else host


def _ascii_host(url: str, host: str) -> str:
    """IDNA-encode a Unicode host so it matches the punycode form of the seed."""
    if host.isascii():
        return host
    try:
        return host.encode("idna").decode("ascii")
    except UnicodeError as exc:
        raise MalformedAddressError(url, f"invalid host: {exc}") from exc


def normalize_url(url: str) -> str:
    """
    Canonical dedup key for *url*: ``host[:port]/path[?query]``.

    Drops scheme, credentials, a leading ``www.``, the fragment and trailing
    slashes; lower-cases the host and sorts query parameters by key.
    Addresses without an authority (``data:``, ``mailto:``) come back unchanged.
    """
    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except (ValueError, AttributeError) as exc:
        raise MalformedAddressError(str(url), str(exc)) from exc
    scheme = parts.scheme.lower()
    if not scheme:
        raise MalformedAddressError(url, "missing scheme")
    if not parts.netloc:
        if scheme in _WEB_SCHEMES:
            raise MalformedAddressError(url, "missing host")
        return url

    host = _strip_www(_ascii_host(url, parts.hostname or ""))
    if not host and scheme in _WEB_SCHEMES:
        raise MalformedAddressError(url, "missing host")
    if ":" in host:
        host = f"[{host}]"
    if port is not None and port not in (_DEFAULT_PORTS.get(scheme), _NEUTRAL_PORT):
        host = f"{host}:{port}"

    path = parts.path.rstrip("/")
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.sort(key=lambda kv: kv[0])
    key = host + path
    if query:
        key += "?" + urlencode(query)
    return key


def host_key(url: str) -> str:
    """Lower-cased ASCII (punycode) host without ``www.``, or ``""`` when *url* has none."""
    try:
        host = urlsplit(url).hostname
    except ValueError as exc:
        raise MalformedAddressError(url, str(exc)) from exc
    return _strip_www(_ascii_host(url, host or ""))


def resolve_url(base: str, ref: str) -> Optional[str]:
    """Resolve *ref* against *base*; ``None`` if the result cannot be parsed."""
    try:
        parts = urlsplit(urljoin(base, ref.strip()))
        parts.port  # raises ValueError on a non-numeric port
    except ValueError:
        return None
    if parts.scheme in _WEB_SCHEMES and parts.netloc and not parts.path:
        parts = parts._replace(path="/")
    return urlunsplit(parts)
