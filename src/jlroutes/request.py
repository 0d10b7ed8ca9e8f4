"""URL decomposition for routing."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import unquote, unquote_plus, urlsplit

from jlroutes.errors import InvalidURLError


@dataclass(frozen=True, slots=True)
class ParsedURL:
    """An incoming URL split into the pieces the matcher works on.

    ``path_segments`` are percent-decoded and never empty strings.
    ``query`` keeps the last value for repeated keys.
    """

    url: str
    scheme: str
    host: str
    path_segments: tuple[str, ...]
    query: dict[str, str] = field(default_factory=dict)
    decode_plus: bool = True


def decode_component(value: str, *, decode_plus: bool = True) -> str:
    """Percent-decode *value*, optionally turning ``+`` into a space."""
    if decode_plus:
        return unquote_plus(value)
    return unquote(value)


def parse_query(query: str, *, decode_plus: bool = True) -> dict[str, str]:
    """Parse a raw query string into a flat ``str -> str`` mapping.

    Keys without ``=`` map to ``""``; the last occurrence of a key wins.
    """
    params: dict[str, str] = {}
    for pair in query.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        key = decode_component(key, decode_plus=decode_plus)
        if not key:
            continue
        params[key] = decode_component(value, decode_plus=decode_plus)
    return params


def parse_url(
    url: str,
    *,
    decode_plus_symbols: bool = True,
    treat_host_as_path_component: bool = False,
) -> ParsedURL:
    """Split *url* into scheme, host, decoded path segments and query.

    Raises :class:`InvalidURLError` for non-string or empty input, URLs
    without a scheme, and URLs whose authority cannot be parsed.
    """
    if not isinstance(url, str):
        raise InvalidURLError(url, "URL must be a string")
    if not url.strip():
        raise InvalidURLError(url, "URL is empty")

    try:
        parts = urlsplit(url.strip())
        host = parts.hostname or ""
    except ValueError as exc:
        raise InvalidURLError(url, str(exc)) from exc

    if not parts.scheme:
        raise InvalidURLError(url, "URL has no scheme")

    # Split before decoding so an encoded "/" stays inside its segment.
    segments = [
        decode_component(raw, decode_plus=decode_plus_symbols)
        for raw in parts.path.split("/")
        if raw
    ]
    if treat_host_as_path_component:
        host_segment = _raw_host(parts.netloc)
        if host_segment:
            segments.insert(0, decode_component(host_segment, decode_plus=decode_plus_symbols))

    return ParsedURL(
        url=url,
        scheme=parts.scheme.lower(),
        host=host,
        path_segments=tuple(segments),
        query=parse_query(parts.query, decode_plus=decode_plus_symbols),
        decode_plus=decode_plus_symbols,
    )


def _raw_host(netloc: str) -> str:
    """Return the host part of *netloc* as written, without userinfo or port."""
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        return host.partition("]")[0] + "]"
    return host.partition(":")[0]
