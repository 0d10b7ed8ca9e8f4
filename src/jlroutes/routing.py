"""Route table, matcher and dispatcher.

Entries are kept per scheme in priority order (highest first, then
registration order). Entries registered for the global scheme ``"*"``
are candidates for every URL and are tried after the concrete scheme's
entries of the same priority.
"""

from __future__ import annotations

import bisect
import itertools
import logging
import threading
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from jlroutes.pattern import WILDCARD_KEY, Literal, Parameter, RoutePattern, Wildcard, compile_pattern
from jlroutes.request import ParsedURL, decode_component

GLOBAL_SCHEME = "*"

Handler = Callable[[dict[str, str]], bool]

logger = logging.getLogger("jlroutes.router")


@dataclass(frozen=True, slots=True, eq=False)
class RouteEntry:
    """A registered route. Handles compare by identity."""

    scheme: str
    pattern: RoutePattern
    priority: int
    handler: Handler
    sequence: int = field(default=0, repr=False)

    @property
    def is_global(self) -> bool:
        return self.scheme == GLOBAL_SCHEME

    def sort_key(self) -> tuple[int, int]:
        return (-self.priority, self.sequence)

    def describe(self) -> str:
        name = getattr(self.handler, "__name__", repr(self.handler))
        return f"{self.pattern.source} (priority: {self.priority}, handler: {name})"


@dataclass(frozen=True, slots=True)
class MatchResult:
    matched: bool
    parameters: dict[str, str] = field(default_factory=dict)


def normalize_scheme(scheme: str) -> str:
    if not isinstance(scheme, str) or not scheme:
        msg = f"Route scheme must be a non-empty string, got {scheme!r}"
        raise ValueError(msg)
    return scheme.lower()


class RouteTable:
    """Ordered, lock-guarded collection of :class:`RouteEntry` values.

    Usage::

        table = RouteTable()
        entry = table.register("myapp", "/user/:id", 0, handler)
        entry, result = match(table, parse_url("myapp:/user/42"))
        table.deregister(entry)
    """

    __slots__ = ("_counter", "_entries", "_lock")

    def __init__(self) -> None:
        self._entries: dict[str, list[RouteEntry]] = {}
        self._counter = itertools.count()
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def register(
        self,
        scheme: str,
        pattern: str | RoutePattern,
        priority: int,
        handler: Handler,
    ) -> RouteEntry:
        """Compile *pattern* and insert a new entry; return it as a handle."""
        scheme = normalize_scheme(scheme)
        compiled = pattern if isinstance(pattern, RoutePattern) else compile_pattern(pattern)
        with self._lock:
            entry = RouteEntry(
                scheme=scheme,
                pattern=compiled,
                priority=priority,
                handler=handler,
                sequence=next(self._counter),
            )
            entries = self._entries.setdefault(scheme, [])
            keys = [e.sort_key() for e in entries]
            entries.insert(bisect.bisect_right(keys, entry.sort_key()), entry)
        return entry

    def deregister(self, entry: RouteEntry) -> bool:
        """Remove *entry*. Returns ``False`` if it is not registered."""
        with self._lock:
            entries = self._entries.get(entry.scheme)
            if not entries:
                return False
            for index, candidate in enumerate(entries):
                if candidate is entry:
                    del entries[index]
                    if not entries:
                        del self._entries[entry.scheme]
                    return True
        return False

    def remove(self, pattern: str, scheme: str = GLOBAL_SCHEME) -> int:
        """Remove every entry of *scheme* registered with *pattern*."""
        scheme = normalize_scheme(scheme)
        with self._lock:
            entries = self._entries.get(scheme, [])
            kept = [e for e in entries if e.pattern.source != pattern]
            removed = len(entries) - len(kept)
            if kept:
                self._entries[scheme] = kept
            else:
                self._entries.pop(scheme, None)
        return removed

    def clear(self, scheme: str | None = None) -> None:
        with self._lock:
            if scheme is None:
                self._entries.clear()
            else:
                self._entries.pop(normalize_scheme(scheme), None)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def schemes(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def entries(self, scheme: str | None = None) -> list[RouteEntry]:
        """Return a snapshot of registered entries, in table order."""
        with self._lock:
            if scheme is not None:
                return list(self._entries.get(normalize_scheme(scheme), []))
            return [e for entries in self._entries.values() for e in entries]

    def candidates(self, scheme: str) -> list[RouteEntry]:
        """Snapshot of the entries to try for a URL of *scheme*, in order.

        Concrete-scheme and global entries are merged by priority; within a
        priority the concrete scheme goes first, then registration order.
        """
        scheme = scheme.lower()
        with self._lock:
            concrete = list(self._entries.get(scheme, [])) if scheme != GLOBAL_SCHEME else []
            fallback = list(self._entries.get(GLOBAL_SCHEME, []))
        return sorted(concrete + fallback, key=lambda e: (-e.priority, e.is_global, e.sequence))

    def __len__(self) -> int:
        with self._lock:
            return sum(len(entries) for entries in self._entries.values())

    def __contains__(self, entry: object) -> bool:
        if not isinstance(entry, RouteEntry):
            return False
        with self._lock:
            return any(e is entry for e in self._entries.get(entry.scheme, []))


# ----------------------------------------------------------------------
# Matching
# ----------------------------------------------------------------------


def match_pattern(pattern: RoutePattern, url: ParsedURL) -> MatchResult:
    """Compare *pattern* positionally against the URL's path segments."""
    segments = url.path_segments
    bindings: dict[str, str] = {}

    for index, segment in enumerate(pattern.segments):
        if isinstance(segment, Wildcard):
            bindings[WILDCARD_KEY] = "/".join(segments[index:])
            break
        if index >= len(segments):
            return MatchResult(matched=False)
        if isinstance(segment, Literal):
            if decode_component(segment.value, decode_plus=url.decode_plus) != segments[index]:
                return MatchResult(matched=False)
        elif isinstance(segment, Parameter):
            bindings[segment.name] = segments[index]
    else:
        if len(segments) != len(pattern.segments):
            return MatchResult(matched=False)

    return MatchResult(matched=True, parameters={**url.query, **bindings})


def iter_matches(table: RouteTable, url: ParsedURL) -> Iterator[tuple[RouteEntry, MatchResult]]:
    """Yield ``(entry, result)`` for each matching candidate, in table order."""
    for entry in table.candidates(url.scheme):
        result = match_pattern(entry.pattern, url)
        if result.matched:
            yield entry, result


def match(table: RouteTable, url: ParsedURL) -> tuple[RouteEntry | None, MatchResult]:
    """Return the first matching entry and its result, or a failed result."""
    for entry, result in iter_matches(table, url):
        return entry, result
    return None, MatchResult(matched=False)


# ----------------------------------------------------------------------
# Dispatch
# ----------------------------------------------------------------------


def call_handler(entry: RouteEntry, parameters: dict[str, str]) -> bool:
    """Invoke *entry*'s handler and insist on an explicit ``bool`` result."""
    accepted = entry.handler(parameters)
    if not isinstance(accepted, bool):
        name = getattr(entry.handler, "__name__", repr(entry.handler))
        msg = (
            f"Handler {name!r} for {entry.pattern.source!r} must return bool "
            f"(True to accept, False to decline), got {type(accepted).__name__}"
        )
        raise TypeError(msg)
    return accepted


def dispatch(
    table: RouteTable,
    url: ParsedURL,
    parameters: Mapping[str, Any] | None = None,
    *,
    metadata: bool = False,
    verbose: bool = False,
) -> bool:
    """Invoke handlers of matching entries until one accepts.

    *parameters* are extra values supplied by the caller; match bindings
    and query values take precedence over them. Returns ``False`` when no
    entry matches or every matching handler declines.
    """
    extra = dict(parameters or {})
    for entry, result in iter_matches(table, url):
        final = {**extra, **result.parameters}
        if metadata:
            final.setdefault("route_pattern", entry.pattern.source)
            final.setdefault("route_url", url.url)
            final.setdefault("route_scheme", entry.scheme)
        if verbose:
            logger.debug("Candidate %s matched %r with %r", entry.describe(), url.url, final)
        if call_handler(entry, final):
            logger.debug("Routed %r to %s", url.url, entry.pattern.source)
            return True
        if verbose:
            logger.debug("Handler for %s declined, continuing", entry.pattern.source)

    logger.debug("No route handled %r", url.url)
    return False
