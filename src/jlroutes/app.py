"""jlroutes Router: registration and URL dispatch."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from jlroutes.config import RouterConfig
from jlroutes.request import ParsedURL, parse_url
from jlroutes.routing import (
    GLOBAL_SCHEME,
    Handler,
    RouteEntry,
    RouteTable,
    dispatch,
    iter_matches,
    normalize_scheme,
)
from jlroutes.validation import validate_handler_signature

logger = logging.getLogger("jlroutes.router")

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    UnmatchedURLHandler = Callable[[Router, str, dict[str, Any]], None]


class Router:
    """Maps URL patterns to handler callables.

    Parameters
    ----------
    config:
        A :class:`RouterConfig`. Keyword *overrides* are applied on top,
        e.g. ``Router(treat_host_as_path_component=True)``.
    table:
        An existing :class:`RouteTable` to share; a fresh one by default.
    """

    def __init__(
        self,
        config: RouterConfig | None = None,
        *,
        table: RouteTable | None = None,
        **overrides: Any,
    ) -> None:
        base = config or RouterConfig()
        if overrides:
            base = RouterConfig.model_validate({**base.model_dump(), **overrides})
        self.config = base
        self.table = table if table is not None else RouteTable()
        self.unmatched_url_handler: UnmatchedURLHandler | None = None

    # ------------------------------------------------------------------
    # Route registration
    # ------------------------------------------------------------------

    def register(self, scheme: str, pattern: str, priority: int, handler: Handler) -> RouteEntry:
        """Register *handler* for *pattern* under *scheme* and return its handle.

        ``"*"`` registers a global route, tried for every scheme.
        """
        if self.config.strict:
            validate_handler_signature(handler, pattern, scheme)
        elif not callable(handler):
            msg = f"Route handler for [{scheme} {pattern}] must be callable, got {handler!r}"
            raise TypeError(msg)
        entry = self.table.register(scheme, pattern, priority, handler)
        logger.debug("Registered %s for scheme %r", entry.describe(), entry.scheme)
        return entry

    def add_route(
        self,
        pattern: str,
        handler: Handler | None = None,
        *,
        scheme: str = GLOBAL_SCHEME,
        priority: int = 0,
    ) -> Any:
        """Register a route, or return a decorator when *handler* is omitted::

            @router.add_route("/user/:id", scheme="myapp")
            def show_user(parameters: dict[str, str]) -> bool:
                ...
        """
        if handler is not None:
            return self.register(scheme, pattern, priority, handler)

        def decorator(func: Handler) -> Handler:
            self.register(scheme, pattern, priority, func)
            return func

        return decorator

    def __setitem__(self, pattern: str, handler: Handler) -> None:
        self.add_route(pattern, handler)

    def for_scheme(self, scheme: str) -> SchemeRoutes:
        """Return a view whose registrations default to *scheme*."""
        return SchemeRoutes(self, normalize_scheme(scheme))

    def deregister(self, entry: RouteEntry) -> bool:
        """Remove a registered route. Returns ``False`` if already removed."""
        removed = self.table.deregister(entry)
        if removed:
            logger.debug("Deregistered %s for scheme %r", entry.describe(), entry.scheme)
        return removed

    def remove_route(self, pattern: str, scheme: str = GLOBAL_SCHEME) -> int:
        return self.table.remove(pattern, scheme)

    def remove_all_routes(self, scheme: str | None = None) -> None:
        self.table.clear(scheme)

    @property
    def routes(self) -> list[RouteEntry]:
        return self.table.entries()

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def parse(self, url: str) -> ParsedURL:
        return parse_url(
            url,
            decode_plus_symbols=self.config.decode_plus_symbols,
            treat_host_as_path_component=self.config.treat_host_as_path_component,
        )

    def route(self, url: str, parameters: Mapping[str, Any] | None = None) -> bool:
        """Route *url*, calling matching handlers until one returns ``True``.

        Returns ``False`` when nothing handled the URL; the
        ``unmatched_url_handler``, if set, is called in that case.
        Raises :class:`InvalidURLError` for malformed URLs.
        """
        parsed = self.parse(url)
        if self.config.verbose_logging:
            logger.debug(
                "Routing %r: scheme=%r segments=%r query=%r",
                url,
                parsed.scheme,
                parsed.path_segments,
                parsed.query,
            )

        handled = dispatch(
            self.table,
            parsed,
            parameters,
            metadata=self.config.include_route_metadata,
            verbose=self.config.verbose_logging,
        )
        if not handled and self.unmatched_url_handler is not None:
            self.unmatched_url_handler(self, url, dict(parameters or {}))
        return handled

    def can_route(self, url: str, parameters: Mapping[str, Any] | None = None) -> bool:
        """Return whether some registered route matches *url*.

        No handler is invoked. *parameters* is accepted for symmetry with
        :meth:`route` and does not affect matching.
        """
        parsed = self.parse(url)
        return any(True for _ in iter_matches(self.table, parsed))

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def describe(self) -> str:
        """Render the routing table, one block per scheme."""
        lines: list[str] = []
        for scheme in sorted(self.table.schemes, key=lambda s: (s == GLOBAL_SCHEME, s)):
            label = "Global routes" if scheme == GLOBAL_SCHEME else f"Routes for {scheme!r}"
            lines.append(f"{label}:")
            lines.extend(f"  {entry.describe()}" for entry in self.table.entries(scheme))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"Router(routes={len(self.table)})"


class SchemeRoutes:
    """A :class:`Router` view scoped to one URL scheme.

    Registrations land in the parent router's table under ``scheme``;
    routing goes through the parent, so global routes still apply.
    """

    __slots__ = ("router", "scheme")

    def __init__(self, router: Router, scheme: str) -> None:
        self.router = router
        self.scheme = scheme

    def add_route(self, pattern: str, handler: Handler | None = None, *, priority: int = 0) -> Any:
        return self.router.add_route(pattern, handler, scheme=self.scheme, priority=priority)

    def __setitem__(self, pattern: str, handler: Handler) -> None:
        self.add_route(pattern, handler)

    def remove_route(self, pattern: str) -> int:
        return self.router.remove_route(pattern, self.scheme)

    def remove_all_routes(self) -> None:
        self.router.remove_all_routes(self.scheme)

    @property
    def routes(self) -> list[RouteEntry]:
        return self.router.table.entries(self.scheme)

    def route(self, url: str, parameters: Mapping[str, Any] | None = None) -> bool:
        return self.router.route(url, parameters)

    def can_route(self, url: str, parameters: Mapping[str, Any] | None = None) -> bool:
        return self.router.can_route(url, parameters)

    def __repr__(self) -> str:
        return f"SchemeRoutes(scheme={self.scheme!r}, routes={len(self.routes)})"


# ------------------------------------------------------------------
# Process-wide default router
# ------------------------------------------------------------------

_global_router: Router | None = None
_global_lock = threading.Lock()


def global_routes() -> Router:
    """Return the lazily created process-wide :class:`Router`."""
    global _global_router
    with _global_lock:
        if _global_router is None:
            _global_router = Router()
        return _global_router
