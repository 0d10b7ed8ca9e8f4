"""jlroutes exception hierarchy."""

from __future__ import annotations


class JLRoutesError(Exception):
    """Base for all jlroutes-specific errors."""


class InvalidPatternError(JLRoutesError, ValueError):
    """Raised at registration time when a route pattern cannot be compiled."""

    def __init__(self, pattern: object, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid route pattern {pattern!r}: {reason}")


class InvalidURLError(JLRoutesError, ValueError):
    """Raised when a URL handed to the router cannot be parsed.

    No match is attempted for such URLs.
    """

    def __init__(self, url: object, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL {url!r}: {reason}")
