"""Route pattern compilation.

A pattern such as ``/user/:id/*`` is split on ``/`` into an immutable
sequence of segments:

    "user" -> Literal("user")
    ":id"  -> Parameter("id")
    "*"    -> Wildcard()

Literal segments are kept exactly as written. Percent-decoding is applied
while matching, to the pattern and to the URL alike.
"""

from __future__ import annotations

from dataclasses import dataclass

from jlroutes.errors import InvalidPatternError

WILDCARD_KEY = "wildcard"


@dataclass(frozen=True, slots=True)
class Literal:
    value: str


@dataclass(frozen=True, slots=True)
class Parameter:
    name: str


@dataclass(frozen=True, slots=True)
class Wildcard:
    pass


Segment = Literal | Parameter | Wildcard


@dataclass(frozen=True, slots=True)
class RoutePattern:
    """A compiled route pattern. Immutable once built."""

    source: str
    segments: tuple[Segment, ...]

    @property
    def has_wildcard(self) -> bool:
        return bool(self.segments) and isinstance(self.segments[-1], Wildcard)

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.segments if isinstance(s, Parameter))

    def __str__(self) -> str:
        return self.source


def compile_pattern(pattern: str) -> RoutePattern:
    """Compile *pattern* into a :class:`RoutePattern`.

    Raises :class:`InvalidPatternError` when the pattern is empty, when a
    wildcard is not the final segment, or when a parameter is unnamed or
    declared twice.
    """
    if not isinstance(pattern, str):
        raise InvalidPatternError(pattern, "pattern must be a string")
    if not pattern:
        raise InvalidPatternError(pattern, "pattern is empty")

    tokens = [t for t in pattern.split("/") if t]
    names: set[str] = set()
    segments: list[Segment] = []

    for index, token in enumerate(tokens):
        if token == "*":
            if index != len(tokens) - 1:
                raise InvalidPatternError(pattern, "'*' is only allowed as the final segment")
            segments.append(Wildcard())
        elif token.startswith(":"):
            name = token[1:]
            if not name:
                raise InvalidPatternError(pattern, "parameter segment has no name")
            if name in names:
                raise InvalidPatternError(pattern, f"duplicate parameter name {name!r}")
            names.add(name)
            segments.append(Parameter(name))
        else:
            segments.append(Literal(token))

    return RoutePattern(source=pattern, segments=tuple(segments))
