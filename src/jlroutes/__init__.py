"""URL pattern routing with accept/decline handler chains."""

__version__ = "0.1.0"

from jlroutes.app import Router, SchemeRoutes, global_routes
from jlroutes.config import RouterConfig
from jlroutes.errors import InvalidPatternError, InvalidURLError, JLRoutesError
from jlroutes.pattern import Literal, Parameter, RoutePattern, Wildcard, compile_pattern
from jlroutes.request import ParsedURL, parse_url
from jlroutes.routing import MatchResult, RouteEntry, RouteTable, dispatch, match

__all__ = [
    "InvalidPatternError",
    "InvalidURLError",
    "JLRoutesError",
    "Literal",
    "MatchResult",
    "Parameter",
    "ParsedURL",
    "RouteEntry",
    "RoutePattern",
    "RouteTable",
    "Router",
    "RouterConfig",
    "SchemeRoutes",
    "Wildcard",
    "compile_pattern",
    "dispatch",
    "global_routes",
    "match",
    "parse_url",
]
