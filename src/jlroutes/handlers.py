"""Helpers for building route handlers around objects.

Useful when a separate object or class should handle a deep link,
e.g. a screen or controller that is created in response to a route.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ValidationError

logger = logging.getLogger("jlroutes.handlers")

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


@runtime_checkable
class RouteHandlerTarget(Protocol):
    """Objects that can handle a matched route."""

    def handle_route(self, parameters: dict[str, Any]) -> bool:
        """Return ``True`` if handled, ``False`` to let matching continue."""
        ...


def handler_for_weak_target(target: RouteHandlerTarget) -> Callable[[dict[str, Any]], bool]:
    """Return a handler that forwards to *target* without keeping it alive.

    Once the target is garbage collected the handler declines every match;
    the route itself stays registered until it is removed.
    """
    ref = weakref.ref(target)

    def handler(parameters: dict[str, Any]) -> bool:
        obj = ref()
        if obj is None:
            logger.debug("Weak route target is gone, declining")
            return False
        return obj.handle_route(parameters)

    handler.__name__ = f"weak:{type(target).__name__}"
    return handler


def handler_for_target_class(
    target_class: type[T],
    completion: Callable[[T], None],
) -> Callable[[dict[str, Any]], bool]:
    """Return a handler that creates a new *target_class* per match.

    The created object handles the route and is then passed to
    *completion*; the router does not keep a reference to it.
    """
    if not issubclass(target_class, RouteHandlerTarget):
        msg = f"{target_class.__name__} must define handle_route(parameters) -> bool"
        raise TypeError(msg)

    def handler(parameters: dict[str, Any]) -> bool:
        obj = target_class()
        handled = obj.handle_route(parameters)
        completion(obj)
        return handled

    handler.__name__ = f"create:{target_class.__name__}"
    return handler


def handler_for_model(
    model: type[M],
    callback: Callable[[M], bool],
) -> Callable[[dict[str, Any]], bool]:
    """Return a handler that validates route parameters into *model*.

    Parameters that fail validation decline the match so that a later
    route can take the URL.
    """

    def handler(parameters: dict[str, Any]) -> bool:
        try:
            instance = model.model_validate(parameters)
        except ValidationError as exc:
            logger.debug("Parameters rejected by %s: %s", model.__name__, exc)
            return False
        return callback(instance)

    handler.__name__ = f"model:{model.__name__}"
    return handler
