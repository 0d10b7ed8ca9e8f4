"""Handler signature validation for strict mode."""

from __future__ import annotations

import inspect
from typing import Any, get_type_hints


def validate_handler_signature(func: Any, pattern: str, scheme: str) -> None:
    """Validate a route handler at registration time.

    Raises :class:`TypeError` with an actionable message when the handler
    violates strict-mode rules.
    """
    if not callable(func):
        raise TypeError(f"Route handler for [{scheme} {pattern}] must be callable, got {func!r}")

    name = getattr(func, "__name__", repr(func))
    target = func if inspect.isroutine(func) else type(func).__call__
    hints = get_type_hints(target)
    sig = inspect.signature(func)

    # --- Rule 1: Handler takes exactly one parameter mapping ---
    positional = [
        p
        for p in sig.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
    ]
    has_varargs = any(p.kind is p.VAR_POSITIONAL for p in sig.parameters.values())
    if len(positional) > 1 or (not positional and not has_varargs):
        raise TypeError(
            f"\n\nStrict-mode violation in handler '{name}' "
            f"[{scheme} {pattern}]\n"
            f"  Problem: Handler must accept exactly one positional argument "
            f"(the parameters mapping), found {len(positional)}.\n"
            f"  Fix:     def {name}(parameters: dict[str, str]) -> bool: ...\n"
        )

    # --- Rule 2: Return type annotation must exist ---
    ret = hints.get("return")
    if ret is None:
        raise TypeError(
            f"\n\nStrict-mode violation in handler '{name}' "
            f"[{scheme} {pattern}]\n"
            f"  Problem: Missing return type annotation.\n"
            f"  Fix:     Add -> bool; return True to accept the URL, False to decline.\n"
        )

    # --- Rule 3: Return type must be bool ---
    if ret is not bool:
        raise TypeError(
            f"\n\nStrict-mode violation in handler '{name}' "
            f"[{scheme} {pattern}]\n"
            f"  Current: -> {ret.__name__ if isinstance(ret, type) else ret!r}\n"
            f"  Problem: Return type must be bool.\n"
            f"  Fix:     Use -> bool; truthy values are not accepted as a result.\n"
        )
