"""jlroutes command-line interface powered by Typer."""

import importlib
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from jlroutes.app import Router
from jlroutes.errors import InvalidURLError

app = typer.Typer(name="jlroutes", add_completion=False, no_args_is_help=True)


# ------------------------------------------------------------------
# Target resolution
# ------------------------------------------------------------------


def _resolve_cli_target(path: str) -> Router:
    """Turn a CLI *path* argument into a loaded :class:`Router`.

    Accepted forms:
    - ``module:var``   → imports ``module`` and returns ``var``
    - ``file.py``      → imports ``file``, scans for a Router instance
    """
    if ":" in path:
        module_name, _, var_name = path.partition(":")
        mod = _import(module_name)
        router = getattr(mod, var_name, None)
        if not isinstance(router, Router):
            typer.echo(f"Error: {path!r} is not a Router instance.", err=True)
            raise typer.Exit(1)
        return router

    # Treat as a Python file
    file = Path(path)
    if not file.exists():
        typer.echo(f"Error: file {path!r} not found.", err=True)
        raise typer.Exit(1)

    # Ensure the file's directory is on sys.path so we can import it.
    parent = str(file.resolve().parent)
    if parent not in sys.path:
        sys.path.insert(0, parent)

    mod = _import(file.stem)
    var_name = _find_router_var(mod)
    if var_name is None:
        typer.echo(
            f"Error: no Router instance found in {path!r}. Provide an explicit target, e.g. routes:router",
            err=True,
        )
        raise typer.Exit(1)

    return getattr(mod, var_name)


def _import(module_name: str) -> object:
    try:
        return importlib.import_module(module_name)
    except Exception as exc:
        typer.echo(f"Error importing {module_name!r}: {exc}", err=True)
        raise typer.Exit(1) from exc


def _find_router_var(mod: object) -> str | None:
    """Scan a module for a ``Router`` instance.

    Checks ``router`` and ``routes`` first, then falls back to any attribute.
    """
    for name in ("router", "routes"):
        if isinstance(getattr(mod, name, None), Router):
            return name

    for name in dir(mod):
        if name.startswith("_"):
            continue
        if isinstance(getattr(mod, name, None), Router):
            return name

    return None


def _parse_params(params: list[str]) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for item in params:
        key, sep, value = item.partition("=")
        if not sep or not key:
            typer.echo(f"Error: parameter {item!r} must look like key=value.", err=True)
            raise typer.Exit(2)
        parsed[key] = value
    return parsed


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Inspect and exercise a jlroutes Router from the shell."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@app.command()
def route(
    target: Annotated[str, typer.Argument(help="Python file or module:var holding a Router.")],
    url: Annotated[str, typer.Argument(help="URL to route.")],
    param: Annotated[list[str] | None, typer.Option("--param", "-p", help="Extra key=value parameter.")] = None,
) -> None:
    """Route URL through the router, invoking handlers."""
    router = _resolve_cli_target(target)
    try:
        handled = router.route(url, _parse_params(param or []))
    except InvalidURLError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from exc

    typer.echo("handled" if handled else "unhandled")
    if not handled:
        raise typer.Exit(1)


@app.command()
def check(
    target: Annotated[str, typer.Argument(help="Python file or module:var holding a Router.")],
    url: Annotated[str, typer.Argument(help="URL to check.")],
) -> None:
    """Report whether URL matches a route, without invoking handlers."""
    router = _resolve_cli_target(target)
    try:
        routable = router.can_route(url)
    except InvalidURLError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from exc

    typer.echo("routable" if routable else "not routable")
    if not routable:
        raise typer.Exit(1)


@app.command()
def table(
    target: Annotated[str, typer.Argument(help="Python file or module:var holding a Router.")],
) -> None:
    """Print the routing table."""
    router = _resolve_cli_target(target)
    typer.echo(router.describe() or "(no routes)")
