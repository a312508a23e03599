"""Code emitters — route table to generated source text.

Public API::

    from routegen.emit import render_routes_module

    source = render_routes_module(table, "typescript")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from routegen._errors import ConfigError
from routegen.emit.python import render_python
from routegen.emit.typescript import render_typescript

if TYPE_CHECKING:
    from collections.abc import Callable

    from routegen.routes.table import RouteTable

EMITTERS: dict[str, Callable[[RouteTable], str]] = {
    "typescript": render_typescript,
    "python": render_python,
}


def render_routes_module(table: RouteTable, target: str = "typescript") -> str:
    """Render *table* as source text for *target*."""
    emitter = EMITTERS.get(target)
    if emitter is None:
        msg = f"Unknown target {target!r} (expected one of: {', '.join(EMITTERS)})"
        raise ConfigError(msg)
    return emitter(table)


__all__ = ["EMITTERS", "render_python", "render_routes_module", "render_typescript"]
