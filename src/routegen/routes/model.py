"""Route IR — the hand-off between discovery and emission.

All types are frozen dataclasses created fresh on every run.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from routegen._types import FileRole, RouteName, RoutePath

# :name or :name* markers in a canonical route path
MARKER_RE = re.compile(r":([A-Za-z0-9_-]+)(\*)?")

_QUERY_KINDS: frozenset[str] = frozenset({"string", "number", "boolean", "string[]"})


@dataclass(frozen=True, slots=True)
class RouteFile:
    """A discovered candidate route file.

    Attributes:
        path: Absolute path to the file.
        role: App Router role (``page``, ``layout``, ``route``) or *None*.

    """

    path: Path
    role: FileRole | None = None


@dataclass(frozen=True, slots=True)
class ParamSpec:
    """One dynamic path parameter.

    A ``catch_all`` parameter is list-valued and always optional.
    """

    name: str
    kind: Literal["scalar", "catch_all"] = "scalar"
    optional: bool = False

    @property
    def is_catch_all(self) -> bool:
        return self.kind == "catch_all"


@dataclass(frozen=True, slots=True)
class QueryParamSpec:
    """One field of a declared ``QueryParams`` contract.

    Attributes:
        name: Field name.
        type: Declared type text, verbatim.
        optional: Whether the field was declared with ``?``.

    """

    name: str
    type: str
    optional: bool = False

    @property
    def is_list(self) -> bool:
        """List-typed fields encode one ``name=value`` pair per element."""
        return self.type.endswith("[]")

    @property
    def kind(self) -> str:
        """``string``, ``number``, ``boolean``, ``string[]`` or ``raw``."""
        return self.type if self.type in _QUERY_KINDS else "raw"


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """A single route in the IR.

    Attributes:
        source_path: Originating route file.
        route_path: Canonical path, always starting with ``/``
            (e.g. ``/blog/:slug``, ``/docs/:slug*``).
        params: Dynamic parameters in path order.
        query: Declared query fields in declaration order.

    """

    source_path: Path
    route_path: RoutePath
    params: tuple[ParamSpec, ...] = ()
    query: tuple[QueryParamSpec, ...] = ()

    @property
    def name(self) -> RouteName:
        """Dotted namespace name (``home`` for ``/``)."""
        return route_name(self.route_path)

    @property
    def has_query(self) -> bool:
        return bool(self.query)

    @property
    def all_params_optional(self) -> bool:
        """True when every parameter is optional (vacuously true without params)."""
        return all(p.optional for p in self.params)

    @property
    def all_query_optional(self) -> bool:
        """True when every query field is optional (vacuously true without a contract)."""
        return all(q.optional for q in self.query)

    @property
    def params_argument_optional(self) -> bool:
        """Whether the params record may be omitted by callers.

        A required query argument follows the params record, so the record
        can only be omitted when the query argument can be too.
        """
        return self.all_params_optional and self.all_query_optional

    @property
    def depth(self) -> int:
        """Number of ``/`` separators in the route path."""
        return self.route_path.count("/")


def route_name(route_path: RoutePath) -> RouteName:
    """Derive the dotted namespace name of a canonical route path.

    ``/``             -> ``home``
    ``/about``        -> ``about``
    ``/blog/:slug``   -> ``blog.slug``
    ``/docs/:slug*``  -> ``docs.slug``

    """
    if route_path == "/":
        return "home"
    bare = MARKER_RE.sub(r"\1", route_path.lstrip("/"))
    return bare.replace("/", ".")
