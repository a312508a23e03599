"""Route IR and table builder.

Public API::

    from routegen.routes import RouteEntry, build_route_table

    table = build_route_table(entries)
    for name, entry in table.terminals():
        ...
"""

from routegen.routes.model import (
    ParamSpec,
    QueryParamSpec,
    RouteEntry,
    RouteFile,
    route_name,
)
from routegen.routes.table import Collision, RouteTable, build_namespace, build_route_table

__all__ = [
    "Collision",
    "ParamSpec",
    "QueryParamSpec",
    "RouteEntry",
    "RouteFile",
    "RouteTable",
    "build_namespace",
    "build_route_table",
    "route_name",
]
