"""Route analytics — shape statistics over the discovered routes."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from routegen.routes.model import RouteEntry

ANALYTICS_FILENAME = "route-analytics.json"


def compute_analytics(entries: Sequence[RouteEntry]) -> dict[str, Any]:
    """Summarize *entries*.

    Counts dynamic, static, nested (more than one ``/``), catch-all and
    query-bearing routes, and histograms route depth, parameter names and
    source file extensions.
    """
    depths = Counter(entry.depth for entry in entries)
    params = Counter(p.name for entry in entries for p in entry.params)
    file_types = Counter(entry.source_path.suffix.lstrip(".") or "unknown" for entry in entries)

    return {
        "totalRoutes": len(entries),
        "dynamicRoutes": sum(1 for e in entries if e.params),
        "staticRoutes": sum(1 for e in entries if not e.params),
        "routesWithQueryParams": sum(1 for e in entries if e.query),
        "nestedRoutes": sum(1 for e in entries if e.depth > 1),
        "catchAllRoutes": sum(1 for e in entries if any(p.is_catch_all for p in e.params)),
        "routeDepthDistribution": {str(d): n for d, n in sorted(depths.items())},
        "parameterUsage": dict(params.most_common()),
        "fileTypes": dict(file_types.most_common()),
    }


def summary_rows(analytics: dict[str, Any]) -> list[tuple[str, object]]:
    """Rows for ``console.print_report_summary``."""
    return [
        ("Total Routes", analytics["totalRoutes"]),
        ("Dynamic Routes", analytics["dynamicRoutes"]),
        ("Static Routes", analytics["staticRoutes"]),
        ("Routes with Query Params", analytics["routesWithQueryParams"]),
        ("Nested Routes", analytics["nestedRoutes"]),
        ("Catch-all Routes", analytics["catchAllRoutes"]),
    ]
