"""Route performance heuristics — size, branching and hook counts per route file."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from routegen.routes.model import RouteEntry

PERFORMANCE_FILENAME = "route-performance.json"

_BRANCH_RE = re.compile(r"\b(?:if|for|while|switch|catch)\s*\(")
_IMPORT_RE = re.compile(r"""import.*?from\s+['"]([^'"]+)['"]""")

LARGE_FILE_BYTES = 50_000
MANY_LINES = 300
HIGH_COMPLEXITY = 15
MANY_DEPENDENCIES = 20


@dataclass(frozen=True, slots=True)
class RouteMetrics:
    """Heuristic measurements for one route file."""

    path: Path
    route_path: str
    size_bytes: int
    lines_of_code: int
    complexity: int
    dependencies: tuple[str, ...]
    optimizations: tuple[str, ...]

    @property
    def score(self) -> int:
        """Weighted size used to rank files that most need attention."""
        return self.size_bytes + self.complexity * 1000 + self.lines_of_code * 10


def analyze_source(path: Path, route_path: str, text: str) -> RouteMetrics:
    """Measure one route file's *text*."""
    size = len(text.encode("utf-8"))
    lines = [line.strip() for line in text.splitlines()]
    loc = sum(1 for line in lines if line and not line.startswith("//"))
    complexity = len(_BRANCH_RE.findall(text))
    dependencies = tuple(_IMPORT_RE.findall(text))

    hints: list[str] = []
    if size > LARGE_FILE_BYTES:
        hints.append("Large file size - consider code splitting")
    if loc > MANY_LINES:
        hints.append("High line count - consider component extraction")
    if complexity > HIGH_COMPLEXITY:
        hints.append("High complexity - consider refactoring")
    if len(dependencies) > MANY_DEPENDENCIES:
        hints.append("Many dependencies - audit for unused imports")
    if text.count("useEffect(") > 5:
        hints.append("Multiple useEffect hooks - consider optimization")
    if text.count("useState(") > 10:
        hints.append("Many useState hooks - consider useReducer")
    if text.count("style={{") > 3:
        hints.append("Inline styles detected - consider CSS modules or styled-components")

    return RouteMetrics(
        path=path,
        route_path=route_path,
        size_bytes=size,
        lines_of_code=loc,
        complexity=complexity,
        dependencies=dependencies,
        optimizations=tuple(hints),
    )


def analyze_routes(
    entries: Sequence[RouteEntry],
    sources: Mapping[Path, str],
) -> list[RouteMetrics]:
    """Metrics for every entry whose source is in *sources*, worst first."""
    metrics = [
        analyze_source(entry.source_path, entry.route_path, sources[entry.source_path])
        for entry in entries
        if entry.source_path in sources
    ]
    metrics.sort(key=lambda m: m.score, reverse=True)
    return metrics


def compute_performance(
    metrics: Sequence[RouteMetrics],
    *,
    cwd: str | None = None,
    timestamp: str | None = None,
) -> dict[str, Any]:
    """Build the performance report from *metrics*."""
    total_size = sum(m.size_bytes for m in metrics)
    avg_complexity = sum(m.complexity for m in metrics) / len(metrics) if metrics else 0.0
    with_issues = sum(1 for m in metrics if m.optimizations)

    recommendations = []
    if total_size > 1024 * 1024:
        recommendations.append("Consider implementing route-based code splitting")
    if avg_complexity > 10:
        recommendations.append("Review complex routes for refactoring opportunities")
    recommendations.append("Use React.lazy() for heavy route components")
    recommendations.append("Implement proper error boundaries for better UX")

    return {
        "timestamp": timestamp or datetime.now(UTC).isoformat(),
        "summary": {
            "totalRoutes": len(metrics),
            "totalSize": total_size,
            "averageComplexity": round(avg_complexity, 1),
            "routesWithIssues": with_issues,
        },
        "routes": [
            {
                "file": os.path.relpath(m.path, cwd or os.getcwd()),
                "route": m.route_path,
                "size": m.size_bytes,
                "linesOfCode": m.lines_of_code,
                "complexity": m.complexity,
                "dependencyCount": len(m.dependencies),
                "optimizations": list(m.optimizations),
            }
            for m in metrics
        ],
        "recommendations": recommendations,
    }


def summary_rows(report: Mapping[str, Any]) -> list[tuple[str, object]]:
    summary = report["summary"]
    return [
        ("Total Routes", summary["totalRoutes"]),
        ("Total Size", f"{summary['totalSize'] / 1024:.1f} KB"),
        ("Average Complexity", f"{summary['averageComplexity']:.1f}"),
        ("Routes with Issues", summary["routesWithIssues"]),
    ]
