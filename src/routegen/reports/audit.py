"""Route audit — how often each route path appears in a source tree.

A route is *used* when a quoted literal in some source file matches its
path, with every dynamic segment accepting any value::

    /blog/:slug     matches  "/blog/hello"  '/blog/x'
    /docs/:slug*    matches  `/docs/`       "/docs/a/b"

Quoted ``/...`` literals that match no route are reported as potential
broken links.
"""

from __future__ import annotations

import os
import re
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from routegen.routes.model import MARKER_RE

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from routegen.routes.model import RouteEntry

AUDIT_FILENAME = "route-audit.json"

_PATH_LITERAL_RE = re.compile(r"['\"`](/[^'\"`\s]*)['\"`]")


def route_pattern(route_path: str) -> re.Pattern[str]:
    """Regex that fully matches concrete paths produced by *route_path*."""
    parts: list[str] = []
    position = 0
    for match in MARKER_RE.finditer(route_path):
        parts.append(re.escape(route_path[position:match.start()]))
        parts.append("[^'\"`\\s]*" if match.group(2) else "[^/'\"`\\s]+")
        position = match.end()
    parts.append(re.escape(route_path[position:]))
    return re.compile("".join(parts))


def _relative(path: Path, cwd: str | None) -> str:
    return os.path.relpath(path, cwd or os.getcwd())


def compute_audit(
    entries: Sequence[RouteEntry],
    sources: Mapping[Path, str],
    *,
    cwd: str | None = None,
    timestamp: str | None = None,
) -> dict[str, Any]:
    """Build the audit report for *entries* against *sources*.

    Args:
        entries: Discovered routes.
        sources: Source file path to file text.
        cwd: Base for relative paths in the report (default: process cwd).
        timestamp: ISO timestamp to embed (default: now, UTC).

    """
    patterns = {e.route_path: route_pattern(e.route_path) for e in entries}
    usage: dict[str, dict[str, Any]] = {
        e.route_path: {"count": 0, "files": []} for e in entries
    }
    issues: list[str] = []

    for path, text in sources.items():
        literals = _PATH_LITERAL_RE.findall(text)
        relative = _relative(path, cwd)
        for literal in literals:
            matched = [rp for rp, pattern in patterns.items() if pattern.fullmatch(literal)]
            for route_path in matched:
                record = usage[route_path]
                record["count"] += 1
                if relative not in record["files"]:
                    record["files"].append(relative)
            if not matched:
                issues.append(f"Potential broken link in {relative}: '{literal}'")

    unused = [rp for rp, record in usage.items() if record["count"] == 0]
    most_used = sorted(
        ((rp, record["count"]) for rp, record in usage.items() if record["count"] > 0),
        key=lambda item: item[1],
        reverse=True,
    )[:10]

    recommendations = []
    if unused:
        recommendations.append(f"Consider removing {len(unused)} unused routes")
    if issues:
        recommendations.append(f"Fix {len(issues)} potential routing issues")
    recommendations.append("Use the generated Routes helper to ensure type-safe navigation")

    return {
        "timestamp": timestamp or datetime.now(UTC).isoformat(),
        "totalRoutes": len(entries),
        "usedRoutes": len(usage) - len(unused),
        "unusedRoutes": unused,
        "unusedRouteFiles": {
            e.route_path: _relative(e.source_path, cwd) for e in entries if e.route_path in unused
        },
        "mostUsedRoutes": [{"route": rp, "count": count} for rp, count in most_used],
        "usage": usage,
        "potentialIssues": issues,
        "recommendations": recommendations,
    }


def summary_rows(report: Mapping[str, Any]) -> list[tuple[str, object]]:
    return [
        ("Total Routes", report["totalRoutes"]),
        ("Used Routes", report["usedRoutes"]),
        ("Unused Routes", len(report["unusedRoutes"])),
        ("Potential Issues", len(report["potentialIssues"])),
    ]
