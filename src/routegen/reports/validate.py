"""Route validation — check ``Routes.x.y(...)`` references against the table.

Every ``Routes.<dotted>`` reference in a source file must name a route or
a route group.  Strict mode adds two warnings:

- a call with no record argument on a route with required params;
- a quoted path literal that a generated helper could produce instead.

The report status is ``PASSED`` when there are no errors; warnings never
fail validation.
"""

from __future__ import annotations

import os
import re
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from routegen.reports.audit import route_pattern

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from routegen.routes.model import RouteEntry

VALIDATION_FILENAME = "route-validation.json"

_USAGE_RE = re.compile(r"\bRoutes\.([A-Za-z0-9_$]+(?:\.[A-Za-z0-9_$]+)*)(\([^)]*\))?")
_MAGIC_STRING_RE = re.compile(r"['\"`](/[A-Za-z][^'\"`\s]*)['\"`]")


def _known_names(entries: Sequence[RouteEntry]) -> tuple[dict[str, RouteEntry], set[str]]:
    terminals = {entry.name: entry for entry in entries}
    groups: set[str] = set()
    for name in terminals:
        parts = name.split(".")
        for depth in range(1, len(parts)):
            groups.add(".".join(parts[:depth]))
    return terminals, groups


def compute_validation(
    entries: Sequence[RouteEntry],
    sources: Mapping[Path, str],
    *,
    strict: bool = False,
    cwd: str | None = None,
    timestamp: str | None = None,
) -> dict[str, Any]:
    """Validate route references in *sources*."""
    terminals, groups = _known_names(entries)
    patterns = [route_pattern(e.route_path) for e in entries]
    errors: list[str] = []
    warnings: list[str] = []
    usages = 0

    for path, text in sources.items():
        relative = os.path.relpath(path, cwd or os.getcwd())
        for match in _USAGE_RE.finditer(text):
            usages += 1
            name, args = match.group(1), match.group(2)
            entry = terminals.get(name)
            if entry is None and name not in groups:
                errors.append(f"{relative}: Route '{name}' does not exist ({match.group(0)})")
                continue
            if (
                strict
                and entry is not None
                and args is not None
                and "{" not in args
                and any(not p.optional for p in entry.params)
            ):
                warnings.append(
                    f"{relative}: Route '{name}' requires parameters but none provided"
                )

        if strict:
            for match in _MAGIC_STRING_RE.finditer(text):
                if any(p.fullmatch(match.group(1)) for p in patterns):
                    warnings.append(
                        f"{relative}: Consider using Routes helper instead of magic string: "
                        f"{match.group(0)}"
                    )

    return {
        "timestamp": timestamp or datetime.now(UTC).isoformat(),
        "totalRouteUsages": usages,
        "validationErrors": len(errors),
        "warnings": len(warnings),
        "errors": errors,
        "warningsList": warnings,
        "status": "PASSED" if not errors else "FAILED",
    }


def summary_rows(report: Mapping[str, Any]) -> list[tuple[str, object]]:
    return [
        ("Total Route Usages", report["totalRouteUsages"]),
        ("Validation Errors", report["validationErrors"]),
        ("Warnings", report["warnings"]),
        ("Status", report["status"]),
    ]
