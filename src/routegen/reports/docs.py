"""Route documentation — a Markdown overview of every route.

Routes are grouped by their first path segment (``Root`` for ``/``), each
group getting a summary table followed by per-route details and usage
examples written against the generated ``Routes`` helper.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from routegen.emit.typescript import ts_member_path

if TYPE_CHECKING:
    from collections.abc import Sequence

    from routegen.routes.model import ParamSpec, QueryParamSpec, RouteEntry

DOCS_FILENAME = "ROUTES.md"

_QUICK_REFERENCE = """\
## Quick Reference

### Available Commands

```bash
# Generate routes
routegen generate

# Watch for changes
routegen watch

# Audit route usage
routegen audit

# Validate route references
routegen validate --strict

# Analyze route performance
routegen performance

# Generate documentation
routegen docs
```

### Route Usage Patterns

```typescript
import { Routes } from './generated-routes';

// Static routes
Routes.home()
Routes.about()

// Dynamic routes
Routes.blog.slug({ slug: 'my-post' })

// With query parameters
Routes.search({ q: 'typescript', page: 2 })
```

---

*This documentation was auto-generated by routegen*
"""


def group_of(entry: RouteEntry) -> str:
    """Documentation group: the first path segment, or ``Root``."""
    if entry.route_path == "/":
        return "Root"
    return entry.route_path.split("/")[1] or "Other"


def _param_type(param: ParamSpec) -> str:
    return "string[]" if param.is_catch_all else "string"


def _example_params(entry: RouteEntry) -> str:
    items = ", ".join(
        f"{p.name}: ['example', 'path']" if p.is_catch_all else f"{p.name}: 'example'"
        for p in entry.params
    )
    return f"{{ {items} }}"


def _example_query(fields: Sequence[QueryParamSpec]) -> str:
    items: list[str] = []
    for q in fields:
        if q.is_list:
            items.append(f"{q.name}: ['example']")
        elif q.type == "number":
            items.append(f"{q.name}: 1")
        elif q.type == "boolean":
            items.append(f"{q.name}: true")
        else:
            items.append(f"{q.name}: 'example'")
    return f"{{ {', '.join(items)} }}"


def _route_section(entry: RouteEntry, source: str) -> list[str]:
    call = ts_member_path("Routes", entry.name)
    lines = [f"### `{entry.route_path}`", "", f"**File:** `{source}`", ""]

    if entry.params:
        lines.append("**Parameters:**")
        for p in entry.params:
            flags = " (optional)" if p.optional else ""
            flags += " (catch-all)" if p.is_catch_all else ""
            lines.append(f"- `{p.name}`: `{_param_type(p)}`{flags}")
        lines.append("")

    if entry.query:
        lines.append("**Query Parameters:**")
        for q in entry.query:
            lines.append(f"- `{q.name}`: `{q.type}`{' (optional)' if q.optional else ''}")
        lines.append("")

    if not entry.query or all(q.optional for q in entry.query):
        args = _example_params(entry) if entry.params else ""
        lines.extend(["**Usage:**", "```typescript", f"{call}({args})", "```", ""])

    if entry.query:
        query = _example_query(entry.query)
        args = f"{_example_params(entry)}, {query}" if entry.params else query
        lines.extend([
            "**With Query Parameters:**", "```typescript", f"{call}({args})", "```", "",
        ])

    lines.extend(["---", ""])
    return lines


def render_docs(
    entries: Sequence[RouteEntry],
    *,
    cwd: str | None = None,
    timestamp: str | None = None,
) -> str:
    """Render the Markdown route documentation for *entries*."""
    base = cwd or os.getcwd()
    groups: dict[str, list[RouteEntry]] = {}
    for entry in entries:
        groups.setdefault(group_of(entry), []).append(entry)

    lines = [
        "# Route Documentation",
        "",
        f"Generated on: {timestamp or datetime.now(UTC).isoformat()}",
        "",
        "## Overview",
        "",
        f"This project contains {len(entries)} routes across the following structure:",
        "",
        "## Table of Contents",
        "",
    ]
    ordered = sorted(groups)
    lines.extend(f"- [{g[:1].upper() + g[1:]}](#{g.lower()})" for g in ordered)
    lines.extend(["", "---", ""])

    for group in ordered:
        members = groups[group]
        lines.extend([
            f"## {group[:1].upper() + group[1:]}",
            "",
            "| Route | File | Parameters | Query Params |",
            "|-------|------|------------|--------------|",
        ])
        for entry in members:
            source = os.path.relpath(entry.source_path, base)
            params = ", ".join(
                f"`{p.name}{'?' if p.optional else ''}: {_param_type(p)}`" for p in entry.params
            ) or "None"
            query = ", ".join(
                f"`{q.name}{'?' if q.optional else ''}: {q.type}`" for q in entry.query
            ) or "None"
            lines.append(f"| `{entry.route_path}` | `{source}` | {params} | {query} |")
        lines.append("")
        for entry in members:
            lines.extend(_route_section(entry, os.path.relpath(entry.source_path, base)))

    return "\n".join(lines) + "\n" + _QUICK_REFERENCE
