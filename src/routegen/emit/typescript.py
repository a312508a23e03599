"""TypeScript emitter — the route namespace as a nested ``Routes`` object.

Every terminal entry becomes one arrow function:

    about: () => "/about",
    blog: {
      slug: (params: { slug: string }) => `/blog/${params.slug}`,
    },
    docs: {
      slug: (params?: { slug?: string[] }) => `/docs/${params?.slug?.join("/") ?? ""}`,
    },

A group that is also a route is a callable carrying its members:

    blog: Object.assign(
      () => "/blog",
      {
        slug: (params: { slug: string }) => `/blog/${params.slug}`,
      },
    ),

Routes with a query contract take a query record (second argument, or the
only one when the route has no path params) and append ``?a=1&b=2`` only
when at least one pair was produced.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING

from routegen.routes.model import MARKER_RE, RouteEntry
from routegen.routes.table import group_index, group_members

if TYPE_CHECKING:
    from routegen.routes.table import RouteNamespace, RouteTable

HEADER = "// This file is auto-generated by routegen. Do not modify."

_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][\w$]*")
_INDENT = "  "


def is_identifier(name: str) -> bool:
    return _IDENTIFIER_RE.fullmatch(name) is not None


def ts_key(name: str) -> str:
    """Object-literal key: bare when possible, quoted otherwise."""
    return name if is_identifier(name) else json.dumps(name)


def ts_access(obj: str, name: str, *, optional: bool = False) -> str:
    """Property access on *obj*, optionally chained with ``?.``."""
    if is_identifier(name):
        return f"{obj}?.{name}" if optional else f"{obj}.{name}"
    return f"{obj}?.[{json.dumps(name)}]" if optional else f"{obj}[{json.dumps(name)}]"


def ts_member_path(root: str, dotted: str) -> str:
    """``Routes`` + ``blog.slug`` -> ``Routes.blog.slug`` (quoting as needed)."""
    expr = root
    for part in dotted.split("."):
        expr = ts_access(expr, part)
    return expr


def _template_text(text: str) -> str:
    """Escape literal text for use inside a template literal."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def _record_type(fields: list[tuple[str, bool, str]]) -> str:
    if not fields:
        return "{}"
    body = "; ".join(
        f"{ts_key(name)}{'?' if optional else ''}: {type_text}"
        for name, optional, type_text in fields
    )
    return f"{{ {body} }}"


def params_type(entry: RouteEntry) -> str:
    return _record_type([
        (p.name, p.optional, "string[]" if p.is_catch_all else "string")
        for p in entry.params
    ])


def query_type(entry: RouteEntry) -> str:
    return _record_type([(q.name, q.optional, q.type) for q in entry.query])


def path_template(entry: RouteEntry) -> str:
    """Template-literal body that substitutes every path parameter."""
    params_optional = entry.all_params_optional
    out: list[str] = []
    position = 0
    for match in MARKER_RE.finditer(entry.route_path):
        out.append(_template_text(entry.route_path[position:match.start()]))
        access = ts_access("params", match.group(1), optional=params_optional)
        if match.group(2):
            out.append(f'${{{access}?.join("/") ?? ""}}')
        else:
            out.append(f"${{{access}}}")
        position = match.end()
    out.append(_template_text(entry.route_path[position:]))
    return "".join(out)


def path_type(entry: RouteEntry) -> str:
    """Template-literal type describing the strings *entry* can return."""
    body = MARKER_RE.sub("\0", entry.route_path)
    parts = [_template_text(chunk) for chunk in body.split("\0")]
    text = "${string}".join(parts)
    if entry.query:
        text += "${string}"
    return f"`{text}`"


def render_callable(key: str | None, entry: RouteEntry, depth: int) -> list[str]:
    """Render one ``key: (...) => ...`` member for *entry*.

    With *key* ``None`` only the arrow function is rendered (used as the
    first argument of ``Object.assign`` for a group that is also a route).
    """
    pad = _INDENT * depth
    args: list[str] = []
    if entry.params:
        optional = "?" if entry.params_argument_optional else ""
        args.append(f"params{optional}: {params_type(entry)}")
    if entry.query:
        optional = "?" if entry.all_query_optional else ""
        args.append(f"query{optional}: {query_type(entry)}")
    label = "" if key is None else f"{ts_key(key)}: "
    signature = f"{pad}{label}({', '.join(args)}) =>"

    if not entry.params and not entry.query:
        return [f"{signature} {json.dumps(entry.route_path)},"]
    if not entry.query:
        return [f"{signature} `{path_template(entry)}`,"]

    inner = _INDENT * (depth + 1)
    query_optional = entry.all_query_optional
    lines = [f"{signature} {{", f"{inner}const pairs: string[] = [];"]
    for field in entry.query:
        access = ts_access("query", field.name, optional=query_optional)
        name = _template_text(field.name)
        if field.is_list:
            lines.append(
                f"{inner}for (const item of {access} ?? []) "
                f"pairs.push(`{name}=${{encodeURIComponent(String(item))}}`);"
            )
        else:
            lines.append(
                f"{inner}if ({access} !== undefined) "
                f"pairs.push(`{name}=${{encodeURIComponent(String({access}))}}`);"
            )
    lines.append(
        f"{inner}return `{path_template(entry)}"
        '${pairs.length > 0 ? `?${pairs.join("&")}` : ""}`;'
    )
    lines.append(f"{pad}}},")
    return lines


def _render_namespace(namespace: RouteNamespace, depth: int) -> list[str]:
    lines: list[str] = []
    pad = _INDENT * depth
    for key, node in group_members(namespace):
        if isinstance(node, RouteEntry):
            lines.extend(render_callable(key, node, depth))
            continue
        index = group_index(node)
        if index is None:
            lines.append(f"{pad}{ts_key(key)}: {{")
            lines.extend(_render_namespace(node, depth + 1))
            lines.append(f"{pad}}},")
        else:
            inner = _INDENT * (depth + 1)
            lines.append(f"{pad}{ts_key(key)}: Object.assign(")
            lines.extend(render_callable(None, index, depth + 1))
            lines.append(f"{inner}{{")
            lines.extend(_render_namespace(node, depth + 2))
            lines.append(f"{inner}}},")
            lines.append(f"{pad}),")
    return lines


def render_typescript(table: RouteTable) -> str:
    """Render *table* as a TypeScript module exporting ``Routes``."""
    lines = [
        HEADER,
        "",
        "/**",
        " * Type-safe route helpers generated from your file-based routing.",
        " * Use these functions for safe navigation and link creation.",
        " */",
        "export const Routes = {",
        *_render_namespace(table.namespace, 1),
        "};",
        "",
        "/**",
        " * Union type of all top-level route names.",
        " */",
        "export type RouteNames = keyof typeof Routes;",
        "",
        "/**",
        " * Union type of all generated route paths (the actual URL strings).",
        " */",
    ]

    path_types = list(dict.fromkeys(path_type(entry) for _, entry in table.terminals()))
    if path_types:
        lines.append("export type RoutePaths =")
        lines.extend(f"  | {t}" for t in path_types)
        lines[-1] += ";"
    else:
        lines.append("export type RoutePaths = never;")

    return "\n".join(lines) + "\n"
