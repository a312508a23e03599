"""Python emitter — the route namespace as a nested ``Routes`` class.

Records are ``TypedDict`` classes; namespaces are nested classes holding
static methods, so the call surface mirrors the route directory::

    Routes.home()                                  # "/"
    Routes.blog.slug({"slug": "hello"})            # "/blog/hello"
    Routes.docs.slug()                             # "/docs/"
    Routes.search({"q": "react", "page": 2})       # "/search?q=react&page=2"

A group that is also a route is a class whose ``__new__`` returns the
path, so ``Routes.blog()`` and ``Routes.blog.slug(...)`` both work.

Query values are percent-encoded with the same safe set as JavaScript's
``encodeURIComponent``; booleans encode as ``true``/``false`` and integral
floats as integers, matching JavaScript's ``String()``.
"""

from __future__ import annotations

import json
import keyword
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from routegen.routes.model import MARKER_RE, QueryParamSpec, RouteEntry
from routegen.routes.table import group_index, group_members

if TYPE_CHECKING:
    from collections.abc import Iterator

    from routegen.routes.table import RouteNamespace, RouteTable

HEADER = "# This file is auto-generated by routegen. Do not modify."

_INDENT = "    "

_QUERY_TYPES: dict[str, str] = {
    "string": "str",
    "number": "int | float",
    "boolean": "bool",
}


def py_identifier(name: str) -> str:
    """Turn an arbitrary route segment into a valid Python identifier."""
    ident = re.sub(r"\W", "_", name)
    if not ident or ident[0].isdigit():
        ident = "_" + ident
    if keyword.iskeyword(ident):
        ident += "_"
    return ident


def _class_name(dotted: str, suffix: str) -> str:
    words = re.split(r"[^A-Za-z0-9]+", dotted)
    return "".join(w[:1].upper() + w[1:] for w in words if w) + suffix


def query_field_type(field: QueryParamSpec) -> str:
    """Python annotation for a declared query field type."""
    if field.is_list:
        inner = _QUERY_TYPES.get(field.type[:-2])
        return f"list[{inner}]" if inner else "list[Any]"
    return _QUERY_TYPES.get(field.type, "Any")


class RecordSet:
    """Collects the TypedDict classes the module needs, with unique names."""

    def __init__(self) -> None:
        self.blocks: list[list[str]] = []
        self._names: set[str] = set()

    def add(self, dotted: str, suffix: str, fields: list[tuple[str, bool, str]]) -> str:
        base = _class_name(dotted, suffix)
        name = base
        counter = 2
        while name in self._names:
            name = f"{base}{counter}"
            counter += 1
        self._names.add(name)

        if all(re.fullmatch(r"[A-Za-z_]\w*", f) and not keyword.iskeyword(f) for f, _, _ in fields):
            lines = [f"class {name}(TypedDict):"]
            for field, optional, annotation in fields:
                annotation = f"NotRequired[{annotation}]" if optional else annotation
                lines.append(f"{_INDENT}{field}: {annotation}")
        else:
            # keys that are not identifiers need the functional syntax
            items = ", ".join(
                f"{json.dumps(f)}: {f'NotRequired[{a}]' if o else a}" for f, o, a in fields
            )
            lines = [f"{name} = TypedDict({json.dumps(name)}, {{{items}}})"]
        self.blocks.append(lines)
        return name


def path_expression(entry: RouteEntry) -> str:
    """Concatenation expression that substitutes every path parameter."""
    pieces: list[str] = []
    position = 0
    for match in MARKER_RE.finditer(entry.route_path):
        literal = entry.route_path[position:match.start()]
        if literal:
            pieces.append(json.dumps(literal))
        key = json.dumps(match.group(1))
        if match.group(2):
            pieces.append(f'"/".join(str(part) for part in params.get({key}) or ())')
        else:
            pieces.append(f"str(params[{key}])")
        position = match.end()
    tail = entry.route_path[position:]
    if tail or not pieces:
        pieces.append(json.dumps(tail))
    return " + ".join(pieces)


def render_function(
    key: str,
    dotted: str,
    entry: RouteEntry,
    depth: int,
    records: RecordSet,
    *,
    constructor: bool = False,
) -> list[str]:
    """Render one ``@staticmethod`` for *entry*.

    With *constructor* set, render the enclosing class's ``__new__``
    instead, so calling the class returns the path.
    """
    pad = _INDENT * depth
    inner = _INDENT * (depth + 1)

    args: list[str] = ["cls"] if constructor else []
    body: list[str] = []
    if entry.params:
        record = records.add(dotted, "Params", [
            (p.name, p.optional, "list[str]" if p.is_catch_all else "str")
            for p in entry.params
        ])
        if entry.params_argument_optional:
            args.append(f"params: {record} | None = None")
            body.append(f"{inner}params = params or {{}}")
        else:
            args.append(f"params: {record}")
    if entry.query:
        record = records.add(dotted, "Query", [
            (q.name, q.optional, query_field_type(q)) for q in entry.query
        ])
        if entry.all_query_optional:
            args.append(f"query: {record} | None = None")
            body.append(f"{inner}query = query or {{}}")
        else:
            args.append(f"query: {record}")

    path = path_expression(entry)
    if entry.query:
        body.append(f"{inner}pairs: list[str] = []")
        for field in entry.query:
            key_literal = json.dumps(field.name)
            prefix = json.dumps(f"{field.name}=")
            if field.is_list:
                body.append(f"{inner}for item in query.get({key_literal}) or ():")
                body.append(f"{inner}{_INDENT}pairs.append({prefix} + _encode(item))")
            else:
                body.append(f"{inner}if query.get({key_literal}) is not None:")
                body.append(f"{inner}{_INDENT}pairs.append({prefix} + _encode(query[{key_literal}]))")
        body.append(f'{inner}return {path} + ("?" + "&".join(pairs) if pairs else "")')
    else:
        body.append(f"{inner}return {path}")

    if constructor:
        return [f"{pad}def __new__({', '.join(args)}) -> str:  # type: ignore[misc]", *body]
    return [
        f"{pad}@staticmethod",
        f"{pad}def {py_identifier(key)}({', '.join(args)}) -> str:",
        *body,
    ]


@dataclass(frozen=True, slots=True)
class IdentifierClash:
    """Sibling route names that map to the same Python identifier."""

    identifier: str
    replaced: str
    winner: str


def _members(namespace: RouteNamespace) -> dict[str, tuple[str, RouteNamespace | RouteEntry]]:
    # later keys win, matching what a class body does with a redefinition
    members: dict[str, tuple[str, RouteNamespace | RouteEntry]] = {}
    for key, node in group_members(namespace):
        members[py_identifier(key)] = (key, node)
    return members


def identifier_clashes(
    namespace: RouteNamespace, prefix: tuple[str, ...] = ()
) -> list[IdentifierClash]:
    """Find sibling names that the Python ``Routes`` class cannot hold apart."""
    clashes: list[IdentifierClash] = []
    seen: dict[str, str] = {}
    for key, _ in group_members(namespace):
        ident = py_identifier(key)
        if ident in seen:
            clashes.append(IdentifierClash(
                identifier=".".join((*prefix, ident)),
                replaced=".".join((*prefix, seen[ident])),
                winner=".".join((*prefix, key)),
            ))
        seen[ident] = key
    for key, node in _members(namespace).values():
        if isinstance(node, dict):
            clashes.extend(identifier_clashes(node, (*prefix, key)))
    return clashes


def python_terminals(
    namespace: RouteNamespace, prefix: tuple[str, ...] = ()
) -> Iterator[tuple[str, RouteEntry]]:
    """Like ``RouteTable.terminals`` but only the names the Python module keeps."""
    index = group_index(namespace)
    if index is not None and prefix:
        yield ".".join(prefix), index
    for key, node in _members(namespace).values():
        if isinstance(node, RouteEntry):
            yield ".".join((*prefix, key)), node
        else:
            yield from python_terminals(node, (*prefix, key))


def _render_namespace(
    namespace: RouteNamespace,
    prefix: tuple[str, ...],
    depth: int,
    records: RecordSet,
) -> list[str]:
    lines: list[str] = []
    pad = _INDENT * depth
    for ident, (key, node) in _members(namespace).items():
        if lines:
            lines.append("")
        dotted = ".".join((*prefix, key))
        if isinstance(node, RouteEntry):
            lines.extend(render_function(key, dotted, node, depth, records))
            continue
        lines.append(f"{pad}class {ident}:")
        index = group_index(node)
        if index is not None:
            lines.extend(render_function(key, dotted, index, depth + 1, records, constructor=True))
            if len(node) > 1:
                lines.append("")
        lines.extend(_render_namespace(node, (*prefix, key), depth + 1, records))
    return lines


def typing_imports(source: str) -> str:
    names = [n for n in ("Any", "Literal", "Never", "NotRequired", "TypedDict") if re.search(rf"\b{n}\b", source)]
    return f"from typing import {', '.join(names)}" if names else ""


def render_class(name: str, docstring: str, members: list[str]) -> list[str]:
    lines = [f"class {name}:", f'{_INDENT}"""{docstring}"""']
    if members:
        lines.append("")
        lines.extend(members)
    return lines


def assemble_module(
    docstring: list[str],
    records: RecordSet,
    body: list[str],
    exports: list[str],
    *,
    imports: tuple[str, ...] = (),
) -> str:
    """Join header, imports, the ``_encode`` helper, records and *body*.

    ``typing`` names are imported only when the rendered text uses them.
    """
    lines: list[str] = []
    for block in records.blocks:
        lines.extend(block)
        lines.extend(["", ""])
    lines.extend(body)
    body_text = "\n".join(lines)

    header = [HEADER, f'"""{docstring[0]}', *docstring[1:], '"""', ""]
    header.extend(["from __future__ import annotations", ""])
    header.extend(imports)
    typing_line = typing_imports(body_text)
    if typing_line:
        header.append(typing_line)
    header.extend([
        "from urllib.parse import quote",
        "",
        f"__all__ = [{', '.join(json.dumps(e) for e in sorted(exports))}]",
        "",
        "",
        "def _encode(value: object) -> str:",
        f"{_INDENT}if isinstance(value, bool):",
        f'{_INDENT}{_INDENT}return "true" if value else "false"',
        f"{_INDENT}if isinstance(value, float) and value.is_integer():",
        f"{_INDENT}{_INDENT}value = int(value)",
        f"{_INDENT}return quote(str(value), safe=\"-_.!~*'()\")",
        "",
        "",
    ])
    return "\n".join(header) + body_text + "\n"


def render_python(table: RouteTable) -> str:
    """Render *table* as a Python module exporting ``Routes``."""
    records = RecordSet()
    members = _render_namespace(table.namespace, (), 1, records)

    top_level = list(_members(table.namespace))
    if top_level:
        route_name = "RouteName = Literal[" + ", ".join(json.dumps(n) for n in top_level) + "]"
    else:
        route_name = "RouteName = Never"

    body = render_class("Routes", "Route helpers mirroring the route directory hierarchy.", members)
    body.extend([
        "",
        "",
        "# Top-level route names",
        route_name,
        "",
        "# Generated route paths (opaque text)",
        "RoutePath = str",
    ])
    docstring = [
        "Type-safe route helpers generated from file-based routing.",
        "",
        "Use these functions for safe navigation and link creation.",
    ]
    return assemble_module(docstring, records, body, ["RouteName", "RoutePath", "Routes"])
