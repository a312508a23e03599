"""Auxiliary emitters — generated test modules and API route helpers.

Both are written next to the main output and follow its target:

    generated-routes.ts   -> generated-routes.test.ts, generated-routes-api.ts
    routes.py             -> test_routes.py,           routes_api.py

Generated tests call every route that can be invoked without inventing a
query value and compare against the expected path, with placeholder values
(``test-<name>`` for scalars, ``test/path`` for catch-alls) substituted
verbatim.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import TYPE_CHECKING

from routegen.emit import python as py_emit
from routegen.emit import typescript as ts_emit
from routegen.routes.model import MARKER_RE, RouteEntry

if TYPE_CHECKING:
    from collections.abc import Iterable

    from routegen.routes.table import RouteTable

_HTTP_METHOD_FILE_RE = re.compile(r"/(GET|POST|PUT|DELETE|PATCH)\.(ts|js)$")


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


def generated_test_path(output_path: Path, target: str) -> Path:
    """Where the generated test module for *output_path* lives."""
    if target == "python":
        return output_path.with_name(f"test_{output_path.stem}.py")
    return output_path.with_name(f"{output_path.stem}.test{output_path.suffix or '.ts'}")


def api_module_path(output_path: Path, target: str) -> Path:
    """Where the generated API helper module for *output_path* lives."""
    if target == "python":
        return output_path.with_name(f"{output_path.stem}_api.py")
    return output_path.with_name(f"{output_path.stem}-api{output_path.suffix or '.ts'}")


# ---------------------------------------------------------------------------
# Generated tests
# ---------------------------------------------------------------------------


def sample_params(entry: RouteEntry) -> dict[str, str | list[str]]:
    """Placeholder argument values for every parameter of *entry*."""
    return {
        p.name: ["test", "path"] if p.is_catch_all else f"test-{p.name}"
        for p in entry.params
    }


def expected_path(entry: RouteEntry) -> str:
    """The path *entry* produces for ``sample_params(entry)`` and no query."""
    values = sample_params(entry)

    def substitute(match: re.Match[str]) -> str:
        value = values[match.group(1)]
        return "/".join(value) if isinstance(value, list) else value

    return MARKER_RE.sub(substitute, entry.route_path)


def _testable(terminals: Iterable[tuple[str, RouteEntry]]) -> list[tuple[str, RouteEntry]]:
    # routes with a required query field would need invented values
    return [
        (dotted, entry)
        for dotted, entry in terminals
        if all(q.optional for q in entry.query)
    ]


def _ts_object(values: dict[str, str | list[str]]) -> str:
    items = ", ".join(f"{ts_emit.ts_key(k)}: {json.dumps(v)}" for k, v in values.items())
    return f"{{ {items} }}"


def render_jest_tests(table: RouteTable, module_name: str) -> str:
    """Render a jest suite exercising every invocable route."""
    lines = [
        "// Auto-generated tests for routes",
        f"import {{ Routes }} from {json.dumps('./' + module_name)};",
        "",
        "describe('Routes', () => {",
    ]
    for dotted, entry in _testable(table.terminals()):
        call = ts_emit.ts_member_path("Routes", dotted)
        args = _ts_object(sample_params(entry)) if entry.params else ""
        suffix = " with params" if entry.params else ""
        lines.extend([
            f"  it({json.dumps(f'should generate {dotted} route{suffix}')}, () => {{",
            f"    expect({call}({args})).toBe({json.dumps(expected_path(entry))});",
            "  });",
            "",
        ])
    lines.append("});")
    return "\n".join(lines) + "\n"


def render_pytest_tests(table: RouteTable, module_file: str) -> str:
    """Render a pytest module that loads *module_file* from its own directory."""
    lines = [
        "# Auto-generated tests for routes",
        "import importlib.util",
        "from pathlib import Path",
        "",
        "_spec = importlib.util.spec_from_file_location(",
        f'    "generated_routes", Path(__file__).with_name({json.dumps(module_file)})',
        ")",
        "_module = importlib.util.module_from_spec(_spec)",
        "_spec.loader.exec_module(_module)",
        "Routes = _module.Routes",
    ]
    seen: set[str] = set()
    for dotted, entry in _testable(py_emit.python_terminals(table.namespace)):
        call = ".".join(["Routes", *(py_emit.py_identifier(p) for p in dotted.split("."))])
        name = "test_" + py_emit.py_identifier(dotted.replace(".", "_")).lstrip("_")
        while name in seen:
            name += "_"
        seen.add(name)
        args = repr(sample_params(entry)) if entry.params else ""
        lines.extend([
            "",
            "",
            f"def {name}() -> None:",
            f"    assert {call}({args}) == {expected_path(entry)!r}",
        ])
    return "\n".join(lines) + "\n"


def render_test_module(table: RouteTable, output_path: Path, target: str) -> str:
    """Render the test module for the generated file at *output_path*."""
    if target == "python":
        return render_pytest_tests(table, output_path.name)
    return render_jest_tests(table, output_path.stem)


# ---------------------------------------------------------------------------
# API route helpers
# ---------------------------------------------------------------------------


def is_api_route(entry: RouteEntry) -> bool:
    """Whether *entry* is an API endpoint.

    Matches files under an ``api`` directory, App Router ``route.*``
    handlers, and HTTP-method-named files (``GET.ts``, ``POST.js``, ...).
    """
    source = entry.source_path.as_posix()
    return (
        "/api/" in source
        or "/route." in source
        or _HTTP_METHOD_FILE_RE.search(source) is not None
    )


def api_route_name(route_path: str) -> str:
    """``/api/users/:id`` -> ``users_id``; ``/`` -> ``root``."""
    if route_path == "/":
        return "root"
    bare = MARKER_RE.sub(r"\1", route_path).removeprefix("/api/").strip("/")
    return bare.replace("/", "_") or "api"


def api_routes(entries: Iterable[RouteEntry]) -> list[tuple[str, RouteEntry]]:
    """Named API entries; later entries win on a name clash."""
    named: dict[str, RouteEntry] = {}
    for entry in entries:
        if is_api_route(entry):
            named[api_route_name(entry.route_path)] = entry
    return list(named.items())


_TS_FETCH_HELPERS = """\
// Type-safe fetch helpers
async function request<T>(url: string, method: string, data?: unknown, options?: RequestInit): Promise<T> {
  const response = await fetch(url, {
    ...options,
    method,
    headers: data === undefined ? options?.headers : { "Content-Type": "application/json", ...options?.headers },
    body: data === undefined ? undefined : JSON.stringify(data),
  });
  if (!response.ok) throw new Error(`HTTP error! status: ${response.status}`);
  return response.json();
}

export const api = {
  get: <T>(url: string, options?: RequestInit) => request<T>(url, "GET", undefined, options),
  post: <T>(url: string, data?: unknown, options?: RequestInit) => request<T>(url, "POST", data, options),
  put: <T>(url: string, data?: unknown, options?: RequestInit) => request<T>(url, "PUT", data, options),
  patch: <T>(url: string, data?: unknown, options?: RequestInit) => request<T>(url, "PATCH", data, options),
  delete: <T>(url: string, options?: RequestInit) => request<T>(url, "DELETE", undefined, options),
};
"""

_PY_FETCH_HELPERS = '''\
def request(url: str, method: str = "GET", data: Any = None, headers: dict[str, str] | None = None) -> Any:
    """Send a JSON request and decode the JSON response."""
    body = None
    all_headers = dict(headers or {})
    if data is not None:
        body = json.dumps(data).encode()
        all_headers.setdefault("Content-Type", "application/json")
    req = urllib.request.Request(url, data=body, method=method, headers=all_headers)
    with urllib.request.urlopen(req) as response:
        payload = response.read()
    return json.loads(payload) if payload else None'''


def render_typescript_api(routes: list[tuple[str, RouteEntry]]) -> str:
    lines = ["// Auto-generated API route helpers", "export const ApiRoutes = {"]
    for name, entry in routes:
        lines.extend(ts_emit.render_callable(name, entry, 1))
    lines.extend(["};", "", _TS_FETCH_HELPERS])
    return "\n".join(lines)


def render_python_api(routes: list[tuple[str, RouteEntry]]) -> str:
    records = py_emit.RecordSet()
    members: list[str] = []
    for name, entry in routes:
        if members:
            members.append("")
        members.extend(py_emit.render_function(name, f"api.{name}", entry, 1, records))
    body = py_emit.render_class("ApiRoutes", "Path builders for API endpoints.", members)
    body.extend(["", "", _PY_FETCH_HELPERS])
    return py_emit.assemble_module(
        ["Auto-generated API route helpers."],
        records,
        body,
        ["ApiRoutes", "request"],
        imports=("import json", "import urllib.request"),
    )


def render_api_module(routes: list[tuple[str, RouteEntry]], target: str) -> str:
    """Render the API helper module for *routes* in *target*."""
    if target == "python":
        return render_python_api(routes)
    return render_typescript_api(routes)
