"""Generation pipeline — walk, extract, build, emit, write.

``generate(config)`` is the single entry point used by the CLI and the
watcher.  Each run starts from scratch:

    route files -> RouteEntry per file -> RouteTable -> source text -> disk

Non-fatal problems (name collisions, unsupported ``QueryParams`` shapes,
a missing route directory) are printed as console warnings, returned in
``GenerationResult.warnings`` and, when an ``EventLog`` is supplied,
recorded as ``Diagnostic`` events.  Write failures raise ``OutputError``.
"""

from __future__ import annotations

import contextlib
import json
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from routegen import console
from routegen._errors import OutputError
from routegen.discovery.conventions import rewrite
from routegen.discovery.params import extract_params
from routegen.discovery.query import scan_query_contract
from routegen.discovery.walker import walk_route_files
from routegen.emit import render_routes_module
from routegen.emit.extras import (
    api_module_path,
    api_routes,
    generated_test_path,
    render_api_module,
    render_test_module,
)
from routegen.emit.python import identifier_clashes
from routegen.observability.events import (
    Diagnostic,
    FileWritten,
    GenerationProfile,
    RoutesDiscovered,
    now_ns,
)
from routegen.observability.profiler import GenerationProfiler
from routegen.reports.analytics import ANALYTICS_FILENAME, compute_analytics
from routegen.routes.model import RouteEntry, RouteFile
from routegen.routes.table import RouteTable, build_route_table

if TYPE_CHECKING:
    from routegen.config import RouteGenConfig
    from routegen.observability.log import EventLog


@dataclass(frozen=True, slots=True)
class WrittenFile:
    """One artifact written by a run."""

    kind: str
    path: Path
    size_bytes: int


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Outcome of a generation run.

    Attributes:
        table: The route table that was emitted.
        output_path: Path of the main generated module.
        files: Every artifact written, main module first.
        warnings: Non-fatal problems, in the order they were found.
        duration_ms: Wall time of the run.
        profile: Per-stage timing.
        analytics: The analytics report when it was requested.

    """

    table: RouteTable
    output_path: Path
    files: tuple[WrittenFile, ...]
    warnings: tuple[str, ...]
    duration_ms: float
    profile: GenerationProfile
    analytics: dict[str, Any] | None = None


class _Diagnostics:
    """Collects warnings and mirrors them to the console and event log."""

    __slots__ = ("_log", "messages")

    def __init__(self, log: EventLog | None) -> None:
        self._log = log
        self.messages: list[str] = []

    def report(self, kind: str, path: Path | str, message: str, *, echo: bool = True) -> None:
        if echo:
            console.warn(message)
        self.messages.append(message)
        if self._log is not None:
            self._log.append(Diagnostic(
                kind=kind,  # type: ignore[arg-type]
                path=str(path),
                message=message,
                timestamp_ns=now_ns(),
            ))


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def read_route_source(path: Path) -> str | None:
    """Read a route file for query extraction; *None* when unreadable."""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        console.warn(f"Could not read {path}: {exc.strerror or exc}")
        return None


def build_entry(
    route_file: RouteFile,
    root: Path,
    dialect: str,
    *,
    include_query: bool = True,
    diagnostics: _Diagnostics | None = None,
) -> RouteEntry:
    """Turn one discovered file into a ``RouteEntry``.

    Raises:
        RouteError: If the path repeats a parameter name.

    """
    route_path = rewrite(route_file.path, root, dialect)
    params = extract_params(route_path)

    query = ()
    if include_query:
        text = read_route_source(route_file.path)
        if text is not None:
            scan = scan_query_contract(text)
            query = scan.params
            if scan.problem and diagnostics is not None:
                diagnostics.report(
                    "query_contract",
                    route_file.path,
                    f"{route_file.path.name}: {scan.problem}; query params ignored",
                )

    return RouteEntry(
        source_path=route_file.path,
        route_path=route_path,
        params=params,
        query=query,
    )


def discover_entries(
    config: RouteGenConfig,
    *,
    include_query: bool | None = None,
) -> tuple[RouteEntry, ...]:
    """Walk ``config.input`` and build one entry per route file."""
    root = config.input_path
    if include_query is None:
        include_query = config.include_query_params
    files = walk_route_files(root, config.exclude_patterns, config.framework)
    return tuple(
        build_entry(f, root, config.framework, include_query=include_query)
        for f in files
    )


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def write_artifact(
    path: Path,
    text: str,
    kind: str,
    *,
    log: EventLog | None = None,
) -> WrittenFile:
    """Write *text* to *path*, creating parent directories.

    A file left half-written by a failed write is removed.

    Raises:
        OutputError: If the directory or file cannot be written.

    """
    data = text.encode("utf-8")
    opened = False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as fh:
            opened = True
            fh.write(data)
    except OSError as exc:
        if opened:
            with contextlib.suppress(OSError):
                path.unlink(missing_ok=True)
        msg = f"Cannot write {path}: {exc.strerror or exc}"
        raise OutputError(msg) from exc

    if log is not None:
        log.append(FileWritten(
            kind=kind,  # type: ignore[arg-type]
            path=str(path),
            size_bytes=len(data),
            timestamp_ns=now_ns(),
        ))
    return WrittenFile(kind=kind, path=path, size_bytes=len(data))


def write_json_report(
    path: Path,
    data: dict[str, Any],
    *,
    log: EventLog | None = None,
) -> WrittenFile:
    """Write a JSON report (two-space indent, trailing newline)."""
    return write_artifact(path, json.dumps(data, indent=2) + "\n", "report", log=log)


# ---------------------------------------------------------------------------
# Full run
# ---------------------------------------------------------------------------


def generate(
    config: RouteGenConfig,
    *,
    log: EventLog | None = None,
    profiler: GenerationProfiler | None = None,
    trigger_path: str = "",
) -> GenerationResult:
    """Run the full pipeline for *config* and write every requested artifact.

    Raises:
        RouteError: If a route repeats a parameter name.
        OutputError: If an artifact cannot be written.

    """
    if profiler is None:
        profiler = GenerationProfiler(log)
    profiler.begin(trigger_path)
    diagnostics = _Diagnostics(log)
    root = config.input_path
    target = config.resolved_target
    output_path = config.output_path

    with profiler.stage("walk"):
        files = walk_route_files(root, config.exclude_patterns, config.framework)
    if not root.is_dir():
        # the walker has already printed this one
        diagnostics.report("missing_input", root, f"Directory does not exist: {root}", echo=False)

    entries: list[RouteEntry] = []
    with profiler.stage("extract"):
        for route_file in files:
            entries.append(build_entry(
                route_file,
                root,
                config.framework,
                include_query=config.include_query_params,
                diagnostics=diagnostics,
            ))

    with profiler.stage("build"):
        table = build_route_table(entries)
    for collision in table.collisions:
        diagnostics.report(
            "collision",
            collision.winner,
            f"Route name '{collision.name}' is defined more than once; "
            f"{_short(collision.winner)} replaces {_short(collision.replaced)}",
        )
    if target == "python":
        for clash in identifier_clashes(table.namespace):
            diagnostics.report(
                "identifier_clash",
                output_path,
                f"Route names '{clash.replaced}' and '{clash.winner}' both become "
                f"Routes.{clash.identifier} in Python; '{clash.winner}' is kept",
            )
    if log is not None:
        log.append(RoutesDiscovered(
            path=str(root),
            route_count=len(table),
            dynamic_count=sum(1 for e in table.entries if e.params),
            collision_count=len(table.collisions),
            timestamp_ns=now_ns(),
        ))

    pending: list[tuple[Path, str, str]] = []
    analytics = None
    with profiler.stage("emit"):
        pending.append((output_path, render_routes_module(table, target), "routes"))
        if config.generate_tests:
            pending.append((
                generated_test_path(output_path, target),
                render_test_module(table, output_path, target),
                "tests",
            ))
        if config.generate_api_routes:
            api = api_routes(table.entries)
            if api:
                pending.append((
                    api_module_path(output_path, target),
                    render_api_module(api, target),
                    "api",
                ))
            else:
                diagnostics.report("no_api_routes", root, "No API routes detected")
        if config.route_analytics:
            analytics = compute_analytics(table.entries)
            pending.append((
                config.report_path(ANALYTICS_FILENAME),
                json.dumps(analytics, indent=2) + "\n",
                "analytics",
            ))

    written: list[WrittenFile] = []
    with profiler.stage("write"):
        for path, text, kind in pending:
            written.append(write_artifact(path, text, kind, log=log))

    profile = profiler.finish(route_count=len(table))
    return GenerationResult(
        table=table,
        output_path=output_path,
        files=tuple(written),
        warnings=tuple(diagnostics.messages),
        duration_ms=profile.total_ms,
        profile=profile,
        analytics=analytics,
    )


def _short(source: str) -> str:
    return Path(source).name

