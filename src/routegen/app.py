"""routegen commands — the functions behind each CLI subcommand.

Every command loads configuration the same way (config file, then keyword
overrides), prints the banner, does its work, and prints a summary to
stderr.  Errors propagate as ``RouteGenError`` for the CLI to report.
"""

from __future__ import annotations

import os
from collections import Counter
from pathlib import Path
from typing import TYPE_CHECKING, Any

from routegen import console, pipeline
from routegen.config_loader import default_config_path, load_config, write_default_config
from routegen.observability import EventLog, compute_aggregate_stats
from routegen.reports import analytics as analytics_report
from routegen.reports import audit as audit_report
from routegen.reports import performance as performance_report
from routegen.reports import validate as validate_report
from routegen.reports.docs import DOCS_FILENAME, render_docs
from routegen.reports.sources import read_source_tree, read_sources

if TYPE_CHECKING:
    from routegen.pipeline import GenerationResult

# Most issue lines printed per report section
_MAX_LISTED = 10


def _print_limited(lines: list[str], header: str, *, noun: str) -> None:
    if not lines:
        return
    console.info(header)
    for line in lines[:_MAX_LISTED]:
        console.detail(line)
    if len(lines) > _MAX_LISTED:
        console.detail(f"... and {len(lines) - _MAX_LISTED} more {noun}")


def generate(config_path: str | None = None, **overrides: Any) -> GenerationResult:
    """Generate the route module (and any requested extras) once.

    Args:
        config_path: Explicit config file; discovered in the cwd otherwise.
        **overrides: Override RouteGenConfig fields.

    """
    config = load_config(config_path, **overrides)
    console.print_banner(config, "generate")

    result = pipeline.generate(config)
    console.print_routes(result)
    if result.analytics is not None:
        console.print_report_summary(
            "Route Analytics", analytics_report.summary_rows(result.analytics),
        )
    console.print_summary(result)
    return result


def watch(config_path: str | None = None, **overrides: Any) -> None:
    """Generate, then regenerate on every change until interrupted."""
    from routegen.watcher import RouteWatcher

    config = load_config(config_path, **overrides)
    console.print_banner(config, "watch")

    log = EventLog()
    watcher = RouteWatcher(
        config,
        log=log,
        reload_config=lambda: load_config(config_path, **overrides),
        on_result=console.print_summary,
    )
    try:
        watcher.run()
    except KeyboardInterrupt:
        pass

    print_watch_session(log)


def print_watch_session(log: EventLog) -> None:
    """Summarize the runs and warnings recorded during a watch session."""
    stats = compute_aggregate_stats(log)
    if not stats["count"]:
        return
    totals = stats["total_ms"]
    rows: list[tuple[str, object]] = [
        ("Runs", stats["count"]),
        ("p50", f"{totals['p50']}ms"),
        ("p95", f"{totals['p95']}ms"),
        ("p99", f"{totals['p99']}ms"),
    ]
    kinds = Counter(d.kind for d in log.diagnostics())
    rows.extend((f"Warnings ({kind})", count) for kind, count in sorted(kinds.items()))
    console.print_report_summary("Watch session", rows)


def audit(source: str = ".", config_path: str | None = None, **overrides: Any) -> dict[str, Any]:
    """Report route usage across the source tree at *source*."""
    config = load_config(config_path, **overrides)
    console.print_banner(config, "audit")

    entries = pipeline.discover_entries(config, include_query=False)
    report = audit_report.compute_audit(entries, read_source_tree(source))

    console.print_report_summary("Route Usage Report", audit_report.summary_rows(report))
    _print_limited(
        [f"{route} ({report['unusedRouteFiles'][route]})" for route in report["unusedRoutes"]],
        "Unused routes:",
        noun="routes",
    )
    _print_limited(
        [f"{item['route']} (used {item['count']} times)" for item in report["mostUsedRoutes"][:5]],
        "Most used routes:",
        noun="routes",
    )
    _print_limited(report["potentialIssues"], "Potential issues:", noun="issues")

    written = pipeline.write_json_report(config.report_path(audit_report.AUDIT_FILENAME), report)
    console.success(f"Audit report saved to: {written.path}")
    return report


def validate(
    source: str = ".",
    *,
    strict: bool = False,
    config_path: str | None = None,
    **overrides: Any,
) -> dict[str, Any]:
    """Check ``Routes.*`` references in *source*; the report's status says if it passed."""
    config = load_config(config_path, **overrides)
    console.print_banner(config, "validate")

    entries = pipeline.discover_entries(config)
    report = validate_report.compute_validation(entries, read_source_tree(source), strict=strict)

    console.print_report_summary("Validation Results", validate_report.summary_rows(report))
    _print_limited(report["errors"], "Validation errors:", noun="errors")
    if strict:
        _print_limited(report["warningsList"], "Warnings:", noun="warnings")

    written = pipeline.write_json_report(
        config.report_path(validate_report.VALIDATION_FILENAME), report,
    )
    console.success(f"Validation report saved to: {written.path}")
    if report["status"] == "PASSED":
        console.success("Validation PASSED - all route references are valid")
    else:
        console.error(f"Validation FAILED with {report['validationErrors']} errors")
    return report


def performance(config_path: str | None = None, **overrides: Any) -> dict[str, Any]:
    """Rank route files by size and complexity heuristics."""
    config = load_config(config_path, **overrides)
    console.print_banner(config, "performance")

    entries = pipeline.discover_entries(config, include_query=False)
    sources = read_sources(entry.source_path for entry in entries)
    metrics = performance_report.analyze_routes(entries, sources)
    report = performance_report.compute_performance(metrics)

    console.print_report_summary(
        "Performance Analysis", performance_report.summary_rows(report),
    )
    cwd = os.getcwd()
    for m in [m for m in metrics if m.optimizations][:5]:
        console.info(os.path.relpath(m.path, cwd))
        console.detail(
            f"Size: {m.size_bytes / 1024:.1f} KB, Complexity: {m.complexity}, "
            f"Lines: {m.lines_of_code}"
        )
        for hint in m.optimizations:
            console.detail(f"- {hint}")

    written = pipeline.write_json_report(
        config.report_path(performance_report.PERFORMANCE_FILENAME), report,
    )
    console.success(f"Performance report saved to: {written.path}")
    return report


def docs(out: str | None = None, config_path: str | None = None, **overrides: Any) -> Path:
    """Write Markdown route documentation to *out* (default ``ROUTES.md``)."""
    config = load_config(config_path, **overrides)
    console.print_banner(config, "docs")

    entries = pipeline.discover_entries(config)
    path = Path(out).resolve() if out else config.report_path(DOCS_FILENAME)
    written = pipeline.write_artifact(path, render_docs(entries), "docs")
    console.success(f"Route documentation generated: {written.path}")
    return written.path


def init(fmt: str = "json", path: str | None = None) -> Path:
    """Write a default config file; refuses to overwrite an existing one."""
    target = Path(path) if path else default_config_path(fmt)
    written = write_default_config(target, fmt)
    console.success(f"Created config file: {written}")
    return written
