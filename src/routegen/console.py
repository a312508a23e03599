"""Console output — colored, mode-aware status lines on stderr.

Prints the startup banner, per-run summaries, and warning/error lines.
Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from routegen.config import RouteGenConfig
    from routegen.pipeline import GenerationResult


# ---------------------------------------------------------------------------
# ANSI helpers — respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_RED = "\033[31m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""


# ---------------------------------------------------------------------------
# Mode badges
# ---------------------------------------------------------------------------

_MODE_STYLES: dict[str, tuple[str, str]] = {
    "generate": (_GREEN, "generate"),
    "watch": (_CYAN, "watch"),
    "audit": (_YELLOW, "audit"),
    "validate": (_YELLOW, "validate"),
    "performance": (_YELLOW, "perf"),
    "docs": (_CYAN, "docs"),
}


def _mode_badge(mode: str) -> str:
    """Return a styled [mode] badge."""
    color, label = _MODE_STYLES.get(mode, (_DIM, mode))
    return f"{color}[{label}]{_RESET}"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


# ---------------------------------------------------------------------------
# Status lines
# ---------------------------------------------------------------------------

def info(message: str) -> None:
    """Print an informational line."""
    print(f"  {_CYAN}{message}{_RESET}", file=sys.stderr)


def detail(message: str) -> None:
    """Print a dimmed, indented detail line."""
    print(f"    {_DIM}{message}{_RESET}", file=sys.stderr)


def success(message: str) -> None:
    """Print a success line."""
    print(f"  {_GREEN}{message}{_RESET}", file=sys.stderr)


def warn(message: str) -> None:
    """Print a warning line."""
    print(f"  {_YELLOW}!{_RESET} {message}", file=sys.stderr)


def error(message: str) -> None:
    """Print an error line."""
    print(f"  {_RED}{_BOLD}error:{_RESET} {_RED}{message}{_RESET}", file=sys.stderr)


# ---------------------------------------------------------------------------
# Banner and summaries
# ---------------------------------------------------------------------------

def print_banner(config: RouteGenConfig, mode: str) -> None:
    """Print the routegen startup banner to stderr.

    Args:
        config: Resolved RouteGenConfig.
        mode: CLI command being run (``generate``, ``watch``, ...).

    """
    from routegen import __version__

    badge = _mode_badge(mode)
    lines: list[str] = [
        "",
        f"  {_BOLD}routegen{_RESET} {_DIM}v{__version__}{_RESET}  {badge}",
        f"  {_DIM}{'─' * 43}{_RESET}",
        f"  {_DIM}├─{_RESET} input: {_DIM}{config.input_path}{_RESET}",
        f"  {_DIM}├─{_RESET} framework: {config.framework}",
    ]
    if mode in ("generate", "watch"):
        lines.append(f"  {_DIM}├─{_RESET} target: {config.resolved_target}")
        lines.append(f"  {_DIM}└─{_RESET} output: {_DIM}{config.output_path}{_RESET}")
    else:
        lines[-1] = lines[-1].replace("├─", "└─")

    if mode == "watch":
        lines.append("")
        lines.append(f"  {_DIM}Watching for changes... (Ctrl+C to stop){_RESET}")

    lines.append("")
    print("\n".join(lines), file=sys.stderr)


def print_routes(result: GenerationResult) -> None:
    """Print one line per discovered route (``file -> /path``)."""
    cwd = os.getcwd()
    for entry in result.table.entries:
        source = os.path.relpath(entry.source_path, cwd)
        print(f"  {source} {_DIM}->{_RESET} {entry.route_path}", file=sys.stderr)
        if entry.params:
            params = ", ".join(
                f"{p.name}{'?' if p.optional else ''}{'[]' if p.is_catch_all else ''}"
                for p in entry.params
            )
            detail(f"Params: {params}")
        if entry.query:
            query = ", ".join(
                f"{q.name}{'?' if q.optional else ''}: {q.type}" for q in entry.query
            )
            detail(f"Query: {query}")


def print_summary(result: GenerationResult) -> None:
    """Print the run completion summary to stderr."""
    table = result.table
    dynamic = sum(1 for e in table.entries if e.params)
    lines = [
        "",
        "─" * 41,
        f"  {_plural(len(table), 'route')} discovered ({dynamic} dynamic)",
    ]
    for written in result.files:
        lines.append(f"  {_GREEN}wrote{_RESET} {written.kind}: {_DIM}{written.path}{_RESET}")
    if result.warnings:
        lines.append(f"  {_YELLOW}{_plural(len(result.warnings), 'warning')}{_RESET}")
    lines.append(f"  Done in {result.duration_ms:.0f}ms")

    print("\n".join(lines), file=sys.stderr)


def print_report_summary(title: str, rows: Iterable[tuple[str, object]]) -> None:
    """Print a titled block of ``label: value`` rows."""
    lines = ["", f"  {_CYAN}{_BOLD}{title}{_RESET}"]
    lines.extend(f"  {_DIM}├─{_RESET} {label}: {value}" for label, value in rows)
    lines.append("")
    print("\n".join(lines), file=sys.stderr)
