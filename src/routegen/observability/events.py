"""Event model for generation runs.

All events are frozen dataclasses carrying a monotonic ``timestamp_ns``,
so they can be shared with the watcher thread without copying.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RoutesDiscovered:
    """The route tree was scanned.

    Attributes:
        path: Route directory that was scanned.
        route_count: Entries discovered.
        dynamic_count: Entries with at least one path parameter.
        collision_count: Namespace keys written more than once.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    route_count: int
    dynamic_count: int
    collision_count: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A non-fatal problem found during a run.

    Attributes:
        kind: What was detected.
        path: File the problem relates to.
        message: Human-readable description.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: Literal[
        "collision", "identifier_clash", "query_contract", "missing_input", "no_api_routes"
    ]
    path: str
    message: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileWritten:
    """A generated artifact was written."""

    kind: Literal["routes", "tests", "api", "analytics", "report", "docs"]
    path: str
    size_bytes: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class GenerationProfile:
    """Per-stage timing of one generation run.

    Attributes:
        trigger_path: File whose change triggered the run ('' for a manual run).
        route_count: Entries emitted.
        walk_ms: Directory walk.
        extract_ms: Path rewriting plus param and query extraction.
        build_ms: Namespace assembly.
        emit_ms: Rendering the generated source.
        write_ms: Writing every artifact.
        total_ms: Wall time from start to finish.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    trigger_path: str
    route_count: int
    walk_ms: float
    extract_ms: float
    build_ms: float
    emit_ms: float
    write_ms: float
    total_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type RouteGenEvent = RoutesDiscovered | Diagnostic | FileWritten | GenerationProfile


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
