"""Observability — events, an in-memory event log, and a run profiler.

Every generation run can record what it discovered, what it wrote, and
any non-fatal problems, plus per-stage timing.

Quick Start:
    >>> from routegen.observability import EventLog, GenerationProfiler
    >>> log = EventLog()
    >>> profiler = GenerationProfiler(log)
    >>> # pass log/profiler to routegen.pipeline.generate(...)

"""

from routegen.observability.events import (
    Diagnostic,
    FileWritten,
    GenerationProfile,
    RouteGenEvent,
    RoutesDiscovered,
    now_ns,
)
from routegen.observability.log import EventLog
from routegen.observability.profiler import GenerationProfiler, compute_aggregate_stats

__all__ = [
    "Diagnostic",
    "EventLog",
    "FileWritten",
    "GenerationProfile",
    "GenerationProfiler",
    "RouteGenEvent",
    "RoutesDiscovered",
    "compute_aggregate_stats",
    "now_ns",
]
