"""Generation profiler — per-stage timing of a routegen run.

Records the walk, extract, build, emit and write stages and appends a
``GenerationProfile`` to the ``EventLog`` when the run finishes.

"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from routegen.observability.events import GenerationProfile, now_ns

if TYPE_CHECKING:
    from collections.abc import Iterator

    from routegen.observability.log import EventLog

STAGES: tuple[str, ...] = ("walk", "extract", "build", "emit", "write")


@dataclass(slots=True)
class _Timer:
    """Accumulates timing for a named stage."""

    name: str
    _start: float = 0.0
    elapsed_ms: float = 0.0

    def start(self) -> None:
        self._start = time.perf_counter()

    def stop(self) -> None:
        if self._start > 0:
            self.elapsed_ms += (time.perf_counter() - self._start) * 1000
            self._start = 0.0


class GenerationProfiler:
    """Records per-stage timing for a single generation run.

    Usage::

        profiler = GenerationProfiler(event_log)
        profiler.begin()
        with profiler.stage("walk"):
            files = walk_route_files(...)
        ...
        profiler.finish(route_count=len(table))

    Stages are accumulated, so ``extract`` may be entered once per file.

    """

    __slots__ = ("_log", "_t0", "_timers", "_trigger_path", "_verbose")

    def __init__(self, log: EventLog | None = None, *, verbose: bool = False) -> None:
        self._log = log
        self._verbose = verbose
        self._trigger_path = ""
        self._t0 = 0.0
        self._timers: dict[str, _Timer] = {name: _Timer(name=name) for name in STAGES}

    def begin(self, trigger_path: str = "") -> None:
        """Start profiling a new run."""
        self._trigger_path = trigger_path
        self._t0 = time.perf_counter()
        for timer in self._timers.values():
            timer.elapsed_ms = 0.0

    def start(self, stage: str) -> None:
        timer = self._timers.get(stage)
        if timer is not None:
            timer.start()

    def stop(self, stage: str) -> None:
        timer = self._timers.get(stage)
        if timer is not None:
            timer.stop()

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        """Time the enclosed block as stage *name*."""
        self.start(name)
        try:
            yield
        finally:
            self.stop(name)

    def finish(self, *, route_count: int = 0) -> GenerationProfile:
        """Finish profiling and emit the ``GenerationProfile`` event.

        Returns the profile for inspection.

        """
        total_ms = (time.perf_counter() - self._t0) * 1000 if self._t0 > 0 else 0.0

        profile = GenerationProfile(
            trigger_path=self._trigger_path,
            route_count=route_count,
            walk_ms=self._timers["walk"].elapsed_ms,
            extract_ms=self._timers["extract"].elapsed_ms,
            build_ms=self._timers["build"].elapsed_ms,
            emit_ms=self._timers["emit"].elapsed_ms,
            write_ms=self._timers["write"].elapsed_ms,
            total_ms=total_ms,
            timestamp_ns=now_ns(),
        )

        if self._log is not None:
            self._log.append(profile)
        if self._verbose:
            print_profile(profile)

        return profile


def print_profile(p: GenerationProfile) -> None:
    """Print a one-line timing summary to stderr."""
    name = p.trigger_path.replace("\\", "/").rsplit("/", 1)[-1] or "manual"
    routes = "route" if p.route_count == 1 else "routes"
    stages = ", ".join(f"{s}: {getattr(p, f'{s}_ms'):.0f}ms" for s in STAGES)
    print(
        f"  [{p.total_ms:.0f}ms] {name} -> {p.route_count} {routes} ({stages})",
        file=sys.stderr,
    )


def compute_aggregate_stats(log: EventLog, *, limit: int = 100) -> dict[str, Any]:
    """Latency percentiles and per-stage averages over recent runs."""
    profiles = log.profiles(limit=limit)
    if not profiles:
        return {"count": 0}

    totals = sorted(p.total_ms for p in profiles)
    count = len(totals)

    def percentile(data: list[float], pct: float) -> float:
        idx = int(len(data) * pct / 100)
        return data[min(idx, len(data) - 1)]

    return {
        "count": count,
        "total_ms": {
            "p50": round(percentile(totals, 50), 1),
            "p95": round(percentile(totals, 95), 1),
            "p99": round(percentile(totals, 99), 1),
            "min": round(totals[0], 1),
            "max": round(totals[-1], 1),
        },
        "avg_by_stage_ms": {
            stage: round(sum(getattr(p, f"{stage}_ms") for p in profiles) / count, 1)
            for stage in STAGES
        },
    }
