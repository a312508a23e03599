"""Event log — bounded, thread-safe record of generation runs.

The watcher regenerates on its worker thread while ``app.watch`` reads the
session summary from the main thread, so reads copy under the lock.

"""

import threading
from collections import deque

from routegen.observability.events import (
    Diagnostic,
    FileWritten,
    GenerationProfile,
    RouteGenEvent,
    RoutesDiscovered,
)


class EventLog:
    """Ring buffer of the events emitted by ``pipeline.generate``.

    Args:
        max_events: Events retained; the oldest are discarded first.

    """

    __slots__ = ("_events", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: deque[RouteGenEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: RouteGenEvent) -> None:
        with self._lock:
            self._events.append(event)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def _snapshot[E](self, event_type: type[E], since_ns: int) -> list[E]:
        with self._lock:
            events = list(self._events)
        return [
            e for e in events
            if isinstance(e, event_type) and e.timestamp_ns >= since_ns  # type: ignore[attr-defined]
        ]

    def diagnostics(self, *, kind: str | None = None, since_ns: int = 0) -> list[Diagnostic]:
        """Warnings raised by runs, oldest first.

        Args:
            kind: Only diagnostics of this kind (``collision``, ...).
            since_ns: Only diagnostics recorded at or after this timestamp,
                e.g. the start of the latest run.

        """
        found = self._snapshot(Diagnostic, since_ns)
        return [d for d in found if kind is None or d.kind == kind]

    def written(self, *, since_ns: int = 0) -> list[FileWritten]:
        """Artifacts written, oldest first."""
        return self._snapshot(FileWritten, since_ns)

    def discoveries(self, *, since_ns: int = 0) -> list[RoutesDiscovered]:
        """One ``RoutesDiscovered`` per run, oldest first."""
        return self._snapshot(RoutesDiscovered, since_ns)

    def profiles(self, *, limit: int = 100) -> list[GenerationProfile]:
        """Timing of the latest *limit* runs, most recent first."""
        return self._snapshot(GenerationProfile, 0)[::-1][:limit]
