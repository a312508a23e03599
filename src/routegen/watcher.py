"""File watcher — regenerates routes when the route tree changes.

Monitors the route directory (and the config file, when there is one) with
watchfiles.  Each debounced batch containing at least one relevant change
triggers one full pipeline run:

- Route file created, modified or deleted -> regenerate
- Config file changed -> reload config, then regenerate

Runs are sequential; a batch that arrives during a run is handled after it.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change, watch

from routegen import console
from routegen._errors import RouteGenError
from routegen.config_loader import CONFIG_FILENAMES
from routegen.discovery.conventions import ROUTE_EXTENSIONS
from routegen.discovery.walker import compile_exclude_pattern, is_excluded
from routegen.pipeline import generate

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from routegen.config import RouteGenConfig
    from routegen.observability.log import EventLog
    from routegen.pipeline import GenerationResult


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A relevant file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.
        category: ``route`` for the route tree, ``config`` for a config file.

    """

    path: Path
    kind: Literal["created", "modified", "deleted"]
    category: Literal["route", "config"]


_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified", "deleted"]] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def categorize_change(path: Path, config: RouteGenConfig) -> str | None:
    """Determine whether a changed path matters, and how.

    Returns None for files outside the route tree, excluded files, and
    files whose extension cannot be a route.  Paths without a suffix are
    treated as directories and count as route changes.

    """
    if path.name in CONFIG_FILENAMES and path.parent == Path.cwd():
        return "config"

    try:
        path.relative_to(config.input_path)
    except ValueError:
        return None

    if path.suffix and path.suffix not in ROUTE_EXTENSIONS:
        return None
    patterns = [compile_exclude_pattern(p) for p in config.exclude_patterns]
    if is_excluded(path, patterns):
        return None
    return "route"


class RouteWatcher:
    """Watches the route tree and re-runs the pipeline on change.

    Use ``run()`` to block in the foreground (the CLI ``watch`` command) or
    ``start()``/``stop()`` to run in a background thread.

    Args:
        config: Configuration for every run.
        log: Event log passed to each run.
        reload_config: Called to rebuild the config when a config file
            changes; without it the original config is kept.
        on_result: Called with each successful run's result.

    """

    def __init__(
        self,
        config: RouteGenConfig,
        *,
        log: EventLog | None = None,
        reload_config: Callable[[], RouteGenConfig] | None = None,
        on_result: Callable[[GenerationResult], None] | None = None,
    ) -> None:
        self._config = config
        self._log = log
        self._reload_config = reload_config
        self._on_result = on_result
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.runs = 0

    @property
    def config(self) -> RouteGenConfig:
        return self._config

    @property
    def is_running(self) -> bool:
        """Whether the watcher background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start watching in a background thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run,
            name="routegen-watcher",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the watcher to stop and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    def watch_paths(self) -> list[Path]:
        """Directories and files handed to watchfiles."""
        root = self._config.input_path
        paths = [root if root.is_dir() else Path.cwd()]
        for name in CONFIG_FILENAMES:
            candidate = Path.cwd() / name
            if candidate.is_file():
                paths.append(candidate)
        return paths

    def run(self) -> None:
        """Generate once, then regenerate after each relevant change batch."""
        self.regenerate()
        for raw_changes in watch(
            *self.watch_paths(),
            stop_event=self._stop_event,
            debounce=300,
            step=100,
        ):
            self.handle_changes(raw_changes)

    def handle_changes(self, raw_changes: Iterable[tuple[Change, str]]) -> list[ChangeEvent]:
        """Categorize a watchfiles batch and regenerate if anything matters."""
        events: list[ChangeEvent] = []
        for change_type, path_str in raw_changes:
            path = Path(path_str)
            category = categorize_change(path, self._config)
            if category is None:
                continue
            kind = _CHANGE_KIND_MAP.get(change_type, "modified")
            events.append(ChangeEvent(path=path, kind=kind, category=category))  # type: ignore[arg-type]

        if not events:
            return events

        if any(e.category == "config" for e in events) and self._reload_config is not None:
            try:
                self._config = self._reload_config()
            except RouteGenError as exc:
                console.error(f"Config reload failed, keeping previous config: {exc}")
            else:
                console.info("Config reloaded")

        trigger = events[0].path
        console.info(f"{trigger.name} {events[0].kind}, regenerating...")
        self.regenerate(str(trigger))
        return events

    def regenerate(self, trigger_path: str = "") -> GenerationResult | None:
        """Run the pipeline once; errors are reported and the watch goes on."""
        try:
            result = generate(self._config, log=self._log, trigger_path=trigger_path)
        except RouteGenError as exc:
            console.error(str(exc))
            return None
        self.runs += 1
        if self._on_result is not None:
            self._on_result(result)
        return result
