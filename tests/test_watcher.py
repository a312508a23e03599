"""Tests for routegen.watcher — change categorization and regeneration."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from watchfiles import Change

from routegen._errors import ConfigError
from routegen.config import RouteGenConfig
from routegen.observability import EventLog
from routegen.pipeline import GenerationResult
from routegen.watcher import ChangeEvent, RouteWatcher, categorize_change


@pytest.fixture
def config(pages_dir: Path) -> RouteGenConfig:
    return RouteGenConfig(input="pages", output="routes.ts")


# ---------------------------------------------------------------------------
# Categorization
# ---------------------------------------------------------------------------


class TestCategorizeChange:
    def test_route_file(self, config: RouteGenConfig, pages_dir: Path) -> None:
        assert categorize_change(pages_dir / "about.tsx", config) == "route"

    def test_new_directory(self, config: RouteGenConfig, pages_dir: Path) -> None:
        assert categorize_change(pages_dir / "shop", config) == "route"

    def test_non_route_extension(self, config: RouteGenConfig, pages_dir: Path) -> None:
        assert categorize_change(pages_dir / "styles.css", config) is None

    def test_excluded_file(self, config: RouteGenConfig, pages_dir: Path) -> None:
        assert categorize_change(pages_dir / "_app.tsx", config) is None
        assert categorize_change(pages_dir / "api" / "users.ts", config) is None

    def test_outside_route_tree(self, config: RouteGenConfig, in_tmp: Path) -> None:
        assert categorize_change(in_tmp / "src" / "index.ts", config) is None

    def test_config_file(self, config: RouteGenConfig, in_tmp: Path) -> None:
        assert categorize_change(in_tmp / "routegen.config.json", config) == "config"

    def test_config_name_elsewhere(self, config: RouteGenConfig, in_tmp: Path) -> None:
        assert categorize_change(in_tmp / "sub" / "routegen.yaml", config) is None


# ---------------------------------------------------------------------------
# RouteWatcher
# ---------------------------------------------------------------------------


class TestHandleChanges:
    def test_route_change_regenerates(
        self, config: RouteGenConfig, pages_dir: Path, in_tmp: Path
    ) -> None:
        results: list[GenerationResult] = []
        watcher = RouteWatcher(config, on_result=results.append)
        (pages_dir / "contact.tsx").write_text("")

        events = watcher.handle_changes([(Change.added, str(pages_dir / "contact.tsx"))])

        assert events == [ChangeEvent(pages_dir / "contact.tsx", "created", "route")]
        assert watcher.runs == 1
        assert len(results) == 1
        assert '  contact: () => "/contact",' in (in_tmp / "routes.ts").read_text()

    def test_irrelevant_batch_ignored(self, config: RouteGenConfig, pages_dir: Path) -> None:
        watcher = RouteWatcher(config)
        events = watcher.handle_changes([(Change.modified, str(pages_dir / "styles.css"))])
        assert events == []
        assert watcher.runs == 0

    def test_one_run_per_batch(self, config: RouteGenConfig, pages_dir: Path) -> None:
        watcher = RouteWatcher(config)
        watcher.handle_changes([
            (Change.modified, str(pages_dir / "about.tsx")),
            (Change.modified, str(pages_dir / "search.tsx")),
            (Change.deleted, str(pages_dir / "old.tsx")),
        ])
        assert watcher.runs == 1

    def test_deleted_route_removed(
        self, config: RouteGenConfig, pages_dir: Path, in_tmp: Path
    ) -> None:
        watcher = RouteWatcher(config)
        watcher.regenerate()
        assert "about:" in (in_tmp / "routes.ts").read_text()

        (pages_dir / "about.tsx").unlink()
        watcher.handle_changes([(Change.deleted, str(pages_dir / "about.tsx"))])
        assert "about:" not in (in_tmp / "routes.ts").read_text()

    def test_config_reload(self, config: RouteGenConfig, pages_dir: Path, in_tmp: Path) -> None:
        reloaded = RouteGenConfig(input="pages", output="routes.py")
        watcher = RouteWatcher(config, reload_config=lambda: reloaded)
        watcher.handle_changes([(Change.modified, str(in_tmp / "routegen.config.json"))])
        assert watcher.config is reloaded
        assert (in_tmp / "routes.py").is_file()

    def test_failed_reload_keeps_config(
        self,
        config: RouteGenConfig,
        in_tmp: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        def broken() -> RouteGenConfig:
            raise ConfigError("Invalid config file")

        watcher = RouteWatcher(config, reload_config=broken)
        watcher.handle_changes([(Change.modified, str(in_tmp / "routegen.config.json"))])
        assert watcher.config is config
        assert watcher.runs == 1
        assert "Config reload failed" in capsys.readouterr().err


class TestRegenerate:
    def test_logs_profile(self, config: RouteGenConfig) -> None:
        log = EventLog()
        watcher = RouteWatcher(config, log=log)
        result = watcher.regenerate("/pages/about.tsx")
        assert result is not None
        (profile,) = log.profiles()
        assert profile.trigger_path == "/pages/about.tsx"

    def test_errors_reported_not_raised(
        self,
        in_tmp: Path,
        pages_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        (in_tmp / "blocker").write_text("")
        watcher = RouteWatcher(RouteGenConfig(input="pages", output="blocker/routes.ts"))
        assert watcher.regenerate() is None
        assert watcher.runs == 0
        assert "Cannot write" in capsys.readouterr().err


class TestWatchPaths:
    def test_route_dir_and_config(self, config: RouteGenConfig, in_tmp: Path) -> None:
        (in_tmp / "routegen.config.json").write_text(json.dumps({}))
        watcher = RouteWatcher(config)
        assert watcher.watch_paths() == [
            config.input_path,
            in_tmp / "routegen.config.json",
        ]

    def test_missing_route_dir_watches_cwd(self, in_tmp: Path) -> None:
        watcher = RouteWatcher(RouteGenConfig(input="nope"))
        assert watcher.watch_paths() == [in_tmp]


class TestLifecycle:
    def test_not_running_initially(self, config: RouteGenConfig) -> None:
        assert RouteWatcher(config).is_running is False

    def test_stop_without_start(self, config: RouteGenConfig) -> None:
        watcher = RouteWatcher(config)
        watcher.stop()
        assert watcher.is_running is False
