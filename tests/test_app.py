"""Tests for routegen.app — command functions and their reports."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

import routegen
from routegen import app
from routegen._errors import ConfigError
from routegen.observability import Diagnostic, EventLog, GenerationProfile


class TestGenerate:
    def test_prints_routes_and_summary(
        self, pages_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        result = app.generate(output="routes.ts")
        err = capsys.readouterr().err
        assert "routegen" in err
        assert "/blog/:slug" in err
        assert "Params: slug" in err
        assert "Query: q: string, page?: number, category?: string[]" in err
        assert "4 routes discovered (2 dynamic)" in err
        assert len(result.table) == 4

    def test_analytics_summary(
        self, pages_dir: Path, in_tmp: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        app.generate(output="routes.ts", route_analytics=True)
        assert "Route Analytics" in capsys.readouterr().err
        assert (in_tmp / "route-analytics.json").is_file()


class TestWatchSession:
    def test_runs_and_warnings_summarized(self, capsys: pytest.CaptureFixture[str]) -> None:
        log = EventLog()
        for ts, total in ((1, 10.0), (2, 30.0)):
            log.append(GenerationProfile("", 4, 1.0, 1.0, 1.0, 1.0, 1.0, total, ts))
        log.append(Diagnostic(kind="collision", path="/p/a.tsx", message="dup", timestamp_ns=3))
        log.append(Diagnostic(kind="collision", path="/p/b.tsx", message="dup", timestamp_ns=4))
        app.print_watch_session(log)
        err = capsys.readouterr().err
        assert "Watch session" in err
        assert "Runs: 2" in err
        assert "Warnings (collision): 2" in err

    def test_nothing_recorded(self, capsys: pytest.CaptureFixture[str]) -> None:
        app.print_watch_session(EventLog())
        assert capsys.readouterr().err == ""


class TestAudit:
    def test_report_written(
        self, pages_dir: Path, in_tmp: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (in_tmp / "src").mkdir()
        (in_tmp / "src" / "nav.tsx").write_text("<a href='/about'>About</a> '/nowhere'")
        report = app.audit("src")

        saved = json.loads((in_tmp / "route-audit.json").read_text())
        assert saved == report
        assert report["usage"]["/about"]["count"] == 1
        assert "/search" in report["unusedRoutes"]
        err = capsys.readouterr().err
        assert "Unused routes:" in err
        assert "Potential issues:" in err


class TestValidate:
    def test_strict_warnings_printed(
        self, pages_dir: Path, in_tmp: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (in_tmp / "src").mkdir()
        (in_tmp / "src" / "nav.tsx").write_text("Routes.blog.slug()")
        report = app.validate("src", strict=True)
        assert report["status"] == "PASSED"
        assert "requires parameters" in capsys.readouterr().err


class TestPerformance:
    def test_report_written(self, pages_dir: Path, in_tmp: Path) -> None:
        report = app.performance()
        assert report["summary"]["totalRoutes"] == 4
        assert (in_tmp / "route-performance.json").is_file()


class TestDocs:
    def test_default_location(self, pages_dir: Path, in_tmp: Path) -> None:
        path = app.docs()
        assert path == in_tmp / "ROUTES.md"
        assert "## Blog" in path.read_text()


class TestInit:
    def test_writes_default(self, in_tmp: Path) -> None:
        path = app.init("toml")
        assert path == in_tmp / "routegen.toml"
        assert path.read_text().startswith("[routegen]\n")

    def test_unwritable_location(self, in_tmp: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot write config file"):
            app.init("json", str(in_tmp / "missing" / "routegen.config.json"))


class TestPackageApi:
    def test_lazy_exports(self) -> None:
        assert routegen.generate is app.generate
        assert routegen.RouteGenConfig().framework == "nextjs"

    def test_unknown_attribute(self) -> None:
        with pytest.raises(AttributeError):
            routegen.nonexistent  # noqa: B018
