"""Tests for routegen.pipeline — end-to-end generation runs."""

from __future__ import annotations

import json
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING

import pytest

from routegen._errors import OutputError, RouteError
from routegen.config import RouteGenConfig
from routegen.observability import EventLog
from routegen.pipeline import (
    build_entry,
    discover_entries,
    generate,
    write_artifact,
    write_json_report,
)
from routegen.routes.model import RouteFile

if TYPE_CHECKING:
    from collections.abc import Callable


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


class TestBuildEntry:
    def test_query_read_from_file(self, pages_dir: Path) -> None:
        entry = build_entry(RouteFile(pages_dir / "search.tsx"), pages_dir, "nextjs")
        assert entry.route_path == "/search"
        assert [q.name for q in entry.query] == ["q", "page", "category"]

    def test_query_skipped(self, pages_dir: Path) -> None:
        entry = build_entry(
            RouteFile(pages_dir / "search.tsx"), pages_dir, "nextjs", include_query=False,
        )
        assert entry.query == ()

    def test_duplicate_param_raises(
        self, in_tmp: Path, make_tree: Callable[[Path, dict[str, str]], Path]
    ) -> None:
        root = make_tree(in_tmp / "pages", {"[id]/[id].tsx": ""})
        with pytest.raises(RouteError):
            build_entry(RouteFile(root / "[id]" / "[id].tsx"), root, "nextjs")


class TestDiscoverEntries:
    def test_default_config(self, pages_dir: Path) -> None:
        entries = discover_entries(RouteGenConfig(input=str(pages_dir)))
        assert [e.route_path for e in entries] == [
            "/about", "/blog/:slug", "/docs/:slug*", "/search",
        ]

    def test_include_query_override(self, pages_dir: Path) -> None:
        entries = discover_entries(RouteGenConfig(input=str(pages_dir)), include_query=False)
        assert all(not e.query for e in entries)


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


class TestWriteArtifact:
    def test_creates_parents(self, tmp_path: Path) -> None:
        path = tmp_path / "a" / "b" / "routes.ts"
        written = write_artifact(path, "export {};\n", "routes")
        assert path.read_text() == "export {};\n"
        assert written.size_bytes == len("export {};\n")
        assert written.kind == "routes"

    def test_logs_file_written(self, tmp_path: Path) -> None:
        log = EventLog()
        write_artifact(tmp_path / "x.ts", "x", "routes", log=log)
        (event,) = log.written()
        assert event.path == str(tmp_path / "x.ts")
        assert event.size_bytes == 1

    def test_unwritable_location(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")
        with pytest.raises(OutputError, match="Cannot write"):
            write_artifact(blocker / "routes.ts", "x", "routes")

    def test_json_report(self, tmp_path: Path) -> None:
        path = tmp_path / "report.json"
        write_json_report(path, {"status": "PASSED"})
        assert path.read_text() == '{\n  "status": "PASSED"\n}\n'


# ---------------------------------------------------------------------------
# Full run
# ---------------------------------------------------------------------------


class TestGenerateTypescript:
    """The default run: Next.js pages tree -> TypeScript module."""

    def test_writes_module(self, pages_dir: Path, in_tmp: Path) -> None:
        result = generate(RouteGenConfig(input="pages", output="src/routes.ts"))
        output = in_tmp / "src" / "routes.ts"
        assert result.output_path == output
        text = output.read_text()
        assert '  about: () => "/about",' in text
        assert "    slug: (params: { slug: string }) => `/blog/${params.slug}`," in text
        assert (
            '    slug: (params?: { slug?: string[] }) => `/docs/${params?.slug?.join("/") ?? ""}`,'
            in text
        )
        assert "if (query.q !== undefined)" in text
        assert "_app" not in text
        assert "users" not in text

    def test_result(self, pages_dir: Path) -> None:
        result = generate(RouteGenConfig(input="pages", output="routes.ts"))
        assert len(result.table) == 4
        assert [f.kind for f in result.files] == ["routes"]
        assert result.warnings == ()
        assert result.analytics is None
        assert result.profile.route_count == 4

    def test_idempotent(self, pages_dir: Path, in_tmp: Path) -> None:
        config = RouteGenConfig(input="pages", output="routes.ts")
        generate(config)
        first = (in_tmp / "routes.ts").read_bytes()
        generate(config)
        assert (in_tmp / "routes.ts").read_bytes() == first

    def test_query_params_disabled(self, pages_dir: Path, in_tmp: Path) -> None:
        generate(RouteGenConfig(input="pages", output="routes.ts", include_query_params=False))
        assert '  search: () => "/search",' in (in_tmp / "routes.ts").read_text()


class TestGeneratePython:
    def test_callable_module(
        self,
        pages_dir: Path,
        in_tmp: Path,
        load_generated: Callable[[Path], ModuleType],
    ) -> None:
        generate(RouteGenConfig(input="pages", output="routes.py"))
        module = load_generated(in_tmp / "routes.py")
        assert module.Routes.about() == "/about"
        assert module.Routes.blog.slug({"slug": "x"}) == "/blog/x"
        assert module.Routes.docs.slug() == "/docs/"
        assert module.Routes.docs.slug({"slug": ["a", "b"]}) == "/docs/a/b"
        assert (
            module.Routes.search({"q": "react", "page": 2, "category": ["tutorial", "beginner"]})
            == "/search?q=react&page=2&category=tutorial&category=beginner"
        )

    def test_explicit_target(self, pages_dir: Path, in_tmp: Path) -> None:
        generate(RouteGenConfig(input="pages", output="routes.txt", target="python"))
        assert "class Routes:" in (in_tmp / "routes.txt").read_text()


class TestNestedRoutes:
    """Index routes and their children each keep a callable."""

    def test_pages_index_beside_dynamic(
        self,
        in_tmp: Path,
        make_tree: Callable[[Path, dict[str, str]], Path],
        load_generated: Callable[[Path], ModuleType],
    ) -> None:
        make_tree(in_tmp / "pages", {"blog/index.tsx": "", "blog/[slug].tsx": ""})
        result = generate(RouteGenConfig(input="pages", output="routes.py", generate_tests=True))
        assert result.warnings == ()
        assert [name for name, _ in result.table.terminals()] == ["blog.slug", "blog"]

        module = load_generated(in_tmp / "routes.py")
        assert module.Routes.blog() == "/blog"
        assert module.Routes.blog.slug({"slug": "hi"}) == "/blog/hi"
        tests = (in_tmp / "test_routes.py").read_text()
        assert "assert Routes.blog() == '/blog'" in tests
        assert "assert Routes.blog.slug({'slug': 'test-slug'}) == '/blog/test-slug'" in tests

    def test_app_router_tree_has_no_warnings(
        self,
        in_tmp: Path,
        make_tree: Callable[[Path, dict[str, str]], Path],
        load_generated: Callable[[Path], ModuleType],
    ) -> None:
        make_tree(in_tmp / "app", {
            "layout.tsx": "",
            "page.tsx": "",
            "blog/layout.tsx": "",
            "blog/page.tsx": "",
            "blog/[slug]/page.tsx": "",
        })
        log = EventLog()
        result = generate(
            RouteGenConfig(input="app", output="routes.py", framework="nextjs-app"), log=log,
        )
        assert result.warnings == ()
        assert log.diagnostics() == []

        module = load_generated(in_tmp / "routes.py")
        assert module.Routes.home() == "/"
        assert module.Routes.blog() == "/blog"
        assert module.Routes.blog.slug({"slug": "hi"}) == "/blog/hi"

    def test_typescript_group_callable(
        self, in_tmp: Path, make_tree: Callable[[Path, dict[str, str]], Path]
    ) -> None:
        make_tree(in_tmp / "pages", {"blog/index.tsx": "", "blog/[slug].tsx": ""})
        generate(RouteGenConfig(input="pages", output="routes.ts"))
        text = (in_tmp / "routes.ts").read_text()
        assert "  blog: Object.assign(" in text
        assert '    () => "/blog",' in text


class TestDiagnostics:
    def test_collision_last_wins(
        self,
        in_tmp: Path,
        make_tree: Callable[[Path, dict[str, str]], Path],
        load_generated: Callable[[Path], ModuleType],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        make_tree(in_tmp / "pages", {"blog/[slug].tsx": "", "blog/slug.tsx": ""})
        log = EventLog()
        result = generate(RouteGenConfig(input="pages", output="routes.py"), log=log)

        module = load_generated(in_tmp / "routes.py")
        assert module.Routes.blog.slug() == "/blog/slug"
        assert len(result.warnings) == 1
        assert "blog.slug" in result.warnings[0]
        assert "slug.tsx replaces [slug].tsx" in result.warnings[0]
        assert "defined more than once" in capsys.readouterr().err

        (diagnostic,) = log.diagnostics()
        assert diagnostic.kind == "collision"
        (discovered,) = log.discoveries()
        assert discovered.collision_count == 1

    def test_python_identifier_clash(
        self,
        in_tmp: Path,
        make_tree: Callable[[Path, dict[str, str]], Path],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        make_tree(in_tmp / "pages", {"my-page.tsx": "", "my_page.tsx": ""})
        log = EventLog()
        result = generate(RouteGenConfig(input="pages", output="routes.py"), log=log)
        (warning,) = result.warnings
        assert "'my-page' and 'my_page' both become Routes.my_page" in warning
        assert "Routes.my_page" in capsys.readouterr().err
        assert [d.kind for d in log.diagnostics()] == ["identifier_clash"]

    def test_identifier_clash_ignored_for_typescript(
        self, in_tmp: Path, make_tree: Callable[[Path, dict[str, str]], Path]
    ) -> None:
        make_tree(in_tmp / "pages", {"my-page.tsx": "", "my_page.tsx": ""})
        result = generate(RouteGenConfig(input="pages", output="routes.ts"))
        assert result.warnings == ()

    def test_missing_input(self, in_tmp: Path) -> None:
        log = EventLog()
        result = generate(RouteGenConfig(input="nope", output="routes.ts"), log=log)
        assert len(result.table) == 0
        assert "export type RoutePaths = never;" in (in_tmp / "routes.ts").read_text()
        (diagnostic,) = log.diagnostics()
        assert diagnostic.kind == "missing_input"

    def test_unsupported_query_contract(
        self, in_tmp: Path, make_tree: Callable[[Path, dict[str, str]], Path]
    ) -> None:
        make_tree(in_tmp / "pages", {
            "search.tsx": "export interface QueryParams { range: { a: number } }\n",
        })
        result = generate(RouteGenConfig(input="pages", output="routes.ts"))
        assert len(result.warnings) == 1
        assert "query params ignored" in result.warnings[0]
        assert '  search: () => "/search",' in (in_tmp / "routes.ts").read_text()

    def test_output_error_propagates(self, pages_dir: Path, in_tmp: Path) -> None:
        (in_tmp / "blocker").write_text("")
        with pytest.raises(OutputError):
            generate(RouteGenConfig(input="pages", output="blocker/routes.ts"))

    def test_route_error_propagates(
        self, in_tmp: Path, make_tree: Callable[[Path, dict[str, str]], Path]
    ) -> None:
        make_tree(in_tmp / "pages", {"[id]/[id].tsx": ""})
        with pytest.raises(RouteError):
            generate(RouteGenConfig(input="pages", output="routes.ts"))


class TestOptionalOutputs:
    def test_generate_tests(self, pages_dir: Path, in_tmp: Path) -> None:
        result = generate(RouteGenConfig(input="pages", output="routes.ts", generate_tests=True))
        assert (in_tmp / "routes.test.ts").is_file()
        assert [f.kind for f in result.files] == ["routes", "tests"]

    def test_generate_api(
        self, in_tmp: Path, make_tree: Callable[[Path, dict[str, str]], Path]
    ) -> None:
        make_tree(in_tmp / "app", {
            "page.tsx": "",
            "api/users/route.ts": "",
        })
        result = generate(RouteGenConfig(
            input="app",
            output="routes.ts",
            framework="nextjs-app",
            exclude_patterns=(),
            generate_api_routes=True,
        ))
        api_text = (in_tmp / "routes-api.ts").read_text()
        assert '  users: () => "/api/users",' in api_text
        assert "api" in [f.kind for f in result.files]

    def test_no_api_routes(self, pages_dir: Path, in_tmp: Path) -> None:
        result = generate(RouteGenConfig(
            input="pages", output="routes.ts", generate_api_routes=True,
        ))
        assert not (in_tmp / "routes-api.ts").exists()
        assert result.warnings == ("No API routes detected",)

    def test_analytics(self, pages_dir: Path, in_tmp: Path) -> None:
        result = generate(RouteGenConfig(input="pages", output="routes.ts", route_analytics=True))
        data = json.loads((in_tmp / "route-analytics.json").read_text())
        assert data == result.analytics
        assert data["totalRoutes"] == 4
        assert data["dynamicRoutes"] == 2
        assert data["routesWithQueryParams"] == 1


class TestProfiling:
    def test_profile_logged(self, pages_dir: Path) -> None:
        log = EventLog()
        generate(RouteGenConfig(input="pages", output="routes.ts"), log=log, trigger_path="x.tsx")
        (profile,) = log.profiles()
        assert profile.trigger_path == "x.tsx"
        assert profile.route_count == 4
        assert profile.total_ms >= profile.walk_ms
