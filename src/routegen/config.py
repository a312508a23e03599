"""routegen configuration.

RouteGenConfig is the central configuration object, frozen after creation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from routegen._errors import ConfigError
from routegen._types import Dialect, Target
from routegen.discovery.conventions import DIALECTS

TARGETS: tuple[str, ...] = ("typescript", "python")

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = ("**/api/**", "**/_*")


@dataclass(frozen=True, slots=True)
class RouteGenConfig:
    """Configuration for a routegen run.

    Attributes:
        input: Directory containing the file-based route tree.
        output: Path of the generated route module.
        framework: Naming dialect of the route tree (see ``DIALECTS``).
        exclude_patterns: Glob-like patterns tested against cwd-relative paths.
            ``**`` spans separators, ``*`` stays within one segment.
        include_query_params: Scan route files for a ``QueryParams`` contract.
        generate_tests: Also write a test module next to the output.
        generate_api_routes: Also write an API route helper module.
        route_analytics: Also write ``route-analytics.json``.
        target: ``"typescript"`` or ``"python"``; *None* infers it from the
            output suffix (``.py`` -> python, anything else -> typescript).
        report_dir: Directory that receives JSON and markdown reports.

    """

    input: str = "./pages"
    output: str = "./src/generated-routes.ts"
    framework: Dialect = "nextjs"
    exclude_patterns: tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS
    include_query_params: bool = True
    generate_tests: bool = False
    generate_api_routes: bool = False
    route_analytics: bool = False
    target: Target | None = None
    report_dir: str = field(default=".")

    def __post_init__(self) -> None:
        if self.framework not in DIALECTS:
            choices = ", ".join(DIALECTS)
            msg = f"Unknown framework {self.framework!r} (expected one of: {choices})"
            raise ConfigError(msg)
        if self.target is not None and self.target not in TARGETS:
            msg = f"Unknown target {self.target!r} (expected one of: {', '.join(TARGETS)})"
            raise ConfigError(msg)
        if not isinstance(self.exclude_patterns, tuple):
            object.__setattr__(self, "exclude_patterns", tuple(self.exclude_patterns))

    @property
    def input_path(self) -> Path:
        """Absolute path to the route directory."""
        return Path(self.input).resolve()

    @property
    def output_path(self) -> Path:
        """Absolute path to the generated module."""
        return Path(self.output).resolve()

    @property
    def resolved_target(self) -> str:
        """Emission target, inferred from the output suffix when unset."""
        if self.target is not None:
            return self.target
        return "python" if self.output_path.suffix == ".py" else "typescript"

    def report_path(self, name: str) -> Path:
        """Absolute path for a report file named *name*."""
        return Path(self.report_dir).resolve() / name
