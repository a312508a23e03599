"""routegen CLI — routegen generate / watch / init / audit / validate / performance / docs.

Entry point for the ``routegen`` command-line interface.  Running
``routegen`` with no command is the same as ``routegen generate``.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

from routegen._errors import RouteGenError


def _config_options() -> argparse.ArgumentParser:
    """Options shared by every command that reads the route tree."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("-c", "--config", dest="config_path", help="Config file path")
    parent.add_argument("-i", "--input", help="Route directory (default: ./pages)")
    parent.add_argument(
        "-f", "--framework",
        help="Routing convention: nextjs, nextjs-app, remix, sveltekit, astro",
    )
    return parent


def _generation_options() -> argparse.ArgumentParser:
    """Options for ``generate`` and ``watch``."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("-o", "--output", help="Generated module path")
    parent.add_argument(
        "--target", choices=("typescript", "python"),
        help="Output language (default: inferred from the output suffix)",
    )
    parent.add_argument(
        "--no-query-params", dest="include_query_params",
        action="store_false", default=None,
        help="Skip QueryParams extraction",
    )
    parent.add_argument(
        "--generate-tests", dest="generate_tests",
        action="store_true", default=None,
        help="Also generate a test module",
    )
    parent.add_argument(
        "--generate-api", dest="generate_api_routes",
        action="store_true", default=None,
        help="Also generate API route helpers",
    )
    parent.add_argument(
        "--analytics", dest="route_analytics",
        action="store_true", default=None,
        help="Also write a route analytics report",
    )
    return parent


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the routegen CLI."""
    parser = argparse.ArgumentParser(
        prog="routegen",
        description="Generate type-safe route helpers from file-based routing.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    config_opts = _config_options()
    generation_opts = _generation_options()

    # routegen generate
    subparsers.add_parser(
        "generate",
        aliases=["gen"],
        parents=[config_opts, generation_opts],
        help="Generate the route module",
    )

    # routegen watch
    subparsers.add_parser(
        "watch",
        aliases=["w"],
        parents=[config_opts, generation_opts],
        help="Regenerate whenever the route tree changes",
    )

    # routegen init
    init_parser = subparsers.add_parser("init", help="Write a default config file")
    init_parser.add_argument(
        "--format", dest="fmt", choices=("json", "yaml", "toml"), default="json",
        help="Config file format",
    )

    # routegen audit
    audit_parser = subparsers.add_parser(
        "audit", parents=[config_opts], help="Report route usage across a source tree",
    )
    audit_parser.add_argument("-s", "--source", default=".", help="Source directory to scan")

    # routegen validate
    validate_parser = subparsers.add_parser(
        "validate", parents=[config_opts], help="Check Routes.* references",
    )
    validate_parser.add_argument("-s", "--source", default=".", help="Source directory to scan")
    validate_parser.add_argument(
        "--strict", action="store_true",
        help="Also warn on missing params and replaceable path literals",
    )

    # routegen performance
    subparsers.add_parser(
        "performance",
        aliases=["perf"],
        parents=[config_opts],
        help="Analyze route file size and complexity",
    )

    # routegen docs
    docs_parser = subparsers.add_parser(
        "docs", parents=[config_opts], help="Generate Markdown route documentation",
    )
    docs_parser.add_argument("--out", help="Output file (default: ROUTES.md)")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from routegen import __version__

    return __version__


_COMMAND_ALIASES: dict[str, str] = {"gen": "generate", "w": "watch", "perf": "performance"}

_OVERRIDE_KEYS: tuple[str, ...] = (
    "input",
    "output",
    "framework",
    "target",
    "include_query_params",
    "generate_tests",
    "generate_api_routes",
    "route_analytics",
)


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Config overrides the user actually passed."""
    values = {key: getattr(args, key, None) for key in _OVERRIDE_KEYS}
    return {key: value for key, value in values.items() if value is not None}


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    command = _COMMAND_ALIASES.get(args.command, args.command) or "generate"

    from routegen import app, console

    config_path = getattr(args, "config_path", None)
    overrides = _overrides(args)
    try:
        if command == "generate":
            app.generate(config_path, **overrides)
        elif command == "watch":
            app.watch(config_path, **overrides)
        elif command == "init":
            app.init(args.fmt)
        elif command == "audit":
            app.audit(args.source, config_path, **overrides)
        elif command == "validate":
            report = app.validate(args.source, strict=args.strict, config_path=config_path, **overrides)
            if report["status"] != "PASSED":
                sys.exit(1)
        elif command == "performance":
            app.performance(config_path, **overrides)
        elif command == "docs":
            app.docs(args.out, config_path, **overrides)
    except RouteGenError as exc:
        console.error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
