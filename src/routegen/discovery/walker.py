"""Directory walker — recursive discovery of candidate route files.

Exclusion patterns are tested against each path *relative to the current
working directory*, for directories (pruning the subtree) and files alike.
A pattern matches anywhere in that path:

    **/api/**   excludes pages/api/users.ts
    **/_*       excludes pages/_app.tsx and pages/_private/x.tsx

Unreadable directories are reported and treated as empty; the walk never
aborts half way.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

from routegen import console
from routegen.discovery.conventions import ROUTE_EXTENSIONS, get_convention
from routegen.routes.model import RouteFile

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

SOURCE_EXTENSIONS: tuple[str, ...] = (".tsx", ".ts", ".jsx", ".js", ".mjs", ".vue", ".svelte")

# Directories never worth scanning for source usage
DEFAULT_SOURCE_EXCLUDES: tuple[str, ...] = ("**/node_modules/**", "**/dist/**", "**/.next/**")


def compile_exclude_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a glob-like exclusion pattern into a search regex.

    ``**`` matches any substring (separators included), ``*`` matches any
    substring within one path segment.  Everything else is literal.
    """
    parts: list[str] = []
    index = 0
    while index < len(pattern):
        if pattern.startswith("**", index):
            parts.append(".*")
            index += 2
        elif pattern[index] == "*":
            parts.append("[^/]*")
            index += 1
        else:
            parts.append(re.escape(pattern[index]))
            index += 1
    return re.compile("".join(parts))


def is_excluded(path: Path | str, patterns: Iterable[re.Pattern[str]]) -> bool:
    """Whether the cwd-relative form of *path* matches any compiled pattern."""
    relative = Path(os.path.relpath(path, os.getcwd())).as_posix()
    return any(p.search(relative) for p in patterns)


def _scan(
    directory: Path,
    extensions: tuple[str, ...],
    patterns: tuple[re.Pattern[str], ...],
) -> Iterator[Path]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        console.warn(f"Error reading directory {directory}: {exc.strerror or exc}")
        return

    for entry in entries:
        path = Path(entry.path)
        if is_excluded(path, patterns):
            continue
        if entry.is_dir():
            yield from _scan(path, extensions, patterns)
        elif entry.is_file() and entry.name.endswith(extensions):
            yield path


def list_source_files(
    root: Path | str,
    extensions: tuple[str, ...] = SOURCE_EXTENSIONS,
    exclude_patterns: Iterable[str] = DEFAULT_SOURCE_EXCLUDES,
) -> tuple[Path, ...]:
    """Recursively list files under *root* with one of *extensions*."""
    root = Path(root).resolve()
    if not root.is_dir():
        console.warn(f"Directory does not exist: {root}")
        return ()
    patterns = tuple(compile_exclude_pattern(p) for p in exclude_patterns)
    return tuple(_scan(root, extensions, patterns))


def _collapse_layouts(files: list[RouteFile]) -> list[RouteFile]:
    # a layout stands for its directory only when no page or route handler does
    routed = {f.path.parent for f in files if f.role in ("page", "route")}
    return [f for f in files if not (f.role == "layout" and f.path.parent in routed)]


def walk_route_files(
    root: Path | str,
    exclude_patterns: Iterable[str] = (),
    dialect: str = "nextjs",
) -> tuple[RouteFile, ...]:
    """Discover route files under *root* for the given *dialect*.

    Returns an empty tuple (with a warning) when *root* does not exist.
    Files are yielded in sorted, depth-first order.  An App Router
    ``layout`` is dropped when its directory also holds a ``page`` or
    ``route`` file, since both resolve to the same path.

    """
    convention = get_convention(dialect)
    files: list[RouteFile] = []
    for path in list_source_files(root, ROUTE_EXTENSIONS, exclude_patterns):
        if not convention.is_route_file(path.name):
            continue
        files.append(RouteFile(path=path, role=convention.role_of(path.name)))
    return tuple(_collapse_layouts(files))
