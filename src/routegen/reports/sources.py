"""Source-tree reading shared by the audit, validate and performance reports."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from routegen import console
from routegen.discovery.walker import DEFAULT_SOURCE_EXCLUDES, SOURCE_EXTENSIONS, list_source_files

if TYPE_CHECKING:
    from collections.abc import Iterable


def read_sources(paths: Iterable[Path]) -> dict[Path, str]:
    """Read each file as UTF-8, skipping (with a warning) unreadable ones."""
    texts: dict[Path, str] = {}
    for path in paths:
        try:
            texts[path] = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            console.warn(f"Could not read file: {path} ({exc.strerror or exc})")
    return texts


def read_source_tree(root: Path | str) -> dict[Path, str]:
    """Read every source file under *root*, minus build and vendor directories."""
    return read_sources(list_source_files(root, SOURCE_EXTENSIONS, DEFAULT_SOURCE_EXCLUDES))
