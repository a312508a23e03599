"""Shared test fixtures for routegen."""

from __future__ import annotations

import importlib.util
import itertools
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable

SEARCH_PAGE = """\
import { useRouter } from 'next/router';

export interface QueryParams {
  q: string;
  page?: number;
  category?: string[];
}

export default function Search() {
  return null;
}
"""

_module_counter = itertools.count()


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Create *files* (relative path -> text) under *root*."""
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    return root


@pytest.fixture
def make_tree() -> Callable[[Path, dict[str, str]], Path]:
    """Fixture form of ``write_tree`` for use inside test modules."""
    return write_tree


@pytest.fixture
def in_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test with the temp directory as the working directory.

    Exclusion patterns are matched against cwd-relative paths, so most
    discovery tests need a predictable cwd.
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def pages_dir(in_tmp: Path) -> Path:
    """A Next.js pages tree with the four canonical example routes.

    Also contains ``_app.tsx`` and ``api/users.ts``, which the default
    exclusion patterns drop.
    """
    return write_tree(in_tmp / "pages", {
        "about.tsx": "export default function About() { return null; }\n",
        "blog/[slug].tsx": "export default function Post() { return null; }\n",
        "docs/[[...slug]].tsx": "export default function Docs() { return null; }\n",
        "search.tsx": SEARCH_PAGE,
        "_app.tsx": "export default function App() { return null; }\n",
        "api/users.ts": "export default function handler() {}\n",
    })


@pytest.fixture
def load_generated() -> Callable[[Path], ModuleType]:
    """Import a generated Python module from an arbitrary path."""

    def load(path: Path) -> ModuleType:
        name = f"_generated_routes_{next(_module_counter)}"
        spec = importlib.util.spec_from_file_location(name, path)
        assert spec is not None and spec.loader is not None
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    return load
