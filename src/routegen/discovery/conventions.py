"""Convention rewriter — file paths to canonical route paths.

Each supported framework is a small strategy class with the same contract:
``substitute()`` turns an extensionless, root-relative POSIX path into the
normalized marker form (``:name`` for a scalar segment, ``:name*`` for an
optional catch-all), and ``is_route_file()`` decides whether a filename is
routable.

    nextjs       pages/blog/[slug].tsx            -> /blog/:slug
    nextjs-app   app/(shop)/cart/[[...id]]/page.tsx -> /cart/:id*
    remix        routes/blog.$slug.tsx             -> /blog/:slug
    sveltekit    routes/[lang=locale]/[...rest].ts -> /:lang/:rest*
    astro        pages/docs/[...slug].ts           -> /docs/:slug*

Adding a dialect means adding one subclass to ``DIALECTS``.
"""

from __future__ import annotations

import re
from pathlib import Path

from routegen._errors import ConfigError

ROUTE_EXTENSIONS: tuple[str, ...] = (".tsx", ".ts", ".jsx", ".js")

# Framework files that never define a navigable path
_CONVENTION_FILES: frozenset[str] = frozenset({
    "loading",
    "error",
    "not-found",
    "template",
    "global-error",
})

_BRACKET_OPTIONAL_CATCH_ALL = re.compile(r"\[\[\.\.\.([^\[\]]+)\]\]")
_BRACKET_CATCH_ALL = re.compile(r"\[\.\.\.([^\[\]]+)\]")
_BRACKET_OPTIONAL = re.compile(r"\[\[([^\[\]]+)\]\]")
_BRACKET_SCALAR = re.compile(r"\[([^\[\]]+)\]")


def strip_extension(name: str) -> str:
    """Remove a recognised route extension from *name*, if present."""
    for ext in ROUTE_EXTENSIONS:
        if name.endswith(ext):
            return name[: -len(ext)]
    return name


class Convention:
    """Base strategy: file-path conventions of one framework."""

    name: str = ""

    def substitute(self, relative: str) -> str:
        """Rewrite dynamic segments of *relative* into marker form."""
        raise NotImplementedError

    def is_route_file(self, filename: str) -> bool:
        """Whether *filename* can define a navigable path."""
        return strip_extension(filename) not in _CONVENTION_FILES

    def role_of(self, filename: str) -> str | None:
        """Role tag of *filename* (``None`` for dialects without roles)."""
        return None


class NextPagesConvention(Convention):
    """Next.js Pages Router: ``[id]``, ``[...slug]``, ``[[...slug]]``."""

    name = "nextjs"

    def substitute(self, relative: str) -> str:
        relative = _BRACKET_OPTIONAL_CATCH_ALL.sub(r":\1*", relative)
        relative = _BRACKET_CATCH_ALL.sub(r":\1*", relative)
        return _BRACKET_SCALAR.sub(r":\1", relative)


class NextAppConvention(NextPagesConvention):
    """Next.js App Router: folder segments plus ``page``/``layout``/``route`` files.

    Route groups ``(group)`` and parallel-route slots ``@slot`` do not
    contribute to the URL and are dropped.
    """

    name = "nextjs-app"

    _ROLES: frozenset[str] = frozenset({"page", "layout", "route"})
    _ROLE_SEGMENTS: frozenset[str] = frozenset({
        "page",
        "layout",
        "route",
        "loading",
        "error",
        "not-found",
        "template",
        "default",
    })

    def is_route_file(self, filename: str) -> bool:
        return strip_extension(filename) in self._ROLES

    def role_of(self, filename: str) -> str | None:
        stem = strip_extension(filename)
        return stem if stem in self._ROLES else None

    def substitute(self, relative: str) -> str:
        segments = [
            s for s in relative.split("/")
            if not (s.startswith("(") and s.endswith(")")) and not s.startswith("@")
        ]
        if segments and segments[-1] in self._ROLE_SEGMENTS:
            segments.pop()
        return super().substitute("/".join(segments))


class RemixConvention(Convention):
    """Remix flat routes: ``.`` separates segments, ``$`` marks params.

    ``blog.$slug`` -> ``blog/:slug``, ``files.$`` -> ``files/:splat*``,
    ``($lang).about`` -> ``:lang/about``, ``_auth.login`` -> ``login``,
    ``_index`` -> ``index``, ``blog_.edit`` -> ``blog/edit``.
    """

    name = "remix"

    def substitute(self, relative: str) -> str:
        out: list[str] = []
        for segment in _split_remix(relative):
            if segment == "_index":
                out.append("index")
            elif segment == "route" and out:
                # folder routes: routes/blog.$slug/route.tsx
                continue
            elif segment == "$":
                out.append(":splat*")
            elif segment.startswith("($") and segment.endswith(")"):
                out.append(":" + segment[2:-1])
            elif segment.startswith("$"):
                out.append(":" + segment[1:])
            elif segment.startswith("_"):
                continue
            else:
                out.append(segment.removesuffix("_"))
        return "/".join(out)


def _split_remix(relative: str) -> list[str]:
    """Split a Remix route name on ``.`` and ``/``, honouring ``[...]`` escapes."""
    segments: list[str] = []
    current: list[str] = []
    escaped = False
    for char in relative:
        if char == "[" and not escaped:
            escaped = True
        elif char == "]" and escaped:
            escaped = False
        elif char in "./" and not escaped:
            segments.append("".join(current))
            current = []
        else:
            current.append(char)
    segments.append("".join(current))
    return [s for s in segments if s]


class SvelteKitConvention(Convention):
    """SvelteKit: ``[...rest]``, ``[[optional]]``, ``[param=matcher]``."""

    name = "sveltekit"

    def substitute(self, relative: str) -> str:
        relative = _BRACKET_CATCH_ALL.sub(r":\1*", relative)
        relative = _BRACKET_OPTIONAL.sub(r":\1", relative)
        relative = _BRACKET_SCALAR.sub(r":\1", relative)
        # [param=matcher] -> :param
        return re.sub(r":([A-Za-z0-9_-]+)=[A-Za-z0-9_-]+", r":\1", relative)


class AstroConvention(Convention):
    """Astro: ``[param]`` and rest parameters ``[...path]``."""

    name = "astro"

    def substitute(self, relative: str) -> str:
        relative = _BRACKET_CATCH_ALL.sub(r":\1*", relative)
        return _BRACKET_SCALAR.sub(r":\1", relative)


DIALECTS: dict[str, Convention] = {
    convention.name: convention
    for convention in (
        NextPagesConvention(),
        NextAppConvention(),
        RemixConvention(),
        SvelteKitConvention(),
        AstroConvention(),
    )
}


def get_convention(dialect: str) -> Convention:
    """Return the strategy registered for *dialect*.

    Raises:
        ConfigError: If *dialect* is not one of ``DIALECTS``.

    """
    try:
        return DIALECTS[dialect]
    except KeyError:
        msg = f"Unknown framework {dialect!r} (expected one of: {', '.join(DIALECTS)})"
        raise ConfigError(msg) from None


def canonicalize(relative: str, dialect: str = "nextjs") -> str:
    """Turn an extensionless root-relative path into a canonical route path.

    Pure and total: the same input always yields the same output, and static
    paths are fixed points (``canonicalize(canonicalize(p)) == canonicalize(p)``).

    """
    route = get_convention(dialect).substitute(relative.strip("/"))

    if route == "index":
        route = "/"
    elif route.endswith("/index"):
        route = route[: -len("/index")]

    if not route.startswith("/"):
        route = "/" + route
    return route


def rewrite(file_path: Path | str, root_dir: Path | str, dialect: str = "nextjs") -> str:
    """Map *file_path* under *root_dir* to its canonical route path.

    ``rewrite("pages/index.tsx", "pages")``       -> ``/``
    ``rewrite("pages/blog/index.tsx", "pages")``  -> ``/blog``
    ``rewrite("pages/blog/[slug].tsx", "pages")`` -> ``/blog/:slug``

    """
    relative = Path(file_path).relative_to(Path(root_dir)).as_posix()
    return canonicalize(strip_extension(relative), dialect)
