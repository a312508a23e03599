"""routegen — type-safe route helpers from file-based routing.

Scans a Next.js, Remix, SvelteKit or Astro route tree and generates one
path-building function per route, with typed path and query parameters.

Quick start::

    import routegen

    routegen.generate(input="./pages", output="./src/generated-routes.ts")

Library use::

    from routegen import RouteGenConfig
    from routegen.pipeline import generate

    result = generate(RouteGenConfig(input="app", framework="nextjs-app"))
    for name, entry in result.table.terminals():
        print(name, entry.route_path)

Two output targets:

    typescript  Routes object literal + RouteNames / RoutePaths types
    python      Routes class tree + TypedDict records

"""

__version__ = "0.1.0"
__all__ = [
    "RouteGenConfig",
    "RouteGenError",
    "__version__",
    "generate",
    "load_config",
    "watch",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import routegen`` fast and free of import cycles.
    """
    if name == "RouteGenConfig":
        from routegen.config import RouteGenConfig

        return RouteGenConfig

    if name == "RouteGenError":
        from routegen._errors import RouteGenError

        return RouteGenError

    if name == "load_config":
        from routegen.config_loader import load_config

        return load_config

    if name == "generate":
        from routegen.app import generate

        return generate

    if name == "watch":
        from routegen.app import watch

        return watch

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
