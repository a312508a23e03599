"""Parameter extractor — ParamSpecs from a canonical route path."""

from __future__ import annotations

from routegen._errors import RouteError
from routegen.routes.model import MARKER_RE, ParamSpec


def extract_params(route_path: str) -> tuple[ParamSpec, ...]:
    """Return the dynamic parameters of *route_path* in left-to-right order.

    ``:name``  -> scalar, required
    ``:name*`` -> catch-all list, optional

    Raises:
        RouteError: If two segments share a parameter name.

    """
    params: list[ParamSpec] = []
    seen: set[str] = set()

    for match in MARKER_RE.finditer(route_path):
        name, star = match.group(1), match.group(2)
        if name in seen:
            msg = f"Duplicate dynamic segment {name!r} in route {route_path!r}"
            raise RouteError(msg)
        seen.add(name)
        if star:
            params.append(ParamSpec(name=name, kind="catch_all", optional=True))
        else:
            params.append(ParamSpec(name=name, kind="scalar", optional=False))

    return tuple(params)
