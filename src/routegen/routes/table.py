"""Route table builder — fold route entries into a nested namespace.

Each entry's dotted name (see ``route_name``) is split on ``.``: interior
segments become nested namespaces, the final segment holds the entry.

    /blog/:slug   -> {"blog": {"slug": <RouteEntry>}}
    /             -> {"home": <RouteEntry>}

A name can be a route and a group at once (``/blog`` next to
``/blog/:slug``).  The group then keeps the route under ``INDEX_KEY``:

    /blog, /blog/:slug -> {"blog": {"": <RouteEntry /blog>, "slug": <RouteEntry>}}

Only entries with the same dotted name collide.  The later one (by input
order) replaces the earlier one and the replacement is recorded as a
``Collision`` so callers can report it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from routegen.routes.model import RouteEntry, route_name

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

type RouteNamespace = dict[str, RouteNamespace | RouteEntry]

# Key of a group's own route; never a valid name segment
INDEX_KEY = ""


@dataclass(frozen=True, slots=True)
class Collision:
    """A route name defined by more than one entry.

    Attributes:
        name: Dotted name of the overwritten route.
        replaced: Source path of the entry that was dropped.
        winner: Source path of the entry that now holds the name.

    """

    name: str
    replaced: str
    winner: str


@dataclass(frozen=True, slots=True)
class RouteTable:
    """The IR: ordered entries plus the namespace tree derived from them."""

    entries: tuple[RouteEntry, ...]
    namespace: RouteNamespace
    collisions: tuple[Collision, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def terminals(self) -> Iterator[tuple[str, RouteEntry]]:
        """Yield ``(dotted_name, entry)`` for every entry still in the tree."""
        yield from _walk(self.namespace, ())


def group_index(node: RouteNamespace) -> RouteEntry | None:
    """The route a group itself stands for, if any."""
    entry = node.get(INDEX_KEY)
    return entry if isinstance(entry, RouteEntry) else None


def group_members(node: RouteNamespace) -> Iterator[tuple[str, RouteNamespace | RouteEntry]]:
    """Named members of a group, without its own route."""
    return ((key, child) for key, child in node.items() if key != INDEX_KEY)


def _walk(
    namespace: RouteNamespace, prefix: tuple[str, ...]
) -> Iterator[tuple[str, RouteEntry]]:
    for key, node in namespace.items():
        if isinstance(node, RouteEntry):
            yield ".".join(prefix if key == INDEX_KEY else (*prefix, key)), node
        else:
            yield from _walk(node, (*prefix, key))


def build_namespace(
    entries: Iterable[RouteEntry],
) -> tuple[RouteNamespace, tuple[Collision, ...]]:
    """Fold *entries* into a nested namespace (last write wins per name)."""
    root: RouteNamespace = {}
    collisions: list[Collision] = []

    for entry in entries:
        name = route_name(entry.route_path)
        parts = name.split(".")
        node = root
        for part in parts[:-1]:
            child = node.get(part)
            if isinstance(child, RouteEntry):
                child = {INDEX_KEY: child}
                node[part] = child
            elif child is None:
                child = {}
                node[part] = child
            node = child

        leaf = parts[-1]
        existing = node.get(leaf)
        if isinstance(existing, dict):
            node, leaf = existing, INDEX_KEY
            existing = node.get(INDEX_KEY)
        if isinstance(existing, RouteEntry):
            collisions.append(Collision(
                name=name,
                replaced=str(existing.source_path),
                winner=str(entry.source_path),
            ))
        node[leaf] = entry

    return root, tuple(collisions)


def build_route_table(entries: Iterable[RouteEntry]) -> RouteTable:
    """Build the full IR from discovered entries."""
    ordered = tuple(entries)
    namespace, collisions = build_namespace(ordered)
    return RouteTable(entries=ordered, namespace=namespace, collisions=collisions)
