"""Shared type definitions for routegen."""

from typing import Literal

# Naming convention used by the scanned route tree
type Dialect = Literal["nextjs", "nextjs-app", "remix", "sveltekit", "astro"]

# Language of the generated route module
type Target = Literal["typescript", "python"]

# Canonical route path (e.g., "/blog/:slug", "/docs/:slug*")
type RoutePath = str

# Dotted namespace name (e.g., "blog.slug", "home")
type RouteName = str

# Role of an App Router file ("page", "layout", "route")
type FileRole = str
