"""routegen error hierarchy.

All routegen-specific errors inherit from RouteGenError for easy catching.
"""


class RouteGenError(Exception):
    """Base error for all routegen operations."""


class ConfigError(RouteGenError):
    """Invalid or missing configuration."""


class RouteError(RouteGenError):
    """A discovered route cannot be represented (e.g. duplicate parameter names)."""


class OutputError(RouteGenError):
    """A generated artifact could not be written."""
