"""Load RouteGenConfig from a config file if present.

Merges file config with CLI kwargs.  CLI overrides file; ``None`` overrides
(options the user did not pass) are ignored.
"""

from __future__ import annotations

import json
import tomllib
from dataclasses import fields
from pathlib import Path

import yaml

from routegen._errors import ConfigError
from routegen.config import RouteGenConfig

CONFIG_FILENAMES: tuple[str, ...] = (
    "routegen.config.json",
    "routegen.yaml",
    "routegen.yml",
    "routegen.toml",
)

_FIELD_NAMES: frozenset[str] = frozenset(f.name for f in fields(RouteGenConfig))

# camelCase spellings accepted for compatibility with JSON configs
_ALIASES: dict[str, str] = {
    "excludePatterns": "exclude_patterns",
    "includeQueryParams": "include_query_params",
    "generateTests": "generate_tests",
    "generateApiRoutes": "generate_api_routes",
    "routeAnalytics": "route_analytics",
    "reportDir": "report_dir",
}


def load_config(config_path: Path | str | None = None, **overrides: object) -> RouteGenConfig:
    """Build a RouteGenConfig from a config file plus *overrides*.

    With *config_path* the file must exist; otherwise the first of
    ``CONFIG_FILENAMES`` found in the working directory is used, and
    defaults apply when none is.

    Raises:
        ConfigError: If an explicit file is missing, a file cannot be
            parsed, or a value is invalid.

    """
    if config_path is not None:
        path = Path(config_path)
        if not path.is_file():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg)
        file_config = read_config_file(path)
    else:
        file_config = _discover_config(Path.cwd())

    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    if isinstance(merged.get("exclude_patterns"), list):
        merged["exclude_patterns"] = tuple(merged["exclude_patterns"])
    return RouteGenConfig(**merged)  # type: ignore[arg-type]


def find_config_file(root: Path) -> Path | None:
    """First config file present in *root*, if any."""
    for name in CONFIG_FILENAMES:
        path = root / name
        if path.is_file():
            return path
    return None


def _discover_config(root: Path) -> dict[str, object]:
    path = find_config_file(root)
    return read_config_file(path) if path is not None else {}


def read_config_file(path: Path) -> dict[str, object]:
    """Parse *path* by suffix and normalize its keys."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read config file {path}: {exc.strerror or exc}"
        raise ConfigError(msg) from exc

    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        elif path.suffix == ".toml":
            data = tomllib.loads(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        msg = f"Invalid config file {path}: {exc}"
        raise ConfigError(msg) from exc

    if not isinstance(data, dict):
        msg = f"Config file {path} must contain a mapping"
        raise ConfigError(msg)
    return _flatten_routegen_section(data)


def _flatten_routegen_section(data: dict[str, object]) -> dict[str, object]:
    """Merge top-level keys with a ``routegen`` section (the section wins)."""
    result: dict[str, object] = {}
    section = data.get("routegen")
    items = [(k, v) for k, v in data.items() if k != "routegen"]
    if isinstance(section, dict):
        items.extend(section.items())
    for key, value in items:
        name = _ALIASES.get(key, key)
        if name in _FIELD_NAMES:
            result[name] = value
    return result


def default_config_data() -> dict[str, object]:
    """Default settings in their on-disk (camelCase) form."""
    defaults = RouteGenConfig()
    return {
        "input": defaults.input,
        "output": defaults.output,
        "framework": defaults.framework,
        "excludePatterns": list(defaults.exclude_patterns),
        "includeQueryParams": defaults.include_query_params,
        "generateTests": defaults.generate_tests,
        "generateApiRoutes": defaults.generate_api_routes,
        "routeAnalytics": defaults.route_analytics,
    }


def write_default_config(path: Path, fmt: str = "json") -> Path:
    """Write a default config file in *fmt* (``json``, ``yaml`` or ``toml``).

    Raises:
        ConfigError: If *path* already exists, *fmt* is unknown, or the file
            cannot be written.

    """
    if path.exists():
        msg = f"Config file already exists: {path}"
        raise ConfigError(msg)

    data = default_config_data()
    if fmt == "json":
        text = json.dumps(data, indent=2) + "\n"
    elif fmt == "yaml":
        text = yaml.safe_dump({"routegen": data}, sort_keys=False)
    elif fmt == "toml":
        text = "[routegen]\n" + "".join(f"{k} = {json.dumps(v)}\n" for k, v in data.items())
    else:
        msg = f"Unknown config format {fmt!r} (expected json, yaml or toml)"
        raise ConfigError(msg)

    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot write config file {path}: {exc.strerror or exc}"
        raise ConfigError(msg) from exc
    return path


def default_config_path(fmt: str) -> Path:
    """Conventional config file name for *fmt*, in the working directory."""
    name = {"json": "routegen.config.json", "yaml": "routegen.yaml", "toml": "routegen.toml"}
    return Path.cwd() / name.get(fmt, "routegen.config.json")
