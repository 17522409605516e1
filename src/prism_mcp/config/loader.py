"""Configuration loading: TOML files, env var overrides, merge logic.

Discovery order (later overrides earlier):
    1. Built-in defaults (Pydantic model defaults)
    2. User config: ``~/.config/prism-mcp/config.toml``
    3. Project-local config: ``./prism-mcp.toml``
    4. ``$PRISM_MCP_CONFIG`` environment variable (explicit path)
    5. Explicit ``path`` passed to ``load_config``
    6. Environment variables (see ``ENV_OVERRIDES``)
    7. Programmatic overrides (passed to ``load_config``)
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from prism_mcp.core.errors import ConfigError

from .schema import PrismMcpConfig

# Environment variable -> key in the ``general`` table.
ENV_OVERRIDES: dict[str, str] = {
    "WORKING_DIRECTORY": "working_directory",
    "PRISMATIC_URL": "prismatic_url",
    "PRISM_PATH": "prism_path",
    "PRISM_MCP_TOOLSETS": "toolsets",
}


def _user_config_path() -> Path:
    """Return XDG-compliant user config path."""
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "prism-mcp" / "config.toml"


def _project_config_path() -> Path:
    """Return project-local config path."""
    return Path.cwd() / "prism-mcp.toml"


def _discover_config_files() -> list[Path]:
    """Return config files in merge order (first = lowest priority)."""
    paths: list[Path] = []

    user = _user_config_path()
    if user.is_file():
        paths.append(user)

    project = _project_config_path()
    if project.is_file():
        paths.append(project)

    env_path = os.environ.get("PRISM_MCP_CONFIG")
    if env_path:
        p = Path(env_path)
        if not p.is_file():
            msg = f"PRISM_MCP_CONFIG points to non-existent file: {env_path}"
            raise ConfigError(msg)
        paths.append(p)

    return paths


def _read_toml(path: Path) -> dict[str, Any]:
    """Read and parse a TOML file."""
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Cannot read config file {path}: {e}"
        raise ConfigError(msg) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override wins on conflicts."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _env_overrides() -> dict[str, Any]:
    """Collect ``general`` settings from environment variables."""
    general = {
        key: os.environ[var]
        for var, key in ENV_OVERRIDES.items()
        if os.environ.get(var)
    }
    return {"general": general} if general else {}


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> PrismMcpConfig:
    """Load and validate configuration.

    Args:
        path: Explicit config file path (highest file priority).
        overrides: Dict of overrides merged last (highest overall priority).

    Returns:
        Validated PrismMcpConfig instance.

    Raises:
        ConfigError: On invalid TOML, missing files, or validation failure
            (including unknown toolset names).
    """
    merged: dict[str, Any] = {}

    files = _discover_config_files()

    # Explicit path overrides PRISM_MCP_CONFIG
    if path is not None:
        p = Path(path)
        if not p.is_file():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg)
        files.append(p)

    for config_file in files:
        data = _read_toml(config_file)
        merged = _deep_merge(merged, data)

    merged = _deep_merge(merged, _env_overrides())

    if overrides:
        merged = _deep_merge(merged, overrides)

    try:
        return PrismMcpConfig.model_validate(merged)
    except Exception as e:
        msg = f"Configuration validation failed: {e}"
        raise ConfigError(msg) from e
