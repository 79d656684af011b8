"""Centralized environment configuration management for rangde.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from rangde.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> width = get_environment(EnvVar.LAYOUT_COLUMN_WIDTH)  # Returns int
    >>> fmt = get_environment(EnvVar.EXPORT_FORMAT)  # Returns str
    >>>
    >>> # Override at runtime
    >>> width = get_environment(EnvVar.LAYOUT_COLUMN_WIDTH, override=640)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "RANGDE_LOG_LEVEL").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, Path).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by rangde.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - logging: Log verbosity
        - layout: Canvas geometry for the dependency-graph layout
        - export: Interchange format and output location
    """

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    LOG_LEVEL = EnvConfig(
        name="RANGDE_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level for the CLI (DEBUG, INFO, WARNING, ERROR)",
        category="logging",
    )

    # -------------------------------------------------------------------------
    # Layout Geometry (screen canvas units)
    # -------------------------------------------------------------------------
    LAYOUT_COLUMN_WIDTH = EnvConfig(
        name="RANGDE_LAYOUT_COLUMN_WIDTH",
        default=320,
        var_type=int,
        description="Width of one layout column",
        category="layout",
    )
    LAYOUT_NODE_HEIGHT = EnvConfig(
        name="RANGDE_LAYOUT_NODE_HEIGHT",
        default=160,
        var_type=int,
        description="Height of one variable node",
        category="layout",
    )
    LAYOUT_NODE_SPACING = EnvConfig(
        name="RANGDE_LAYOUT_NODE_SPACING",
        default=40,
        var_type=int,
        description="Vertical gap between nodes (and between collection groups)",
        category="layout",
    )
    LAYOUT_COLUMN_SPACING = EnvConfig(
        name="RANGDE_LAYOUT_COLUMN_SPACING",
        default=150,
        var_type=int,
        description="Horizontal gap between columns",
        category="layout",
    )
    LAYOUT_START_X = EnvConfig(
        name="RANGDE_LAYOUT_START_X",
        default=50,
        var_type=int,
        description="X coordinate of the first column",
        category="layout",
    )
    LAYOUT_START_Y = EnvConfig(
        name="RANGDE_LAYOUT_START_Y",
        default=50,
        var_type=int,
        description="Y coordinate of the first row in every column",
        category="layout",
    )

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------
    EXPORT_FORMAT = EnvConfig(
        name="RANGDE_EXPORT_FORMAT",
        default="figma",
        var_type=str,
        description="Default export format (figma, dtcg, tokens-studio)",
        category="export",
    )
    EXPORT_DIR = EnvConfig(
        name="RANGDE_EXPORT_DIR",
        default=None,  # Computed from cwd
        var_type=Path,
        description="Directory export files are written to",
        category="export",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is Path:
        return Path(value)

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int, or Path).

    Example:
        >>> get_environment(EnvVar.LAYOUT_NODE_HEIGHT)
        160
        >>> get_environment(EnvVar.LAYOUT_NODE_HEIGHT, override=80)
        80
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)

    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_log_level(override: str | None = None) -> str:
    """Get the configured log level name, upper-cased."""
    return str(get_environment(EnvVar.LOG_LEVEL, override=override)).upper()


def get_default_export_format(override: str | None = None) -> str:
    """Get the default export format name."""
    return get_environment(EnvVar.EXPORT_FORMAT, override=override)


def get_export_dir(override: Path | str | None = None) -> Path:
    """Get the export output directory.

    Resolution: override > RANGDE_EXPORT_DIR > {cwd}/exports
    """
    if override is not None:
        return Path(override)

    env_path = get_environment(EnvVar.EXPORT_DIR)
    if env_path:
        return env_path

    return Path.cwd() / "exports"


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (logging, layout, export).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_log_level",
    "get_default_export_format",
    "get_export_dir",
    # Introspection
    "list_environment_variables",
]
