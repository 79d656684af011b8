"""Centralized configuration management for rangde.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from rangde.config import EnvVar, get_environment
    >>>
    >>> # Get any environment variable with automatic type conversion
    >>> width = get_environment(EnvVar.LAYOUT_COLUMN_WIDTH)  # Returns int: 320
    >>>
    >>> # Override at runtime
    >>> width = get_environment(EnvVar.LAYOUT_COLUMN_WIDTH, override=400)
    >>>
    >>> # List available variables by category
    >>> for var in list_environment_variables("layout"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    logging: CLI log verbosity
    layout: Canvas geometry used by the auto-layout engine
    export: Default interchange format and output directory
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_default_export_format,
    get_environment,
    get_environment_info,
    get_export_dir,
    get_log_level,
    # Introspection
    list_environment_variables,
)

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
