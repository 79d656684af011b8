"""Token exporter abstraction and registry."""

from rangde.exporters.lib import (
    ExportProvider,
    ExportResult,
    ExportWarning,
    get_exporter,
    list_exporters,
    register_exporter,
    resolve_alias,
    slugify,
    strip_name_prefix,
    token_reference,
    variable_name_to_path,
)

__all__ = [
    # Base class and results
    "ExportProvider",
    "ExportResult",
    "ExportWarning",
    # Registry
    "get_exporter",
    "list_exporters",
    "register_exporter",
    # Naming
    "resolve_alias",
    "slugify",
    "strip_name_prefix",
    "token_reference",
    "variable_name_to_path",
]
