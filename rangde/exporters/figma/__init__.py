"""Figma variables exporter."""

from rangde.exporters.figma.lib import (
    FigmaAlias,
    FigmaExport,
    FigmaExporter,
    FigmaVariable,
    ResolvedModeValue,
    build_variable_id_map,
    export_collection_to_figma,
    export_multiple_collections,
    generate_code_syntax,
    generate_variable_id,
)

__all__ = [
    "FigmaAlias",
    "FigmaExport",
    "FigmaExporter",
    "FigmaVariable",
    "ResolvedModeValue",
    "build_variable_id_map",
    "export_collection_to_figma",
    "export_multiple_collections",
    "generate_code_syntax",
    "generate_variable_id",
]
