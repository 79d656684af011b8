"""DTCG design tokens exporter."""

from rangde.exporters.dtcg.lib import (
    DTCGExporter,
    export_collection_to_dtcg,
    export_multiple_collections_to_dtcg,
    export_with_all_modes,
)

__all__ = [
    "DTCGExporter",
    "export_collection_to_dtcg",
    "export_multiple_collections_to_dtcg",
    "export_with_all_modes",
]
