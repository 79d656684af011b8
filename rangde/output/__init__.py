"""Output module for reports, layout summaries and exported files.

Provides human-readable text for the CLI and writes exporter documents to
disk.
"""

from rangde.output.lib import (
    format_collection_arrangement,
    format_layout_summary,
    format_validation_report,
    write_export,
    write_json,
)

__all__ = [
    "format_collection_arrangement",
    "format_layout_summary",
    "format_validation_report",
    "write_export",
    "write_json",
]
