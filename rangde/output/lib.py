"""Output formatting and file writing for layouts, reports and exports.

Generates human-readable text for the CLI and writes exported documents to
disk.
"""

import json
from pathlib import Path
from typing import Any

from rangde.core.log import get_logger
from rangde.exporters import get_exporter
from rangde.layout import LayoutResult, PositionedCollection
from rangde.model import CollectionNode, find_collection
from rangde.validation import CollectionValidationReport, get_layer_label

logger = get_logger(__name__)


def write_json(content: Any, path: Path | str) -> Path:
    """Write `content` as pretty-printed UTF-8 JSON.

    Parent directories are created as needed.

    Returns:
        Path: The written file.

    Raises:
        OSError: If the file cannot be written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(content, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
    )
    logger.debug(f"Wrote {path}")
    return path


def write_export(
    exporter_name: str,
    collections: list[CollectionNode],
    output_dir: Path | str,
    filename: str | None = None,
    mode_id: str | None = None,
    all_modes: bool = False,
    all_collections: list[CollectionNode] | None = None,
) -> list[Path]:
    """Export collections and write the resulting file(s).

    Args:
        exporter_name: Registered exporter (figma, dtcg, tokens-studio).
        collections: Collections to export.
        output_dir: Directory receiving the files.
        filename: Override for the single-file name. Ignored with all_modes.
        mode_id: Mode to export, for single-mode formats.
        all_modes: Write every mode (one or more files depending on format).
        all_collections: Collections aliases may resolve into.

    Returns:
        list[Path]: Written files, in write order.

    Raises:
        KeyError: If the exporter is unknown.
        OSError: If a file cannot be written.
    """
    exporter = get_exporter(exporter_name)
    output_dir = Path(output_dir)

    if all_modes:
        files = exporter.export_all_modes(collections, all_collections=all_collections)
    else:
        result = exporter.export_with_warnings(
            collections, mode_id=mode_id, all_collections=all_collections
        )
        if result.has_warnings:
            logger.info(
                f"{exporter.name} export degraded {len(result.warnings)} value(s)"
            )
        files = {filename or exporter.default_filename(collections): result.content}

    written = [write_json(content, output_dir / name) for name, content in files.items()]
    logger.info(f"Exported {len(collections)} collection(s) to {len(written)} file(s)")
    return written


def format_layout_summary(result: LayoutResult) -> str:
    """Format a layout as plain text, one block per column.

    Example output:
        Column 0
          Primitives / 🎨/black  (50, 50)
          Primitives / 🎨/white  (50, 250)
        Column 1
          Semantic / ✦/color/surface  (520, 50)

    Args:
        result: Layout to format.

    Returns:
        Formatted summary string.
    """
    if not result.variables:
        return "No variables to lay out."

    lines: list[str] = []
    current_column = None
    for positioned in result.variables:
        if positioned.column != current_column:
            current_column = positioned.column
            lines.append(f"Column {current_column}")
        x, y = positioned.position.x, positioned.position.y
        lines.append(
            f"  {positioned.collection_name} / {positioned.variable.name}  "
            f"({x:g}, {y:g})"
        )

    if result.has_cycles:
        lines.append("Ignored cyclic aliases:")
        for source, dependency in result.cycles:
            lines.append(f"  {source} -> {dependency}")

    return "\n".join(lines)


def format_collection_arrangement(arranged: list[PositionedCollection]) -> str:
    """Format collection positions, one line per collection.

    Example output:
        Primitives [Primitive]  (100, 100)
        Legacy [Unassigned]  (100, 400)
    """
    if not arranged:
        return "No collections to arrange."

    return "\n".join(
        f"{a.collection.name} [{get_layer_label(a.collection.layer)}]  "
        f"({a.position.x:g}, {a.position.y:g})"
        for a in arranged
    )


def format_validation_report(
    reports: dict[str, CollectionValidationReport],
    collections: list[CollectionNode],
) -> str:
    """Format per-collection validation reports.

    Example output:
        Semantic [Semantic]: OK
        Primitives [Primitive]: 1 error(s)
          error: Variable "x" has aliases, but primitive collections ...

    Args:
        reports: Collection id to report, as from validate_all_collections.
        collections: Snapshot used for names and layers.

    Returns:
        Formatted report string.
    """
    lines: list[str] = []
    for collection_id, report in reports.items():
        collection = find_collection(collections, collection_id)
        name = collection.name if collection else collection_id
        label = get_layer_label(collection.layer if collection else None)

        if report.errors:
            status = f"{len(report.errors)} error(s)"
        else:
            status = "OK"
        if report.warnings:
            status += f", {len(report.warnings)} warning(s)"

        lines.append(f"{name} [{label}]: {status}")
        lines.extend(f"  error: {message}" for message in report.errors)
        lines.extend(f"  warning: {message}" for message in report.warnings)

    return "\n".join(lines)


__all__ = [
    "format_collection_arrangement",
    "format_layout_summary",
    "format_validation_report",
    "write_export",
    "write_json",
]
