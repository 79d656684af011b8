"""CLI entry point for rangde.

This module acts as the central entry point for the project's CLI tools.
It delegates commands to the validator, the layout engine and the exporters.
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from rangde.config import (
    get_default_export_format,
    get_environment,
    get_environment_info,
    get_export_dir,
    get_log_level,
    list_environment_variables,
)
from rangde.core import get_logger, setup_logging
from rangde.model import CollectionNode, export_json_schema, load_collections_file

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


def _load_snapshot(path: Path) -> list[CollectionNode]:
    """Load a snapshot file, logging what was found."""
    collections = load_collections_file(path)
    variable_count = sum(len(c.variables) for c in collections)
    logger.info(
        f"Loaded {len(collections)} collection(s), {variable_count} variable(s) "
        f"from {path}"
    )
    return collections


def _emit(text: str, output: Path | None) -> None:
    """Print `text` or write it to `output`."""
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Saved to {output}")
    else:
        print(text)


# =============================================================================
# Validate Command
# =============================================================================


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle the validate command."""
    from rangde.output import format_validation_report
    from rangde.validation import validate_all_collections

    try:
        collections = _load_snapshot(args.snapshot)
        reports = validate_all_collections(collections)

        if args.format == "json":
            payload = {
                collection_id: {
                    "isValid": report.is_valid,
                    "errors": report.errors,
                    "warnings": report.warnings,
                }
                for collection_id, report in reports.items()
            }
            print(json.dumps(payload, indent=2, ensure_ascii=False))
        else:
            print(format_validation_report(reports, collections))

        error_count = sum(len(r.errors) for r in reports.values())
        if error_count:
            logger.error(f"Validation found {error_count} error(s)")
            return 1
        return 0

    except (OSError, ValueError) as e:
        logger.error(f"Validation failed: {e}")
        return 1


def handle_validate_command(argv: list[str]) -> int:
    """Handle validate-specific commands."""
    parser = argparse.ArgumentParser(
        prog="python . validate",
        description="Check layer rules for every collection of a snapshot",
    )
    parser.add_argument(
        "snapshot",
        type=Path,
        help="Snapshot JSON file (list of collections)",
    )
    parser.add_argument(
        "--format",
        "-f",
        type=str,
        default="text",
        choices=["text", "json"],
        help="Report format (default: text)",
    )

    if not argv:
        parser.print_help()
        return 1

    args = parser.parse_args(argv)
    return cmd_validate(args)


# =============================================================================
# Layout Command
# =============================================================================


def cmd_layout(args: argparse.Namespace) -> int:
    """Handle the layout command."""
    from rangde.layout import LayoutConfig, auto_arrange_collections, auto_layout_variables
    from rangde.output import format_collection_arrangement, format_layout_summary

    try:
        collections = _load_snapshot(args.snapshot)

        if args.collections:
            arranged = auto_arrange_collections(collections)
            if args.format == "text":
                text = format_collection_arrangement(arranged)
            else:
                text = json.dumps(
                    [a.to_dict() for a in arranged], indent=2, ensure_ascii=False
                )
            _emit(text, args.output)
            logger.info(f"Arranged {len(arranged)} collection(s) by layer")
            return 0

        result = auto_layout_variables(collections, LayoutConfig.from_environment())

        if args.format == "text":
            text = format_layout_summary(result)
        else:
            text = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)

        _emit(text, args.output)

        logger.info(
            f"Placed {len(result.variables)} variable(s) in "
            f"{result.column_count} column(s)"
        )
        if result.has_cycles:
            logger.warning(f"Ignored {len(result.cycles)} cyclic alias(es)")
        return 0

    except (OSError, ValueError) as e:
        logger.error(f"Layout failed: {e}")
        return 1


def handle_layout_command(argv: list[str]) -> int:
    """Handle layout-specific commands."""
    parser = argparse.ArgumentParser(
        prog="python . layout",
        description="Place variables in dependency columns",
    )
    parser.add_argument(
        "snapshot",
        type=Path,
        help="Snapshot JSON file (list of collections)",
    )
    parser.add_argument(
        "--format",
        "-f",
        type=str,
        default="json",
        choices=["json", "text"],
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--collections",
        action="store_true",
        help="Arrange whole collections in layer columns instead of variables",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )

    if not argv:
        parser.print_help()
        return 1

    args = parser.parse_args(argv)
    return cmd_layout(args)


# =============================================================================
# Export Command
# =============================================================================


def cmd_export(args: argparse.Namespace) -> int:
    """Handle the export command."""
    from rangde.model import find_collection
    from rangde.output import write_export

    try:
        collections = _load_snapshot(args.snapshot)

        selected = collections
        if args.collection:
            selected = []
            for collection_id in args.collection:
                collection = find_collection(collections, collection_id)
                if collection is None:
                    available = ", ".join(c.id for c in collections) or "(none)"
                    logger.error(
                        f"Unknown collection: {collection_id}. Available: {available}"
                    )
                    return 1
                selected.append(collection)

        if not selected:
            logger.error("Snapshot contains no collections to export")
            return 1

        export_format = get_default_export_format(args.format)
        output_dir = get_export_dir(args.output_dir)

        paths = write_export(
            export_format,
            selected,
            output_dir,
            filename=args.filename,
            mode_id=args.mode,
            all_modes=args.all_modes,
            all_collections=collections,
        )
        for path in paths:
            print(path)
        return 0

    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Export failed: {e}")
        return 1


def handle_export_command(argv: list[str]) -> int:
    """Handle export-specific commands."""
    from rangde.exporters import list_exporters

    parser = argparse.ArgumentParser(
        prog="python . export",
        description="Export collections to Figma, DTCG or Tokens Studio JSON",
    )
    parser.add_argument(
        "snapshot",
        type=Path,
        help="Snapshot JSON file (list of collections)",
    )
    parser.add_argument(
        "--format",
        "-f",
        type=str,
        default=None,
        choices=list_exporters(),
        help="Export format (default: RANGDE_EXPORT_FORMAT or figma)",
    )
    parser.add_argument(
        "--collection",
        "-c",
        type=str,
        action="append",
        default=None,
        help="Collection id to export (repeatable; default: all)",
    )
    parser.add_argument(
        "--mode",
        "-m",
        type=str,
        default=None,
        help="Mode id for single-mode formats (default: first mode)",
    )
    parser.add_argument(
        "--all-modes",
        action="store_true",
        help="Export every mode",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        type=Path,
        default=None,
        help="Output directory (default: RANGDE_EXPORT_DIR or ./exports)",
    )
    parser.add_argument(
        "--filename",
        type=str,
        default=None,
        help="Output file name (default depends on format)",
    )

    if not argv:
        parser.print_help()
        return 1

    args = parser.parse_args(argv)
    return cmd_export(args)


# =============================================================================
# Schema / Config Commands
# =============================================================================


def handle_schema_command(argv: list[str]) -> int:
    """Print the snapshot JSON schema."""
    parser = argparse.ArgumentParser(
        prog="python . schema",
        description="Print the JSON schema of a snapshot",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )
    args = parser.parse_args(argv)

    try:
        _emit(json.dumps(export_json_schema(), indent=2, ensure_ascii=False), args.output)
        return 0
    except OSError as e:
        logger.error(f"Schema export failed: {e}")
        return 1


def handle_config_command(argv: list[str]) -> int:
    """Show environment variables and their current values."""
    parser = argparse.ArgumentParser(
        prog="python . config",
        description="Show configuration environment variables",
    )
    parser.add_argument(
        "--category",
        type=str,
        default=None,
        choices=["logging", "layout", "export"],
        help="Only show one category",
    )
    args = parser.parse_args(argv)

    for env_var in list_environment_variables(args.category):
        info = get_environment_info(env_var)
        value = get_environment(env_var)
        print(f"{info.name:32} {value!s:12} {info.description}")
    return 0


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== Collections ===")
    print("  validate   Check layer rules for a snapshot")
    print("  layout     Place variables in dependency columns")
    print("  export     Export to Figma, DTCG or Tokens Studio JSON")
    print("\n=== Reference ===")
    print("  schema     Print the snapshot JSON schema")
    print("  config     Show configuration environment variables")
    print("\nExamples:")
    print("  python . validate snapshot.json")
    print("  python . layout snapshot.json --format text")
    print("  python . layout snapshot.json --collections")
    print("  python . export snapshot.json --format dtcg --all-modes")
    print("  python . export snapshot.json -c sem -o out/ --filename semantic.json")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "validate": lambda: handle_validate_command(rest_args),
        "layout": lambda: handle_layout_command(rest_args),
        "export": lambda: handle_export_command(rest_args),
        "schema": lambda: handle_schema_command(rest_args),
        "config": lambda: handle_config_command(rest_args),
    }

    if command in commands:
        setup_logging(get_log_level())
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
