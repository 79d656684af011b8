"""W3C Design Tokens Community Group (DTCG) exporter.

Tokens are nested by the segments of their variable name and written as
`{"$type": "color", "$value": ...}`. Aliases become `{collection.path}`
references. A DTCG document holds one mode; use export_with_all_modes for one
file per mode.
"""

from rangde.core.log import get_logger
from rangde.exporters.lib import (
    FALLBACK_COLOR,
    ExportProvider,
    ExportWarning,
    collect_modes,
    insert_token,
    record_unresolved_alias,
    register_exporter,
    resolve_alias,
    slugify,
    token_reference,
    variable_name_to_path,
)
from rangde.model import CollectionNode, ColorValue, Variable, VariableValue

logger = get_logger(__name__)


def _resolve_value(
    value: VariableValue,
    variable: Variable,
    mode_id: str,
    collection: CollectionNode,
    all_collections: list[CollectionNode],
    warnings: list[ExportWarning] | None,
) -> str:
    """Hex string for a color, reference string for a resolvable alias."""
    if isinstance(value, ColorValue):
        return value.hex

    target = resolve_alias(value, collection, all_collections)
    if target is None:
        record_unresolved_alias(warnings, collection, variable, mode_id, value)
        return FALLBACK_COLOR
    return token_reference(*target)


def export_collection_to_dtcg(
    collection: CollectionNode,
    all_collections: list[CollectionNode],
    mode_id: str | None = None,
    warnings: list[ExportWarning] | None = None,
) -> dict:
    """Export one collection as a DTCG token group.

    Args:
        collection: Collection to export.
        all_collections: Collections aliases may resolve into.
        mode_id: Mode to export. Defaults to the collection's first mode.
        warnings: List that receives an ExportWarning per unresolved alias.

    Returns:
        dict: Nested token groups. Variables without a value in the mode are
        skipped; an empty dict is returned when the collection has no modes.
    """
    tokens: dict = {}

    target_mode = mode_id or (collection.modes[0].id if collection.modes else None)
    if target_mode is None:
        logger.warning(f"No mode found for collection {collection.name}")
        return tokens

    for variable in collection.variables:
        value = variable.values_by_mode.get(target_mode)
        if value is None:
            continue

        token = {
            "$type": "color",
            "$value": _resolve_value(
                value, variable, target_mode, collection, all_collections, warnings
            ),
        }
        if variable.description:
            token["$description"] = variable.description

        insert_token(tokens, variable_name_to_path(variable.name), token, "$type")

    return tokens


def export_multiple_collections_to_dtcg(
    collections: list[CollectionNode],
    mode_id: str | None = None,
    all_collections: list[CollectionNode] | None = None,
    warnings: list[ExportWarning] | None = None,
) -> dict:
    """Export collections with one top-level group per collection name."""
    scope = all_collections if all_collections is not None else collections
    return {
        slugify(collection.name): export_collection_to_dtcg(
            collection, scope, mode_id, warnings
        )
        for collection in collections
    }


def _export_selection(
    collections: list[CollectionNode],
    mode_id: str | None,
    all_collections: list[CollectionNode] | None,
    warnings: list[ExportWarning] | None,
) -> dict:
    if len(collections) == 1:
        scope = all_collections if all_collections is not None else collections
        return export_collection_to_dtcg(collections[0], scope, mode_id, warnings)
    return export_multiple_collections_to_dtcg(
        collections, mode_id, all_collections, warnings
    )


def export_with_all_modes(
    collections: list[CollectionNode],
    all_collections: list[CollectionNode] | None = None,
    warnings: list[ExportWarning] | None = None,
) -> dict[str, dict]:
    """Export every mode to its own document.

    Returns:
        dict: `tokens.<mode-slug>.json` per distinct mode, plus `tokens.json`
        holding the first mode. Empty when no collection declares a mode.

    Example:
        >>> sorted(export_with_all_modes(collections))
        ['tokens.dark.json', 'tokens.json', 'tokens.light.json']
    """
    modes = collect_modes(collections)
    files: dict[str, dict] = {}

    for mode_id, mode_name in modes.items():
        files[f"tokens.{slugify(mode_name)}.json"] = _export_selection(
            collections, mode_id, all_collections, warnings
        )

    if modes:
        first_name = next(iter(modes.values()))
        files["tokens.json"] = files[f"tokens.{slugify(first_name)}.json"]

    return files


@register_exporter
class DTCGExporter(ExportProvider):
    """Exports collections as DTCG design tokens.

    A single collection is written at the top level; several collections get
    one group each, named after the collection.
    """

    @property
    def name(self) -> str:
        """Exporter identifier."""
        return "dtcg"

    @property
    def file_extension(self) -> str:
        """DTCG documents are JSON."""
        return ".json"

    def default_filename(self, collections: list[CollectionNode]) -> str:
        """Always tokens.json."""
        return f"tokens{self.file_extension}"

    def export(
        self,
        collections: list[CollectionNode],
        *,
        mode_id: str | None = None,
        all_collections: list[CollectionNode] | None = None,
        warnings: list[ExportWarning] | None = None,
    ) -> dict:
        return _export_selection(collections, mode_id, all_collections, warnings)

    def export_all_modes(
        self,
        collections: list[CollectionNode],
        *,
        all_collections: list[CollectionNode] | None = None,
        warnings: list[ExportWarning] | None = None,
    ) -> dict[str, dict]:
        """One file per mode plus tokens.json for the first mode."""
        return export_with_all_modes(collections, all_collections, warnings)


__all__ = [
    "DTCGExporter",
    "export_collection_to_dtcg",
    "export_multiple_collections_to_dtcg",
    "export_with_all_modes",
]
