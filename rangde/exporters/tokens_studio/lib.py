"""Tokens Studio exporter.

Each collection becomes a token set named after its layer and name; modes
become themes that enable the sets declaring them. Token references follow
the `{collection.path}` convention shared with the DTCG exporter.
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
from rangde.model import CollectionNode, ColorValue

logger = get_logger(__name__)


def token_set_name(collection: CollectionNode) -> str:
    """Set name `<layer>-<slug>`, or just the slug for unlayered collections.

    Example:
        >>> token_set_name(semantic)
        'semantic-semantic'
    """
    base_name = slugify(collection.name)
    if collection.layer is None:
        return base_name
    return f"{collection.layer.value}-{base_name}"


def export_collection_to_token_set(
    collection: CollectionNode,
    all_collections: list[CollectionNode],
    mode_id: str | None = None,
    warnings: list[ExportWarning] | None = None,
) -> dict:
    """Export one collection's values for one mode as a token set.

    Args:
        collection: Collection to export.
        all_collections: Collections aliases may resolve into.
        mode_id: Mode to export. Defaults to the collection's first mode.
        warnings: List that receives an ExportWarning per unresolved alias.

    Returns:
        dict: Nested tokens `{"value", "type": "color", "description"?}`.
    """
    token_set: dict = {}

    target_mode = mode_id or (collection.modes[0].id if collection.modes else None)
    if target_mode is None:
        logger.warning(f"No mode found for collection {collection.name}")
        return token_set

    for variable in collection.variables:
        value = variable.values_by_mode.get(target_mode)
        if value is None:
            continue

        if isinstance(value, ColorValue):
            resolved = value.hex
        else:
            target = resolve_alias(value, collection, all_collections)
            if target is None:
                record_unresolved_alias(
                    warnings, collection, variable, target_mode, value
                )
                resolved = FALLBACK_COLOR
            else:
                resolved = token_reference(*target)

        token = {"value": resolved, "type": "color"}
        if variable.description:
            token["description"] = variable.description

        insert_token(token_set, variable_name_to_path(variable.name), token, "value")

    return token_set


def create_themes_from_modes(collections: list[CollectionNode]) -> list[dict]:
    """One theme per distinct mode id.

    A set is `enabled` in a theme when its collection declares that mode and
    `disabled` otherwise.
    """
    themes = []
    for mode_id, mode_name in collect_modes(collections).items():
        selected = {
            token_set_name(collection): (
                "enabled" if collection.get_mode(mode_id) is not None else "disabled"
            )
            for collection in collections
        }
        themes.append({"id": mode_id, "name": mode_name, "selectedTokenSets": selected})
    return themes


def export_to_tokens_studio(
    collections: list[CollectionNode],
    include_themes: bool = True,
    mode_id: str | None = None,
    all_collections: list[CollectionNode] | None = None,
    warnings: list[ExportWarning] | None = None,
) -> dict:
    """Export collections as a Tokens Studio document.

    Args:
        collections: Collections to export; each becomes a token set.
        include_themes: Add a `$themes` entry built from the modes.
        mode_id: Mode to export. Defaults to each collection's first mode.
        all_collections: Collections aliases may resolve into. Defaults to
            `collections`.
        warnings: List that receives an ExportWarning per unresolved alias.

    Returns:
        dict: Token sets, optional `$themes`, and `$metadata.tokenSetOrder`.
    """
    scope = all_collections if all_collections is not None else collections
    document: dict = {}
    token_set_order: list[str] = []

    for collection in collections:
        set_name = token_set_name(collection)
        token_set_order.append(set_name)
        document[set_name] = export_collection_to_token_set(
            collection, scope, mode_id, warnings
        )

    if include_themes:
        document["$themes"] = create_themes_from_modes(collections)

    document["$metadata"] = {"tokenSetOrder": token_set_order}
    return document


def export_with_all_modes_as_token_sets(
    collections: list[CollectionNode],
    all_collections: list[CollectionNode] | None = None,
    warnings: list[ExportWarning] | None = None,
) -> dict:
    """Export one token set per (mode, collection) pair.

    Sets are named `<set>-<mode-slug>`, ordered mode by mode; collections not
    declaring a mode get no set for it. Themes are always included.
    """
    scope = all_collections if all_collections is not None else collections
    document: dict = {}
    token_set_order: list[str] = []

    for mode_id, mode_name in collect_modes(collections).items():
        mode_slug = slugify(mode_name)
        for collection in collections:
            if collection.get_mode(mode_id) is None:
                continue
            set_name = f"{token_set_name(collection)}-{mode_slug}"
            token_set_order.append(set_name)
            document[set_name] = export_collection_to_token_set(
                collection, scope, mode_id, warnings
            )

    document["$themes"] = create_themes_from_modes(collections)
    document["$metadata"] = {"tokenSetOrder": token_set_order}
    return document


@register_exporter
class TokensStudioExporter(ExportProvider):
    """Exports collections as a Tokens Studio document."""

    @property
    def name(self) -> str:
        """Exporter identifier."""
        return "tokens-studio"

    @property
    def file_extension(self) -> str:
        """Tokens Studio documents are JSON."""
        return ".json"

    def default_filename(self, collections: list[CollectionNode]) -> str:
        """Always tokens-studio.json."""
        return f"tokens-studio{self.file_extension}"

    def export(
        self,
        collections: list[CollectionNode],
        *,
        mode_id: str | None = None,
        all_collections: list[CollectionNode] | None = None,
        warnings: list[ExportWarning] | None = None,
    ) -> dict:
        return export_to_tokens_studio(
            collections,
            mode_id=mode_id,
            all_collections=all_collections,
            warnings=warnings,
        )

    def export_all_modes(
        self,
        collections: list[CollectionNode],
        *,
        all_collections: list[CollectionNode] | None = None,
        warnings: list[ExportWarning] | None = None,
    ) -> dict[str, dict]:
        """Every mode as its own token set, in a single document."""
        document = export_with_all_modes_as_token_sets(
            collections, all_collections, warnings
        )
        return {self.default_filename(collections): document}


__all__ = [
    "TokensStudioExporter",
    "create_themes_from_modes",
    "export_collection_to_token_set",
    "export_to_tokens_studio",
    "export_with_all_modes_as_token_sets",
    "token_set_name",
]
