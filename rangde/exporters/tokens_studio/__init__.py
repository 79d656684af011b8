"""Tokens Studio exporter."""

from rangde.exporters.tokens_studio.lib import (
    TokensStudioExporter,
    create_themes_from_modes,
    export_collection_to_token_set,
    export_to_tokens_studio,
    export_with_all_modes_as_token_sets,
    token_set_name,
)

__all__ = [
    "TokensStudioExporter",
    "create_themes_from_modes",
    "export_collection_to_token_set",
    "export_to_tokens_studio",
    "export_with_all_modes_as_token_sets",
    "token_set_name",
]
