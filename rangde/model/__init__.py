"""Snapshot models for layered design-token collections."""

from rangde.model.lib import (
    BLACK,
    RGBA,
    AliasValue,
    CollectionLayer,
    CollectionNode,
    ColorValue,
    Variable,
    VariableKey,
    VariableMode,
    VariableValue,
    alias_target,
    export_json_schema,
    find_collection,
    hex_to_rgba,
    index_variables,
    load_collections,
    load_collections_file,
)

__all__ = [
    # Core models
    "CollectionLayer",
    "CollectionNode",
    "VariableMode",
    "Variable",
    "VariableValue",
    "ColorValue",
    "AliasValue",
    "VariableKey",
    # Colors
    "RGBA",
    "BLACK",
    "hex_to_rgba",
    # Helpers
    "alias_target",
    "find_collection",
    "index_variables",
    # Loading
    "load_collections",
    "load_collections_file",
    "export_json_schema",
]
