"""rangde: layered design-token validation, layout and export."""

from rangde.exporters import ExportProvider, get_exporter, list_exporters
from rangde.layout import LayoutResult, auto_arrange_collections, auto_layout_variables
from rangde.model import (
    AliasValue,
    CollectionLayer,
    CollectionNode,
    ColorValue,
    Variable,
    VariableMode,
    export_json_schema,
    load_collections,
)
from rangde.validation import (
    has_circular_dependency,
    validate_alias,
    validate_alias_relationship,
    validate_collection_variables,
)

__all__ = [
    # Model
    "CollectionNode",
    "CollectionLayer",
    "VariableMode",
    "Variable",
    "ColorValue",
    "AliasValue",
    "load_collections",
    "export_json_schema",
    # Validation
    "validate_alias_relationship",
    "validate_alias",
    "has_circular_dependency",
    "validate_collection_variables",
    # Layout
    "auto_layout_variables",
    "auto_arrange_collections",
    "LayoutResult",
    # Exporters
    "ExportProvider",
    "get_exporter",
    "list_exporters",
]
