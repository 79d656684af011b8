"""Alias validation for layered token collections."""

from rangde.validation.lib import (
    AliasValidationResult,
    CollectionValidationReport,
    get_collections_by_layer,
    get_layer_description,
    get_layer_label,
    has_circular_dependency,
    validate_alias,
    validate_alias_relationship,
    validate_all_collections,
    validate_collection_variables,
)

__all__ = [
    "AliasValidationResult",
    "CollectionValidationReport",
    "validate_alias_relationship",
    "has_circular_dependency",
    "validate_alias",
    "validate_collection_variables",
    "validate_all_collections",
    "get_collections_by_layer",
    "get_layer_label",
    "get_layer_description",
]
