"""Alias validation for layered token collections.

This module decides whether alias edges between collections are admissible
and produces diagnostic reports for whole collections. Results are returned
as data; nothing here raises on an invalid model; the caller decides whether
to block a mutation or just flag it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from rangde.core.log import get_logger
from rangde.model import (
    AliasValue,
    CollectionLayer,
    CollectionNode,
    VariableKey,
    alias_target,
    find_collection,
    index_variables,
)

logger = get_logger(__name__)


@dataclass
class AliasValidationResult:
    """Outcome of checking a single alias edge.

    Attributes:
        is_valid: Whether the alias may be created.
        error: Reason the alias is rejected.
        warning: Non-blocking remark about an admissible alias.
    """

    is_valid: bool
    error: str | None = None
    warning: str | None = None


@dataclass
class CollectionValidationReport:
    """Diagnostics for every variable of one collection.

    Attributes:
        errors: Layer-rule violations, each naming the variable (and mode).
        warnings: Advisory findings that do not block anything.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """True when no errors were found."""
        return not self.errors


_LAYER_LABELS = {
    CollectionLayer.PRIMITIVE: "Primitive",
    CollectionLayer.SEMANTIC: "Semantic",
    CollectionLayer.THEME: "Theme",
}

_LAYER_DESCRIPTIONS = {
    CollectionLayer.PRIMITIVE: "Base color values - no aliases allowed",
    CollectionLayer.SEMANTIC: "Intent-based tokens - alias primitives only",
    CollectionLayer.THEME: "Brand-specific tokens - alias semantic only",
}


def validate_alias_relationship(
    source: CollectionNode, target: CollectionNode
) -> AliasValidationResult:
    """Check whether `source` may alias variables of `target`.

    Rules, first match wins:
        1. Either collection has no layer: allowed (legacy mode).
        2. Same collection: rejected.
        3. Primitive source: rejected, primitives hold concrete values.
        4. Semantic source must target a Primitive collection.
        5. Theme source must target a Semantic collection.

    Args:
        source: Collection owning the aliasing variable.
        target: Collection owning the aliased variable.

    Returns:
        AliasValidationResult with an error message when rejected.

    Example:
        >>> validate_alias_relationship(theme, semantic).is_valid
        True
        >>> validate_alias_relationship(semantic, theme).is_valid
        False
    """
    source_layer = source.layer
    target_layer = target.layer

    if source_layer is None or target_layer is None:
        return AliasValidationResult(is_valid=True)

    if source.id == target.id:
        return AliasValidationResult(
            is_valid=False,
            error="Cannot create alias to the same collection",
        )

    if source_layer == CollectionLayer.PRIMITIVE:
        return AliasValidationResult(
            is_valid=False,
            error=(
                "Primitive collections cannot have aliases - "
                "they must contain concrete values"
            ),
        )

    if (
        source_layer == CollectionLayer.SEMANTIC
        and target_layer != CollectionLayer.PRIMITIVE
    ):
        return AliasValidationResult(
            is_valid=False,
            error=(
                "Semantic collections can only alias Primitive collections "
                f"(target is {target_layer.value})"
            ),
        )

    if source_layer == CollectionLayer.THEME and target_layer != CollectionLayer.SEMANTIC:
        return AliasValidationResult(
            is_valid=False,
            error=(
                "Theme collections can only alias Semantic collections "
                f"(target is {target_layer.value})"
            ),
        )

    return AliasValidationResult(is_valid=True)


def has_circular_dependency(
    variable_id: str,
    collection_id: str,
    target_variable_id: str,
    target_collection_id: str,
    all_collections: list[CollectionNode],
    visited_path: Iterable[VariableKey] = frozenset(),
) -> bool:
    """Check whether aliasing source -> target would close a cycle.

    Walks alias edges depth-first from the target, following every alias in
    every mode of each variable reached. The source sits on the path from the
    start, so reaching it again (or revisiting any node already on the current
    path) reports a cycle. A target equal to the source is the stop sentinel
    and reports no cycle; self-aliasing is rejected by the layer rules.
    Unknown collections or variables end their branch as non-cyclic.

    Args:
        variable_id: Source variable id.
        collection_id: Source collection id.
        target_variable_id: Proposed alias target variable id.
        target_collection_id: Proposed alias target collection id.
        all_collections: Snapshot used to resolve aliases.
        visited_path: Keys already on the resolution path.

    Returns:
        bool: True if a node is revisited on the current path.
    """
    source = VariableKey(collection_id, variable_id)
    target = VariableKey(target_collection_id, target_variable_id)
    path = frozenset(visited_path)

    if source in path:
        return True
    if target == source:
        return False

    index = index_variables(all_collections)
    return _revisits_path(target, path | {source}, index)


def _alias_targets(node: VariableKey, index: dict) -> Iterator[VariableKey]:
    """Keys aliased by `node` in every mode; nothing for unknown nodes."""
    entry = index.get(node)
    if entry is None:
        return iter(())
    collection, variable = entry
    return (alias_target(value, collection.id) for _, value in variable.alias_values())


def _revisits_path(
    start: VariableKey,
    path: frozenset[VariableKey],
    index: dict,
) -> bool:
    """Depth-first search for a node already on the current path.

    Iterative: each stack frame holds its node, its own immutable path and an
    iterator over the node's alias targets, so sibling forks never see each
    other's nodes. A node whose whole subtree was searched without a revisit
    is cleared and never expanded again; a cycle through it would already
    have been found while searching it.
    """
    if start in path:
        return True

    cleared: set[VariableKey] = set()
    stack = [(start, path | {start}, _alias_targets(start, index))]

    while stack:
        node, branch, targets = stack[-1]
        for target in targets:
            if target in branch:
                return True
            if target in cleared:
                continue
            stack.append((target, branch | {target}, _alias_targets(target, index)))
            break
        else:
            cleared.add(node)
            stack.pop()

    return False


def validate_alias(
    source: CollectionNode,
    variable_id: str,
    target: CollectionNode,
    target_variable_id: str,
    all_collections: list[CollectionNode],
) -> AliasValidationResult:
    """Admission check for a proposed alias edge.

    Combines the layer rules with cycle detection.

    Returns:
        AliasValidationResult: invalid on self-aliasing, a layer violation or
        a cycle; valid
        with a warning when the target variable does not exist yet.
    """
    if source.id == target.id and variable_id == target_variable_id:
        return AliasValidationResult(
            is_valid=False,
            error="Variable cannot alias itself",
        )

    layer_result = validate_alias_relationship(source, target)
    if not layer_result.is_valid:
        return layer_result

    if target.get_variable(target_variable_id) is None:
        return AliasValidationResult(
            is_valid=True,
            warning=(
                f'Target variable "{target_variable_id}" not found in '
                f'collection "{target.name}"'
            ),
        )

    if has_circular_dependency(
        variable_id,
        source.id,
        target_variable_id,
        target.id,
        all_collections,
    ):
        logger.debug(
            f"Rejected alias {source.id}:{variable_id} -> "
            f"{target.id}:{target_variable_id} (cycle)"
        )
        return AliasValidationResult(
            is_valid=False,
            error="Alias would create a circular dependency",
        )

    return layer_result


def validate_collection_variables(
    collection: CollectionNode,
    all_collections: list[CollectionNode],
) -> CollectionValidationReport:
    """Validate that a collection's variables follow the layer rules.

    Args:
        collection: Collection to check.
        all_collections: Snapshot used to look up alias target collections.

    Returns:
        CollectionValidationReport with accumulated errors and warnings.
    """
    report = CollectionValidationReport()

    if collection.layer is None:
        report.warnings.append("Collection has no layer assigned")
        return report

    for variable in collection.variables:
        has_aliases = variable.has_aliases

        if collection.layer == CollectionLayer.PRIMITIVE and has_aliases:
            report.errors.append(
                f'Variable "{variable.name}" has aliases, but primitive '
                "collections cannot have aliases"
            )

        if collection.layer == CollectionLayer.SEMANTIC and not has_aliases:
            report.warnings.append(
                f'Variable "{variable.name}" has no aliases - semantic '
                "variables should alias primitives"
            )

        if collection.layer == CollectionLayer.THEME and not has_aliases:
            report.warnings.append(
                f'Variable "{variable.name}" has no aliases - theme '
                "variables should alias semantic"
            )

        for mode_id, value in variable.alias_values():
            target_collection = _target_collection(value, collection, all_collections)
            if target_collection is None:
                continue
            result = validate_alias_relationship(collection, target_collection)
            if not result.is_valid:
                report.errors.append(
                    f'Variable "{variable.name}" (mode {mode_id}): {result.error}'
                )

    return report


def _target_collection(
    value: AliasValue,
    owner: CollectionNode,
    all_collections: list[CollectionNode],
) -> CollectionNode | None:
    """Collection an alias points into, or None if it is not in the snapshot."""
    if value.collection_id is None or value.collection_id == owner.id:
        return owner
    return find_collection(all_collections, value.collection_id)


def validate_all_collections(
    collections: list[CollectionNode],
) -> dict[str, CollectionValidationReport]:
    """Validate every collection of a snapshot.

    A repeated collection id is logged and skipped; the first occurrence is
    the one reported.

    Returns:
        dict: Collection id to report, in input order.
    """
    reports: dict[str, CollectionValidationReport] = {}
    for collection in collections:
        if collection.id in reports:
            logger.warning(
                f"Duplicate collection id {collection.id} "
                f"({collection.name}); only the first is validated"
            )
            continue
        reports[collection.id] = validate_collection_variables(collection, collections)
    return reports


def get_collections_by_layer(
    collections: list[CollectionNode], layer: CollectionLayer | None
) -> list[CollectionNode]:
    """Collections assigned to `layer` (None selects unassigned ones)."""
    return [c for c in collections if c.layer == layer]


def get_layer_label(layer: CollectionLayer | None) -> str:
    """Display label for a layer."""
    return _LAYER_LABELS.get(layer, "Unassigned")


def get_layer_description(layer: CollectionLayer | None) -> str:
    """One-line description of what a layer may alias."""
    if layer is None:
        return "No layer assigned - any alias allowed"
    return _LAYER_DESCRIPTIONS[layer]


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
