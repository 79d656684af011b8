"""Automatic column layout of the variable dependency graph.

Every variable of every collection becomes a node; every alias becomes an
edge from the aliasing variable to its target. Nodes are placed in columns by
dependency depth (concrete values in column 0, aliases to them in column 1,
and so on), grouped by collection and stacked top to bottom.

The layout is deterministic for a given snapshot: graph construction follows
input order and all groupings are sorted with total keys.

Whole collections can also be arranged on the canvas by layer, one column
each for Primitive, Semantic and Theme, with unassigned collections in a grid
below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rangde.config import EnvVar, get_environment
from rangde.core.log import get_logger
from rangde.model import (
    CollectionLayer,
    CollectionNode,
    Variable,
    VariableKey,
    alias_target,
    index_variables,
)

logger = get_logger(__name__)

COLUMN_WIDTH = 320
NODE_HEIGHT = 160
NODE_SPACING = 40
COLUMN_SPACING = 150
START_X = 50
START_Y = 50

DependencyGraph = dict[VariableKey, list[VariableKey]]


@dataclass(frozen=True)
class LayoutConfig:
    """Canvas geometry for the layout.

    Defaults are tuned for a screen canvas; any scale works.
    """

    column_width: float = COLUMN_WIDTH
    node_height: float = NODE_HEIGHT
    node_spacing: float = NODE_SPACING
    column_spacing: float = COLUMN_SPACING
    start_x: float = START_X
    start_y: float = START_Y

    @classmethod
    def from_environment(cls) -> "LayoutConfig":
        """Build a config from RANGDE_LAYOUT_* environment variables."""
        return cls(
            column_width=get_environment(EnvVar.LAYOUT_COLUMN_WIDTH),
            node_height=get_environment(EnvVar.LAYOUT_NODE_HEIGHT),
            node_spacing=get_environment(EnvVar.LAYOUT_NODE_SPACING),
            column_spacing=get_environment(EnvVar.LAYOUT_COLUMN_SPACING),
            start_x=get_environment(EnvVar.LAYOUT_START_X),
            start_y=get_environment(EnvVar.LAYOUT_START_Y),
        )

    def column_x(self, column: int) -> float:
        """X coordinate of a column."""
        return self.start_x + column * (self.column_width + self.column_spacing)


@dataclass
class Position:
    """Top-left corner of a node on the canvas."""

    x: float
    y: float


@dataclass
class PositionedVariable:
    """A variable annotated with its collection and placement.

    Attributes:
        variable: The variable as found in the snapshot.
        collection_id: Owning collection id.
        collection_name: Owning collection display name.
        collection_icon: Owning collection icon, if any.
        column: Dependency depth (0 for variables without aliases).
        row_in_column: Index within its collection group in this column.
        position: Canvas position.
    """

    variable: Variable
    collection_id: str
    collection_name: str
    collection_icon: str | None
    column: int
    row_in_column: int
    position: Position

    @property
    def key(self) -> VariableKey:
        """Global key of the variable."""
        return VariableKey(self.collection_id, self.variable.id)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation with camelCase keys."""
        return {
            **self.variable.model_dump(by_alias=True, exclude_none=True),
            "collectionId": self.collection_id,
            "collectionName": self.collection_name,
            "collectionIcon": self.collection_icon,
            "column": self.column,
            "rowInColumn": self.row_in_column,
            "position": {"x": self.position.x, "y": self.position.y},
        }


@dataclass
class LayoutResult:
    """Result of auto layout.

    Attributes:
        variables: Positioned variables, column by column, top to bottom.
        column_count: Number of columns (0 when there are no variables).
        cycles: Alias edges (variable, dependency) ignored to break cycles.
    """

    variables: list[PositionedVariable] = field(default_factory=list)
    column_count: int = 0
    cycles: list[tuple[VariableKey, VariableKey]] = field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        """Check if any alias cycle was broken during layout."""
        return len(self.cycles) > 0

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation."""
        return {
            "variables": [v.to_dict() for v in self.variables],
            "columnCount": self.column_count,
            "cycles": [[str(src), str(dep)] for src, dep in self.cycles],
        }


def build_dependency_graph(collections: list[CollectionNode]) -> DependencyGraph:
    """Build the variable dependency graph.

    Args:
        collections: Snapshot to read.

    Returns:
        DependencyGraph: Each key maps to the keys it aliases, in mode order,
        without duplicates. Aliases to unknown variables produce no edge.
    """
    index = index_variables(collections)
    graph: DependencyGraph = {}

    for key, (collection, variable) in index.items():
        dependencies: dict[VariableKey, None] = {}
        for _, value in variable.alias_values():
            target = alias_target(value, collection.id)
            if target in index:
                dependencies[target] = None
        graph[key] = list(dependencies)

    return graph


_ON_STACK = 1
_FINISHED = 2


def topological_order(
    graph: DependencyGraph,
) -> tuple[list[VariableKey], list[tuple[VariableKey, VariableKey]]]:
    """Order nodes so that dependencies come before their dependents.

    Iterative depth-first search with three-state marking. An edge into a
    node that is still on the stack closes a cycle; that edge is logged,
    recorded and skipped, and the search carries on, so every node finishes.

    Args:
        graph: Dependency graph from build_dependency_graph.

    Returns:
        Tuple of (finished order, ignored cycle edges).
    """
    state: dict[VariableKey, int] = {}
    order: list[VariableKey] = []
    broken: list[tuple[VariableKey, VariableKey]] = []

    for root in graph:
        if root in state:
            continue

        state[root] = _ON_STACK
        stack = [(root, iter(graph[root]))]

        while stack:
            node, dependencies = stack[-1]
            for dependency in dependencies:
                mark = state.get(dependency)
                if mark is None:
                    state[dependency] = _ON_STACK
                    stack.append((dependency, iter(graph[dependency])))
                    break
                if mark == _ON_STACK:
                    logger.warning(
                        f"Cycle detected involving {dependency}; "
                        f"ignoring alias from {node}"
                    )
                    broken.append((node, dependency))
            else:
                state[node] = _FINISHED
                order.append(node)
                stack.pop()

    return order, broken


def _assign_columns(
    order: list[VariableKey],
    graph: DependencyGraph,
    broken: list[tuple[VariableKey, VariableKey]],
) -> dict[VariableKey, int]:
    """Column = 1 + deepest dependency, 0 without dependencies."""
    ignored = set(broken)
    columns: dict[VariableKey, int] = {}

    for key in order:
        dependencies = [d for d in graph[key] if (key, d) not in ignored]
        if dependencies:
            columns[key] = 1 + max(columns[d] for d in dependencies)
        else:
            columns[key] = 0

    return columns


def auto_layout_variables(
    collections: list[CollectionNode],
    config: LayoutConfig | None = None,
) -> LayoutResult:
    """Place every variable of a snapshot on a column grid.

    Columns follow dependency depth. Within a column, variables are grouped by
    collection (collection ids ascending) and sorted by name (then id); each
    column starts at the top and each collection group is followed by one
    extra spacing unit.

    Args:
        collections: Snapshot to lay out.
        config: Canvas geometry. Defaults to the built-in screen constants.

    Returns:
        LayoutResult with positioned variables and the column count.

    Example:
        >>> result = auto_layout_variables(collections)
        >>> result.column_count
        3
    """
    config = config or LayoutConfig()
    index = index_variables(collections)
    if not index:
        return LayoutResult()

    graph = build_dependency_graph(collections)
    order, broken = topological_order(graph)
    columns = _assign_columns(order, graph, broken)

    grouped: dict[int, dict[str, list[tuple[CollectionNode, Variable]]]] = {}
    for key, (collection, variable) in index.items():
        column_groups = grouped.setdefault(columns[key], {})
        column_groups.setdefault(collection.id, []).append((collection, variable))

    positioned: list[PositionedVariable] = []
    for column in sorted(grouped):
        x = config.column_x(column)
        y = config.start_y

        for collection_id in sorted(grouped[column]):
            members = sorted(
                grouped[column][collection_id],
                key=lambda member: (member[1].name, member[1].id),
            )
            for row, (collection, variable) in enumerate(members):
                positioned.append(
                    PositionedVariable(
                        variable=variable,
                        collection_id=collection.id,
                        collection_name=collection.name,
                        collection_icon=collection.icon,
                        column=column,
                        row_in_column=row,
                        position=Position(x=x, y=y),
                    )
                )
                y += config.node_height + config.node_spacing

            y += config.node_spacing

    return LayoutResult(
        variables=positioned,
        column_count=max(columns.values()) + 1,
        cycles=broken,
    )


# =============================================================================
# Collection arrangement
# =============================================================================

COLLECTION_START_X = 100
COLLECTION_START_Y = 100
COLLECTION_COLUMN_WIDTH = 400
COLLECTION_VERTICAL_SPACING = 200
UNASSIGNED_GAP = 100
UNASSIGNED_GRID_COLUMNS = 3

_LAYER_COLUMNS = {
    CollectionLayer.PRIMITIVE: 0,
    CollectionLayer.SEMANTIC: 1,
    CollectionLayer.THEME: 2,
}


@dataclass
class PositionedCollection:
    """A collection with its canvas position."""

    collection: CollectionNode
    position: Position

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation: the collection plus its position."""
        return {
            **self.collection.model_dump(by_alias=True, exclude_none=True),
            "position": {"x": self.position.x, "y": self.position.y},
        }


def get_column_index(layer: CollectionLayer | None) -> int:
    """Column of a layer: 0 Primitive, 1 Semantic, 2 Theme, -1 unassigned."""
    return _LAYER_COLUMNS.get(layer, -1)


def get_column_x(layer: CollectionLayer | None) -> float:
    """X coordinate of a layer column; unassigned collections start at column 0."""
    index = get_column_index(layer)
    if index == -1:
        return COLLECTION_START_X
    return COLLECTION_START_X + index * COLLECTION_COLUMN_WIDTH


def calculate_column_layout(collections: list[CollectionNode]) -> dict[str, Position]:
    """Place whole collections in one column per layer.

    Primitive, Semantic and Theme collections stack top to bottom in columns
    0, 1 and 2, in input order. Unassigned collections fill a three-wide grid
    that starts one gap below the tallest layer column.

    Args:
        collections: Snapshot to arrange.

    Returns:
        dict: Collection id to position. A repeated id keeps its first
        position.

    Example:
        >>> calculate_column_layout([semantic])["sem"]
        Position(x=500, y=100)
    """
    layout: dict[str, Position] = {}
    rows = {layer: 0 for layer in _LAYER_COLUMNS}
    unassigned: list[CollectionNode] = []
    seen: set[str] = set()

    for collection in collections:
        if collection.id in seen:
            continue
        seen.add(collection.id)
        if collection.layer is None:
            unassigned.append(collection)
            continue
        row = rows[collection.layer]
        rows[collection.layer] += 1
        layout[collection.id] = Position(
            x=get_column_x(collection.layer),
            y=COLLECTION_START_Y + row * COLLECTION_VERTICAL_SPACING,
        )

    grid_y = (
        COLLECTION_START_Y
        + max(rows.values()) * COLLECTION_VERTICAL_SPACING
        + UNASSIGNED_GAP
    )
    for index, collection in enumerate(unassigned):
        column, row = index % UNASSIGNED_GRID_COLUMNS, index // UNASSIGNED_GRID_COLUMNS
        layout[collection.id] = Position(
            x=COLLECTION_START_X + column * COLLECTION_COLUMN_WIDTH,
            y=grid_y + row * COLLECTION_VERTICAL_SPACING,
        )

    return layout


def auto_arrange_collections(
    collections: list[CollectionNode],
) -> list[PositionedCollection]:
    """Pair every collection with its layer-column position, in input order."""
    layout = calculate_column_layout(collections)
    logger.debug(f"Arranged {len(layout)} collection(s) by layer")
    return [
        PositionedCollection(collection=collection, position=layout[collection.id])
        for collection in collections
    ]


__all__ = [
    "COLUMN_WIDTH",
    "NODE_HEIGHT",
    "NODE_SPACING",
    "COLUMN_SPACING",
    "START_X",
    "START_Y",
    "COLLECTION_COLUMN_WIDTH",
    "COLLECTION_START_X",
    "COLLECTION_START_Y",
    "COLLECTION_VERTICAL_SPACING",
    "UNASSIGNED_GAP",
    "UNASSIGNED_GRID_COLUMNS",
    "DependencyGraph",
    "LayoutConfig",
    "LayoutResult",
    "Position",
    "PositionedCollection",
    "PositionedVariable",
    "auto_arrange_collections",
    "auto_layout_variables",
    "calculate_column_layout",
    "get_column_index",
    "get_column_x",
    "build_dependency_graph",
    "topological_order",
]
