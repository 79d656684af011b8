"""Dependency-graph layout of design-token variables and collections."""

from rangde.layout.lib import (
    COLLECTION_COLUMN_WIDTH,
    COLLECTION_START_X,
    COLLECTION_START_Y,
    COLLECTION_VERTICAL_SPACING,
    COLUMN_SPACING,
    COLUMN_WIDTH,
    NODE_HEIGHT,
    NODE_SPACING,
    START_X,
    START_Y,
    UNASSIGNED_GAP,
    UNASSIGNED_GRID_COLUMNS,
    DependencyGraph,
    LayoutConfig,
    LayoutResult,
    Position,
    PositionedCollection,
    PositionedVariable,
    auto_arrange_collections,
    auto_layout_variables,
    build_dependency_graph,
    calculate_column_layout,
    get_column_index,
    get_column_x,
    topological_order,
)

__all__ = [
    # Geometry
    "COLUMN_WIDTH",
    "NODE_HEIGHT",
    "NODE_SPACING",
    "COLUMN_SPACING",
    "START_X",
    "START_Y",
    "LayoutConfig",
    "COLLECTION_COLUMN_WIDTH",
    "COLLECTION_START_X",
    "COLLECTION_START_Y",
    "COLLECTION_VERTICAL_SPACING",
    "UNASSIGNED_GAP",
    "UNASSIGNED_GRID_COLUMNS",
    # Results
    "LayoutResult",
    "Position",
    "PositionedCollection",
    "PositionedVariable",
    # Algorithm
    "DependencyGraph",
    "auto_layout_variables",
    "build_dependency_graph",
    "topological_order",
    # Collection arrangement
    "auto_arrange_collections",
    "calculate_column_layout",
    "get_column_index",
    "get_column_x",
]
