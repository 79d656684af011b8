"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Snapshot fixtures shared by the validation, layout and exporter tests
"""

from __future__ import annotations

import pytest
from dotenv import load_dotenv

from rangde.model import (
    AliasValue,
    CollectionLayer,
    CollectionNode,
    ColorValue,
    Variable,
    VariableMode,
)

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Snapshot Builders
# =============================================================================


def color(hex_value: str) -> ColorValue:
    """Shorthand for a literal color value."""
    return ColorValue(hex=hex_value)


def alias(variable_id: str, collection_id: str | None = None) -> AliasValue:
    """Shorthand for an alias value."""
    return AliasValue(variable_id=variable_id, collection_id=collection_id)


LIGHT_DARK = [
    VariableMode(id="light", name="Light"),
    VariableMode(id="dark", name="Dark"),
]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def primitives() -> CollectionNode:
    """Primitive layer with two concrete colors."""
    return CollectionNode(
        id="prim",
        name="Primitives",
        icon="🎨",
        layer=CollectionLayer.PRIMITIVE,
        modes=LIGHT_DARK,
        variables=[
            Variable(
                id="blue-500",
                name="🎨/blue/500",
                values_by_mode={"light": color("#3B82F6"), "dark": color("#3B82F6")},
            ),
            Variable(
                id="white",
                name="🎨/white",
                values_by_mode={"light": color("#FFFFFF"), "dark": color("#FFFFFF")},
            ),
            Variable(
                id="black",
                name="🎨/black",
                values_by_mode={"light": color("#000000"), "dark": color("#000000")},
            ),
        ],
    )


@pytest.fixture
def semantic() -> CollectionNode:
    """Semantic layer aliasing the primitives."""
    return CollectionNode(
        id="sem",
        name="Semantic",
        layer=CollectionLayer.SEMANTIC,
        modes=LIGHT_DARK,
        variables=[
            Variable(
                id="primary",
                name="✦/color/primary",
                description="Primary brand color",
                values_by_mode={
                    "light": alias("blue-500", "prim"),
                    "dark": alias("blue-500", "prim"),
                },
            ),
            Variable(
                id="surface",
                name="✦/color/surface",
                values_by_mode={
                    "light": alias("white", "prim"),
                    "dark": alias("black", "prim"),
                },
            ),
        ],
    )


@pytest.fixture
def theme() -> CollectionNode:
    """Theme layer aliasing the semantic layer."""
    return CollectionNode(
        id="theme",
        name="Brand Theme",
        layer=CollectionLayer.THEME,
        modes=LIGHT_DARK,
        variables=[
            Variable(
                id="button-bg",
                name="button/background",
                values_by_mode={
                    "light": alias("primary", "sem"),
                    "dark": alias("primary", "sem"),
                },
            ),
        ],
    )


@pytest.fixture
def layered_collections(primitives, semantic, theme) -> list[CollectionNode]:
    """A valid three-layer snapshot (theme -> semantic -> primitive)."""
    return [primitives, semantic, theme]


@pytest.fixture
def cyclic_collections() -> list[CollectionNode]:
    """Two unlayered collections whose variables alias each other."""
    mode = [VariableMode(id="m", name="Default")]
    return [
        CollectionNode(
            id="c1",
            name="One",
            modes=mode,
            variables=[
                Variable(id="v1", name="v1", values_by_mode={"m": alias("v2", "c2")})
            ],
        ),
        CollectionNode(
            id="c2",
            name="Two",
            modes=mode,
            variables=[
                Variable(id="v2", name="v2", values_by_mode={"m": alias("v1", "c1")})
            ],
        ),
    ]
