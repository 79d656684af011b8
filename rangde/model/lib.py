"""Core data models for the layered design-token snapshot.

This module defines the read-only schema the host application hands to the
validator, the layout engine and the exporters. Snapshots arrive as JSON
(camelCase keys) and are validated into frozen Pydantic models, so no
component can mutate the collections it was given.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal, NamedTuple, Union

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.alias_generators import to_camel

HEX_COLOR_PATTERN = r"^#?(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$"

_SNAPSHOT_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "frozen": True,
}


class CollectionLayer(str, Enum):
    """Layer classification of a collection.

    Layers are ordered PRIMITIVE < SEMANTIC < THEME. A layered collection may
    only alias the layer directly below it; primitives hold concrete values.
    Collections without a layer (None) are validated in legacy mode.
    """

    PRIMITIVE = "primitive"
    SEMANTIC = "semantic"
    THEME = "theme"


class VariableKey(NamedTuple):
    """Global identity of a variable: (collection id, variable id).

    Variable ids are only unique within their collection, so this pair is the
    node key of every graph built over a snapshot.
    """

    collection_id: str
    variable_id: str

    def __str__(self) -> str:
        return f"{self.collection_id}:{self.variable_id}"


class VariableMode(BaseModel):
    """An axis of variation within a collection (e.g. Light, Dark)."""

    id: str = Field(..., description="Mode id, unique within its collection")
    name: str = Field(..., description="Display name of the mode")

    model_config = _SNAPSHOT_CONFIG


class ColorValue(BaseModel):
    """A literal color value."""

    type: Literal["color"] = "color"
    hex: str = Field(
        ...,
        pattern=HEX_COLOR_PATTERN,
        description="Hex color (#RGB, #RGBA, #RRGGBB or #RRGGBBAA)",
    )

    model_config = _SNAPSHOT_CONFIG


class AliasValue(BaseModel):
    """A reference to another variable.

    When collection_id is omitted the alias points into the owning collection.
    """

    type: Literal["alias"] = "alias"
    variable_id: str = Field(..., description="Target variable id")
    collection_id: str | None = Field(
        None, description="Target collection id (defaults to the owner)"
    )

    model_config = _SNAPSHOT_CONFIG


VariableValue = Annotated[Union[ColorValue, AliasValue], Field(discriminator="type")]


class Variable(BaseModel):
    """A named slot holding one value per mode.

    Attributes:
        id: Variable id, unique within its collection.
        name: Display name, usually a slash path such as "🎨/black/800".
        description: Optional free text.
        scopes: Optional Figma scopes (e.g. ["FRAME_FILL"]).
        code_syntax: Optional explicit code syntax override.
        values_by_mode: Mode id to value. Modes may be missing.
    """

    id: str = Field(..., description="Variable id, unique within its collection")
    name: str = Field(..., description="Display name")
    description: str | None = Field(None, description="Free text description")
    scopes: list[str] | None = Field(None, description="Figma variable scopes")
    code_syntax: str | None = Field(None, description="Code syntax override")
    values_by_mode: dict[str, VariableValue] = Field(
        default_factory=dict,
        description="Mode id to exactly one color or alias value",
    )

    model_config = _SNAPSHOT_CONFIG

    @property
    def has_aliases(self) -> bool:
        """True when at least one mode holds an alias value."""
        return any(isinstance(v, AliasValue) for v in self.values_by_mode.values())

    def alias_values(self) -> list[tuple[str, AliasValue]]:
        """Return (mode id, alias) pairs in mode declaration order."""
        return [
            (mode_id, value)
            for mode_id, value in self.values_by_mode.items()
            if isinstance(value, AliasValue)
        ]


class CollectionNode(BaseModel):
    """A named group of variables sharing a set of modes.

    Host-only fields (canvas position, timestamps, metadata) are accepted and
    ignored.
    """

    id: str = Field(..., description="Unique collection id")
    name: str = Field(..., description="Display name")
    icon: str | None = Field(None, description="Optional display icon")
    layer: CollectionLayer | None = Field(
        None, description="Layer classification, None when unassigned"
    )
    modes: list[VariableMode] = Field(
        default_factory=list, description="Ordered modes"
    )
    variables: list[Variable] = Field(
        default_factory=list, description="Variables in display order"
    )

    model_config = _SNAPSHOT_CONFIG

    def get_variable(self, variable_id: str) -> Variable | None:
        """Find a variable by id (first match)."""
        for variable in self.variables:
            if variable.id == variable_id:
                return variable
        return None

    def get_mode(self, mode_id: str) -> VariableMode | None:
        """Find a mode by id."""
        for mode in self.modes:
            if mode.id == mode_id:
                return mode
        return None

    def key_for(self, variable: Variable) -> VariableKey:
        """Global key of one of this collection's variables."""
        return VariableKey(self.id, variable.id)


class RGBA(BaseModel):
    """Color with normalized 0-1 channels."""

    r: float
    g: float
    b: float
    a: float = 1.0

    model_config = {"frozen": True}


BLACK = RGBA(r=0.0, g=0.0, b=0.0, a=1.0)


# =============================================================================
# Helpers
# =============================================================================


def alias_target(value: AliasValue, owner_id: str) -> VariableKey:
    """Resolve the global key an alias points at.

    Args:
        value: The alias value.
        owner_id: Id of the collection that owns the aliasing variable.

    Returns:
        VariableKey of the target (same collection when none is given).
    """
    return VariableKey(value.collection_id or owner_id, value.variable_id)


def find_collection(
    collections: list[CollectionNode], collection_id: str
) -> CollectionNode | None:
    """Find a collection by id (first match)."""
    for collection in collections:
        if collection.id == collection_id:
            return collection
    return None


def index_variables(
    collections: list[CollectionNode],
) -> dict[VariableKey, tuple[CollectionNode, Variable]]:
    """Index every variable of a snapshot by its global key.

    The mapping preserves input order. When a key appears twice the first
    occurrence wins, matching lookups by id elsewhere in the core.
    """
    index: dict[VariableKey, tuple[CollectionNode, Variable]] = {}
    for collection in collections:
        for variable in collection.variables:
            index.setdefault(collection.key_for(variable), (collection, variable))
    return index


def hex_to_rgba(hex_color: str) -> RGBA:
    """Convert a hex color string to normalized RGBA.

    Accepts #RGB, #RGBA, #RRGGBB and #RRGGBBAA (the leading # is optional).
    Alpha from the 4/8 digit forms is rounded to two decimals.

    Raises:
        ValueError: If the string is not a hex color.

    Example:
        >>> hex_to_rgba("#FF0000")
        RGBA(r=1.0, g=0.0, b=0.0, a=1.0)
    """
    digits = hex_color[1:] if hex_color.startswith("#") else hex_color
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) not in (6, 8):
        raise ValueError(f"Invalid hex color: {hex_color!r}")

    try:
        channels = [int(digits[i : i + 2], 16) for i in range(0, len(digits), 2)]
    except ValueError as e:
        raise ValueError(f"Invalid hex color: {hex_color!r}") from e

    alpha = round(channels[3] / 255, 2) if len(channels) == 4 else 1.0
    return RGBA(
        r=channels[0] / 255,
        g=channels[1] / 255,
        b=channels[2] / 255,
        a=alpha,
    )


# =============================================================================
# Snapshot Loading
# =============================================================================

_COLLECTIONS_ADAPTER = TypeAdapter(list[CollectionNode])


def load_collections(data: Any) -> list[CollectionNode]:
    """Validate raw snapshot data into collection models.

    Args:
        data: Either a list of collection dicts or a mapping with a
            "collections" list (the host's persisted state shape).

    Returns:
        list[CollectionNode]: Collections in input order.

    Raises:
        pydantic.ValidationError: If the data does not match the schema.
    """
    if isinstance(data, dict):
        data = data.get("collections", data.get("collectionNodes", []))
    return _COLLECTIONS_ADAPTER.validate_python(data)


def load_collections_file(path: Path | str) -> list[CollectionNode]:
    """Load and validate a JSON snapshot file.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not valid JSON or fails validation.
    """
    text = Path(path).read_text(encoding="utf-8")
    return load_collections(json.loads(text))


def export_json_schema() -> dict:
    """Export the JSON Schema of a snapshot (a list of collections).

    Returns:
        dict: JSON Schema with camelCase property names.
    """
    return _COLLECTIONS_ADAPTER.json_schema(by_alias=True)


__all__ = [
    "BLACK",
    "RGBA",
    "AliasValue",
    "CollectionLayer",
    "CollectionNode",
    "ColorValue",
    "Variable",
    "VariableKey",
    "VariableMode",
    "VariableValue",
    "alias_target",
    "export_json_schema",
    "find_collection",
    "hex_to_rgba",
    "index_variables",
    "load_collections",
    "load_collections_file",
]
