"""Figma variables exporter.

Produces the JSON shape Figma's variable import understands: one document per
collection with stable variable identifiers, raw values per mode (colors or
VARIABLE_ALIAS references) and a resolved preview colour per mode.

Identifiers are derived from a 32-bit rolling hash of the collection and
variable ids, so re-exporting the same snapshot yields the same ids and files
produced by earlier exports stay compatible.
"""

import re
from typing import Literal, Union

from pydantic import BaseModel, Field, model_serializer
from pydantic.alias_generators import to_camel

from rangde.core.log import get_logger
from rangde.exporters.lib import (
    ExportProvider,
    ExportWarning,
    record_unresolved_alias,
    register_exporter,
    resolve_alias,
    strip_name_prefix,
)
from rangde.model import (
    BLACK,
    RGBA,
    AliasValue,
    CollectionNode,
    ColorValue,
    Variable,
    VariableKey,
    alias_target,
    hex_to_rgba,
)

logger = get_logger(__name__)

_FIGMA_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


class FigmaAlias(BaseModel):
    """Reference to another Figma variable."""

    type: Literal["VARIABLE_ALIAS"] = "VARIABLE_ALIAS"
    id: str = Field(..., description="Target Figma variable id")


class ResolvedModeValue(BaseModel):
    """Preview of what a mode value resolves to.

    `alias_name` is omitted from the output when there is no alias; `alias`
    is always written (null for concrete values).
    """

    resolved_value: RGBA
    alias: str | None = None
    alias_name: str | None = None

    model_config = _FIGMA_CONFIG

    @model_serializer(mode="wrap")
    def _omit_missing_alias_name(self, handler):
        data = handler(self)
        if self.alias_name is None:
            data.pop("aliasName", None)
            data.pop("alias_name", None)
        return data


class FigmaVariable(BaseModel):
    """One exported variable."""

    id: str
    name: str
    description: str = ""
    type: Literal["COLOR"] = "COLOR"
    values_by_mode: dict[str, Union[RGBA, FigmaAlias]] = Field(default_factory=dict)
    resolved_values_by_mode: dict[str, ResolvedModeValue] = Field(
        default_factory=dict
    )
    scopes: list[str] = Field(default_factory=lambda: ["ALL_SCOPES"])
    hidden_from_publishing: bool = False
    code_syntax: dict[str, str] = Field(default_factory=dict)

    model_config = _FIGMA_CONFIG


class FigmaExport(BaseModel):
    """One exported collection document."""

    id: str = Field(..., description="VariableCollectionId:<collection id>")
    name: str
    modes: dict[str, str] = Field(
        default_factory=dict, description="Mode id to mode name"
    )
    variable_ids: list[str] = Field(default_factory=list)
    variables: list[FigmaVariable] = Field(default_factory=list)

    model_config = _FIGMA_CONFIG

    def to_dict(self) -> dict:
        """JSON-ready document with Figma's camelCase keys."""
        return self.model_dump(by_alias=True)


def generate_variable_id(variable_id: str, collection_id: str) -> str:
    """Deterministic Figma variable id for a variable.

    Hashes the UTF-16 code units of "<collection_id>-<variable_id>" with
    h = h * 31 + unit in signed 32-bit arithmetic, then formats the absolute
    value as VariableID:<1000 + h % 9000>:<h % 1000>.

    Example:
        >>> generate_variable_id("v", "c")
        'VariableID:7652:652'
    """
    data = f"{collection_id}-{variable_id}".encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    h = abs(h)
    return f"VariableID:{1000 + h % 9000}:{h % 1000}"


def generate_code_syntax(name: str) -> str:
    """CSS custom property reference derived from a variable name.

    Example:
        >>> generate_code_syntax("🎨/Blue/500")
        'var(--blue-500)'
    """
    css_name = strip_name_prefix(name).replace("/", "-").lower()
    css_name = re.sub(r"\s+", "-", css_name)
    css_name = re.sub(r"[^a-z0-9-]", "", css_name)
    return f"var(--{css_name})"


def build_variable_id_map(collections: list[CollectionNode]) -> dict[VariableKey, str]:
    """Figma id of every variable in `collections`."""
    return {
        collection.key_for(variable): generate_variable_id(variable.id, collection.id)
        for collection in collections
        for variable in collection.variables
    }


def _export_variable(
    variable: Variable,
    collection: CollectionNode,
    scope: list[CollectionNode],
    id_map: dict[VariableKey, str],
    warnings: list[ExportWarning] | None,
) -> FigmaVariable:
    values_by_mode: dict[str, RGBA | FigmaAlias] = {}
    resolved_by_mode: dict[str, ResolvedModeValue] = {}

    for mode in collection.modes:
        value = variable.values_by_mode.get(mode.id)

        if isinstance(value, ColorValue):
            color = hex_to_rgba(value.hex)
            values_by_mode[mode.id] = color
            resolved_by_mode[mode.id] = ResolvedModeValue(resolved_value=color)
            continue

        if isinstance(value, AliasValue):
            target = resolve_alias(value, collection, scope)
            target_id = id_map.get(alias_target(value, collection.id))
            if target is not None and target_id is not None:
                _, target_variable = target
                values_by_mode[mode.id] = FigmaAlias(id=target_id)
                resolved_by_mode[mode.id] = ResolvedModeValue(
                    resolved_value=_preview_color(target_variable, mode.id),
                    alias=target_id,
                    alias_name=target_variable.name,
                )
                continue
            record_unresolved_alias(warnings, collection, variable, mode.id, value)

        values_by_mode[mode.id] = BLACK
        resolved_by_mode[mode.id] = ResolvedModeValue(resolved_value=BLACK)

    return FigmaVariable(
        id=generate_variable_id(variable.id, collection.id),
        name=variable.name,
        description=variable.description or "",
        values_by_mode=values_by_mode,
        resolved_values_by_mode=resolved_by_mode,
        scopes=variable.scopes or ["ALL_SCOPES"],
        code_syntax={"WEB": variable.code_syntax or generate_code_syntax(variable.name)},
    )


def _preview_color(target: Variable, mode_id: str) -> RGBA:
    """Colour of the alias target in the same mode, one hop only."""
    value = target.values_by_mode.get(mode_id)
    if isinstance(value, ColorValue):
        return hex_to_rgba(value.hex)
    return BLACK


def export_collection_to_figma(
    collection: CollectionNode,
    all_collections: list[CollectionNode] | None = None,
    warnings: list[ExportWarning] | None = None,
) -> FigmaExport:
    """Export one collection to a Figma variables document.

    Args:
        collection: Collection to export.
        all_collections: Collections aliases may resolve into. Without it only
            aliases within `collection` resolve.
        warnings: List that receives an ExportWarning per unresolved alias.

    Returns:
        FigmaExport document. Values that cannot be resolved are exported as
        opaque black so the document stays importable.

    Example:
        >>> doc = export_collection_to_figma(primitives)
        >>> doc.to_dict()["id"]
        'VariableCollectionId:prim'
    """
    scope = all_collections if all_collections is not None else [collection]
    id_map = build_variable_id_map(scope)

    variables = [
        _export_variable(variable, collection, scope, id_map, warnings)
        for variable in collection.variables
    ]

    return FigmaExport(
        id=f"VariableCollectionId:{collection.id}",
        name=collection.name,
        modes={mode.id: mode.name for mode in collection.modes},
        variable_ids=[v.id for v in variables],
        variables=variables,
    )


def export_multiple_collections(
    collections: list[CollectionNode],
    warnings: list[ExportWarning] | None = None,
) -> list[FigmaExport]:
    """Export collections together so cross-collection aliases resolve."""
    return [
        export_collection_to_figma(collection, collections, warnings)
        for collection in collections
    ]


@register_exporter
class FigmaExporter(ExportProvider):
    """Exports collections as Figma variable documents.

    A single collection produces one document; several produce a list of
    documents sharing one identifier space. Every mode is exported, so
    `mode_id` is ignored.
    """

    @property
    def name(self) -> str:
        """Exporter identifier."""
        return "figma"

    @property
    def file_extension(self) -> str:
        """Figma imports JSON."""
        return ".json"

    def default_filename(self, collections: list[CollectionNode]) -> str:
        """`<collection-name>.json` for one collection, else collections.json."""
        if len(collections) == 1:
            stem = re.sub(r"\s+", "-", collections[0].name.lower())
            return f"{stem}{self.file_extension}"
        return f"collections{self.file_extension}"

    def export(
        self,
        collections: list[CollectionNode],
        *,
        mode_id: str | None = None,
        all_collections: list[CollectionNode] | None = None,
        warnings: list[ExportWarning] | None = None,
    ) -> dict | list[dict]:
        if len(collections) == 1:
            document = export_collection_to_figma(
                collections[0], all_collections, warnings
            )
            return document.to_dict()

        scope = all_collections if all_collections is not None else collections
        return [
            export_collection_to_figma(collection, scope, warnings).to_dict()
            for collection in collections
        ]


__all__ = [
    "FigmaAlias",
    "FigmaExport",
    "FigmaExporter",
    "FigmaVariable",
    "ResolvedModeValue",
    "build_variable_id_map",
    "export_collection_to_figma",
    "export_multiple_collections",
    "generate_code_syntax",
    "generate_variable_id",
]
