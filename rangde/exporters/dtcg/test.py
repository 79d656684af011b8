"""Unit tests for the DTCG exporter."""

import pytest

from rangde.exporters import get_exporter
from rangde.exporters.dtcg import (
    DTCGExporter,
    export_collection_to_dtcg,
    export_multiple_collections_to_dtcg,
    export_with_all_modes,
)
from rangde.model import AliasValue, CollectionNode, ColorValue, Variable, VariableMode


def _token(value, description=None):
    token = {"$type": "color", "$value": value}
    if description:
        token["$description"] = description
    return token


class TestExportCollectionToDTCG:
    """Tests for single collection export."""

    @pytest.mark.unit
    def test_primitives(self, primitives):
        """Concrete colors are nested by name segments."""
        tokens = export_collection_to_dtcg(primitives, [primitives])
        assert tokens == {
            "blue": {"500": _token("#3B82F6")},
            "white": _token("#FFFFFF"),
            "black": _token("#000000"),
        }

    @pytest.mark.unit
    def test_alias_references(self, semantic, layered_collections):
        """Aliases become references with descriptions kept."""
        tokens = export_collection_to_dtcg(semantic, layered_collections)
        assert tokens == {
            "color": {
                "primary": _token("{primitives.blue.500}", "Primary brand color"),
                "surface": _token("{primitives.white}"),
            }
        }

    @pytest.mark.unit
    def test_mode_selection(self, semantic, layered_collections):
        """An explicit mode exports that mode's values."""
        tokens = export_collection_to_dtcg(semantic, layered_collections, "dark")
        assert tokens["color"]["surface"]["$value"] == "{primitives.black}"

    @pytest.mark.unit
    def test_reference_uses_collection_slug(self, theme, layered_collections):
        """References are rooted at the slugged target collection name."""
        tokens = export_collection_to_dtcg(theme, layered_collections)
        assert tokens == {"button": {"background": _token("{semantic.color.primary}")}}

    @pytest.mark.unit
    def test_unresolved_alias_falls_back(self, semantic):
        """Unknown alias targets export as black with a warning."""
        warnings = []
        tokens = export_collection_to_dtcg(semantic, [semantic], warnings=warnings)
        assert tokens["color"]["primary"]["$value"] == "#000000"
        assert len(warnings) == 2
        assert {w.mode_id for w in warnings} == {"light"}

    @pytest.mark.unit
    def test_missing_value_skipped(self):
        """Variables without a value in the mode are left out."""
        collection = CollectionNode(
            id="c",
            name="C",
            modes=[VariableMode(id="a", name="A"), VariableMode(id="b", name="B")],
            variables=[
                Variable(id="x", name="x", values_by_mode={"a": ColorValue(hex="#fff")}),
                Variable(id="y", name="y", values_by_mode={"b": ColorValue(hex="#000")}),
            ],
        )
        assert export_collection_to_dtcg(collection, [collection]) == {"x": _token("#fff")}

    @pytest.mark.unit
    def test_no_modes(self, caplog):
        """A collection without modes exports nothing."""
        collection = CollectionNode(id="c", name="Empty")
        with caplog.at_level("WARNING"):
            assert export_collection_to_dtcg(collection, [collection]) == {}
        assert "No mode found" in caplog.text

    @pytest.mark.unit
    def test_later_token_replaces_group(self):
        """A token and a group never share a path."""
        collection = CollectionNode(
            id="c",
            name="C",
            modes=[VariableMode(id="m", name="M")],
            variables=[
                Variable(id="g", name="brand/primary", values_by_mode={"m": ColorValue(hex="#111")}),
                Variable(id="t", name="brand", values_by_mode={"m": ColorValue(hex="#222")}),
                Variable(id="n", name="brand/accent", values_by_mode={"m": ColorValue(hex="#333")}),
            ],
        )
        tokens = export_collection_to_dtcg(collection, [collection])
        assert tokens == {"brand": {"accent": _token("#333")}}

    @pytest.mark.unit
    def test_same_collection_alias(self):
        """Aliases without a collection id resolve in the owner."""
        collection = CollectionNode(
            id="c",
            name="My Colors",
            modes=[VariableMode(id="m", name="M")],
            variables=[
                Variable(id="a", name="Base", values_by_mode={"m": ColorValue(hex="#123456")}),
                Variable(id="b", name="Copy", values_by_mode={"m": AliasValue(variable_id="a")}),
            ],
        )
        tokens = export_collection_to_dtcg(collection, [collection])
        assert tokens["copy"]["$value"] == "{my-colors.base}"


class TestExportMultipleCollections:
    """Tests for multi-collection export."""

    @pytest.mark.unit
    def test_groups_per_collection(self, layered_collections):
        """Each collection becomes a top-level group."""
        tokens = export_multiple_collections_to_dtcg(layered_collections)
        assert list(tokens) == ["primitives", "semantic", "brand-theme"]
        assert tokens["brand-theme"]["button"]["background"]["$value"] == (
            "{semantic.color.primary}"
        )


class TestExportWithAllModes:
    """Tests for per-mode files."""

    @pytest.mark.unit
    def test_files_per_mode(self, layered_collections):
        """One file per mode plus tokens.json for the first mode."""
        files = export_with_all_modes(layered_collections)
        assert list(files) == ["tokens.light.json", "tokens.dark.json", "tokens.json"]
        assert files["tokens.json"] == files["tokens.light.json"]
        assert files["tokens.dark.json"]["semantic"]["color"]["surface"]["$value"] == (
            "{primitives.black}"
        )

    @pytest.mark.unit
    def test_unresolved_aliases_logged_once(self, semantic, caplog):
        """tokens.json reuses the first mode and logs nothing extra."""
        warnings = []
        with caplog.at_level("WARNING"):
            files = export_with_all_modes([semantic], warnings=warnings)
        logged = [r for r in caplog.records if "Alias reference not found" in r.message]
        assert len(warnings) == 4
        assert len(logged) == 4
        assert files["tokens.json"] is files["tokens.light.json"]

    @pytest.mark.unit
    def test_single_collection_unwrapped(self, primitives):
        """A single collection is not wrapped in a group."""
        files = export_with_all_modes([primitives])
        assert "blue" in files["tokens.light.json"]

    @pytest.mark.unit
    def test_no_modes(self):
        """Nothing is exported without modes."""
        assert export_with_all_modes([CollectionNode(id="c", name="C")]) == {}


class TestDTCGExporter:
    """Tests for the registered DTCG exporter."""

    @pytest.mark.unit
    def test_registered(self):
        """The exporter is available by name."""
        exporter = get_exporter("dtcg")
        assert isinstance(exporter, DTCGExporter)
        assert exporter.default_filename([]) == "tokens.json"

    @pytest.mark.unit
    def test_export_with_warnings(self, semantic):
        """Warnings are collected into the result."""
        result = DTCGExporter().export_with_warnings([semantic], mode_id="dark")
        assert result.provider == "dtcg"
        assert result.has_warnings
        assert all(w.mode_id == "dark" for w in result.warnings)

    @pytest.mark.unit
    def test_selection_with_context(self, theme, layered_collections):
        """A selected collection resolves against the full snapshot."""
        content = DTCGExporter().export([theme], all_collections=layered_collections)
        assert content["button"]["background"]["$value"] == "{semantic.color.primary}"
