"""Tests for output module."""

import json

import pytest

from rangde.layout import auto_arrange_collections, auto_layout_variables
from rangde.model import AliasValue, CollectionLayer, CollectionNode, Variable, VariableMode
from rangde.output import (
    format_collection_arrangement,
    format_layout_summary,
    format_validation_report,
    write_export,
    write_json,
)
from rangde.validation import validate_all_collections


class TestWriteJson:
    """Tests for write_json."""

    @pytest.mark.unit
    def test_writes_pretty_utf8(self, tmp_path):
        """Content is indented and non-ASCII names are kept verbatim."""
        path = write_json({"name": "🎨/blue"}, tmp_path / "nested" / "out.json")
        text = path.read_text(encoding="utf-8")
        assert path.exists()
        assert "🎨/blue" in text
        assert text.startswith("{\n  ")
        assert json.loads(text) == {"name": "🎨/blue"}


class TestWriteExport:
    """Tests for write_export."""

    @pytest.mark.unit
    def test_figma_default_filename(self, tmp_path, layered_collections):
        """Several collections go to collections.json."""
        paths = write_export("figma", layered_collections, tmp_path)
        assert paths == [tmp_path / "collections.json"]
        documents = json.loads(paths[0].read_text(encoding="utf-8"))
        assert [d["name"] for d in documents] == ["Primitives", "Semantic", "Brand Theme"]

    @pytest.mark.unit
    def test_filename_override(self, tmp_path, primitives):
        """An explicit file name wins."""
        paths = write_export("dtcg", [primitives], tmp_path, filename="prims.json")
        assert paths == [tmp_path / "prims.json"]

    @pytest.mark.unit
    def test_mode_selection(self, tmp_path, layered_collections):
        """Single-mode formats honour mode_id."""
        (path,) = write_export("dtcg", layered_collections, tmp_path, mode_id="dark")
        tokens = json.loads(path.read_text(encoding="utf-8"))
        assert tokens["semantic"]["color"]["surface"]["$value"] == "{primitives.black}"

    @pytest.mark.unit
    def test_dtcg_all_modes(self, tmp_path, layered_collections):
        """DTCG writes one file per mode plus tokens.json."""
        paths = write_export("dtcg", layered_collections, tmp_path, all_modes=True)
        assert [p.name for p in paths] == [
            "tokens.light.json",
            "tokens.dark.json",
            "tokens.json",
        ]

    @pytest.mark.unit
    def test_selection_with_context(self, tmp_path, theme, layered_collections, caplog):
        """A selected collection resolves against all collections."""
        with caplog.at_level("WARNING"):
            (path,) = write_export(
                "figma", [theme], tmp_path, all_collections=layered_collections
            )
        assert path.name == "brand-theme.json"
        assert "Alias reference not found" not in caplog.text

    @pytest.mark.unit
    def test_unknown_exporter(self, tmp_path, primitives):
        """Unknown exporters raise KeyError."""
        with pytest.raises(KeyError):
            write_export("sketch", [primitives], tmp_path)


class TestFormatLayoutSummary:
    """Tests for format_layout_summary."""

    @pytest.mark.unit
    def test_columns(self, layered_collections):
        """Each column is listed with its variables and positions."""
        summary = format_layout_summary(auto_layout_variables(layered_collections))
        lines = summary.splitlines()
        assert lines[0] == "Column 0"
        assert lines[1] == "  Primitives / 🎨/black  (50, 50)"
        assert "Column 2" in lines
        assert lines[-1] == "  Brand Theme / button/background  (990, 50)"

    @pytest.mark.unit
    def test_cycles_listed(self, cyclic_collections):
        """Ignored cyclic aliases are reported."""
        summary = format_layout_summary(auto_layout_variables(cyclic_collections))
        assert "Ignored cyclic aliases:" in summary
        assert "  c2:v2 -> c1:v1" in summary

    @pytest.mark.unit
    def test_empty(self):
        """An empty layout has a friendly message."""
        assert format_layout_summary(auto_layout_variables([])) == "No variables to lay out."


class TestFormatCollectionArrangement:
    """Tests for format_collection_arrangement."""

    @pytest.mark.unit
    def test_layers_and_unassigned(self, layered_collections, cyclic_collections):
        """Each collection is listed with its layer label and position."""
        arranged = auto_arrange_collections(layered_collections + cyclic_collections)
        assert format_collection_arrangement(arranged).splitlines() == [
            "Primitives [Primitive]  (100, 100)",
            "Semantic [Semantic]  (500, 100)",
            "Brand Theme [Theme]  (900, 100)",
            "One [Unassigned]  (100, 400)",
            "Two [Unassigned]  (500, 400)",
        ]

    @pytest.mark.unit
    def test_empty(self):
        """No collections has a friendly message."""
        assert format_collection_arrangement([]) == "No collections to arrange."


class TestFormatValidationReport:
    """Tests for format_validation_report."""

    @pytest.mark.unit
    def test_valid_snapshot(self, layered_collections):
        """Valid collections report OK with their layer label."""
        text = format_validation_report(
            validate_all_collections(layered_collections), layered_collections
        )
        assert text.splitlines() == [
            "Primitives [Primitive]: OK",
            "Semantic [Semantic]: OK",
            "Brand Theme [Theme]: OK",
        ]

    @pytest.mark.unit
    def test_errors_and_warnings(self, cyclic_collections):
        """Errors and warnings are listed beneath their collection."""
        broken = CollectionNode(
            id="p",
            name="Broken",
            layer=CollectionLayer.PRIMITIVE,
            modes=[VariableMode(id="m", name="M")],
            variables=[
                Variable(
                    id="v",
                    name="v",
                    values_by_mode={"m": AliasValue(variable_id="v")},
                )
            ],
        )
        collections = cyclic_collections + [broken]
        text = format_validation_report(validate_all_collections(collections), collections)
        lines = text.splitlines()
        assert lines[0] == "One [Unassigned]: OK, 1 warning(s)"
        assert lines[1] == "  warning: Collection has no layer assigned"
        assert "Broken [Primitive]: 2 error(s)" in lines
        assert (
            '  error: Variable "v" has aliases, but primitive collections cannot have aliases'
            in lines
        )
