"""Unit tests for the Figma variables exporter."""

import pytest

from rangde.exporters import get_exporter
from rangde.exporters.figma import (
    FigmaExport,
    FigmaExporter,
    build_variable_id_map,
    export_collection_to_figma,
    export_multiple_collections,
    generate_code_syntax,
    generate_variable_id,
)
from rangde.model import (
    AliasValue,
    CollectionNode,
    ColorValue,
    Variable,
    VariableKey,
    VariableMode,
)

BLACK_DICT = {"r": 0.0, "g": 0.0, "b": 0.0, "a": 1.0}
BLUE_DICT = {"r": 59 / 255, "g": 130 / 255, "b": 246 / 255, "a": 1.0}


def _single(name="Palette", variables=(), modes=None):
    return CollectionNode(
        id="c",
        name=name,
        modes=modes or [VariableMode(id="default", name="Default")],
        variables=list(variables),
    )


def _variable_dict(document: dict, variable_id: str, collection_id: str) -> dict:
    figma_id = generate_variable_id(variable_id, collection_id)
    return next(v for v in document["variables"] if v["id"] == figma_id)


class TestGenerateVariableId:
    """Tests for the deterministic identifier hash."""

    @pytest.mark.unit
    def test_known_value(self):
        """Hash of "c-v" is computed by hand: 99, 45, 118 -> 96652."""
        assert generate_variable_id("v", "c") == "VariableID:7652:652"

    @pytest.mark.unit
    def test_stable_across_calls(self):
        """Same inputs always produce the same id."""
        first = generate_variable_id("blue-500", "prim")
        assert first == generate_variable_id("blue-500", "prim")

    @pytest.mark.unit
    def test_collection_participates(self):
        """The same variable id in two collections gets two ids."""
        assert generate_variable_id("x", "a") != generate_variable_id("x", "b")

    @pytest.mark.unit
    def test_range_for_long_input(self):
        """Overflowing hashes still format within the documented ranges."""
        figma_id = generate_variable_id("v" * 500, "collection-" * 20)
        _, major, minor = figma_id.split(":")
        assert 1000 <= int(major) < 10000
        assert 0 <= int(minor) < 1000

    @pytest.mark.unit
    def test_non_ascii_input(self):
        """Astral characters hash as two UTF-16 units."""
        figma_id = generate_variable_id("🎨", "c")
        assert figma_id.startswith("VariableID:")


class TestGenerateCodeSyntax:
    """Tests for CSS code syntax derivation."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("🎨/blue/500", "var(--blue-500)"),
            ("✦/color/primary", "var(--color-primary)"),
            ("button/background", "var(--button-background)"),
            ("Brand  Primary", "var(--brand-primary)"),
            ("🎨✦Accent (hover)", "var(--accent-hover)"),
        ],
    )
    def test_names(self, name, expected):
        """Prefix glyphs stripped, separators dashed, other chars dropped."""
        assert generate_code_syntax(name) == expected


class TestBuildVariableIdMap:
    """Tests for build_variable_id_map."""

    @pytest.mark.unit
    def test_covers_all_variables(self, layered_collections):
        """Every variable of every collection has an id."""
        id_map = build_variable_id_map(layered_collections)
        assert len(id_map) == 6
        assert id_map[VariableKey("sem", "primary")] == generate_variable_id(
            "primary", "sem"
        )


class TestExportCollectionToFigma:
    """Tests for single collection export."""

    @pytest.mark.unit
    def test_single_color(self):
        """A literal color appears in both value maps."""
        collection = _single(
            variables=[
                Variable(
                    id="red",
                    name="Red",
                    values_by_mode={"default": ColorValue(hex="#FF0000")},
                )
            ]
        )
        document = export_collection_to_figma(collection).to_dict()
        red = document["variables"][0]
        expected = {"r": 1.0, "g": 0.0, "b": 0.0, "a": 1.0}
        assert red["valuesByMode"]["default"] == expected
        assert red["resolvedValuesByMode"]["default"] == {
            "resolvedValue": expected,
            "alias": None,
        }

    @pytest.mark.unit
    def test_document_shape(self, primitives):
        """Collection metadata and variable defaults follow Figma's format."""
        document = export_collection_to_figma(primitives).to_dict()
        assert document["id"] == "VariableCollectionId:prim"
        assert document["name"] == "Primitives"
        assert document["modes"] == {"light": "Light", "dark": "Dark"}
        assert document["variableIds"] == [v["id"] for v in document["variables"]]

        blue = document["variables"][0]
        assert blue["name"] == "🎨/blue/500"
        assert blue["description"] == ""
        assert blue["type"] == "COLOR"
        assert blue["scopes"] == ["ALL_SCOPES"]
        assert blue["hiddenFromPublishing"] is False
        assert blue["codeSyntax"] == {"WEB": "var(--blue-500)"}
        assert blue["valuesByMode"]["light"] == BLUE_DICT

    @pytest.mark.unit
    def test_explicit_fields_kept(self):
        """Scopes, description and code syntax overrides are exported."""
        collection = _single(
            variables=[
                Variable(
                    id="v",
                    name="Fill",
                    description="Used for fills",
                    scopes=["FRAME_FILL"],
                    code_syntax="var(--custom)",
                    values_by_mode={"default": ColorValue(hex="#fff")},
                )
            ]
        )
        variable = export_collection_to_figma(collection).to_dict()["variables"][0]
        assert variable["description"] == "Used for fills"
        assert variable["scopes"] == ["FRAME_FILL"]
        assert variable["codeSyntax"] == {"WEB": "var(--custom)"}

    @pytest.mark.unit
    def test_missing_mode_value_is_black(self):
        """A mode without a value exports opaque black, no warning."""
        collection = _single(
            modes=[VariableMode(id="a", name="A"), VariableMode(id="b", name="B")],
            variables=[
                Variable(id="v", name="v", values_by_mode={"a": ColorValue(hex="#fff")})
            ],
        )
        warnings = []
        variable = export_collection_to_figma(collection, warnings=warnings).to_dict()[
            "variables"
        ][0]
        assert variable["valuesByMode"]["b"] == BLACK_DICT
        assert variable["resolvedValuesByMode"]["b"] == {
            "resolvedValue": BLACK_DICT,
            "alias": None,
        }
        assert warnings == []

    @pytest.mark.unit
    def test_same_collection_alias(self):
        """Aliases inside one collection resolve without other collections."""
        collection = _single(
            variables=[
                Variable(
                    id="base", name="Base", values_by_mode={"default": ColorValue(hex="#112233")}
                ),
                Variable(
                    id="ref",
                    name="Ref",
                    values_by_mode={"default": AliasValue(variable_id="base")},
                ),
            ]
        )
        document = export_collection_to_figma(collection).to_dict()
        ref = _variable_dict(document, "ref", "c")
        base_id = generate_variable_id("base", "c")
        assert ref["valuesByMode"]["default"] == {"type": "VARIABLE_ALIAS", "id": base_id}
        assert ref["resolvedValuesByMode"]["default"]["alias"] == base_id
        assert ref["resolvedValuesByMode"]["default"]["aliasName"] == "Base"

    @pytest.mark.unit
    def test_cross_collection_alias_without_context(self, semantic):
        """Exported alone, cross-collection aliases degrade to black."""
        warnings = []
        document = export_collection_to_figma(semantic, warnings=warnings).to_dict()
        primary = _variable_dict(document, "primary", "sem")
        assert primary["valuesByMode"]["light"] == BLACK_DICT
        assert primary["resolvedValuesByMode"]["light"]["alias"] is None
        assert len(warnings) == 4
        assert warnings[0].collection_id == "sem"
        assert warnings[0].variable_id == "primary"
        assert warnings[0].mode_id == "light"
        assert "prim:blue-500" in warnings[0].message

    @pytest.mark.unit
    def test_unresolved_alias_logs_warning(self, semantic, caplog):
        """Unresolved aliases are logged at WARNING."""
        with caplog.at_level("WARNING"):
            export_collection_to_figma(semantic)
        assert "Alias reference not found" in caplog.text

    @pytest.mark.unit
    def test_returns_model(self, primitives):
        """The export is a pydantic document."""
        assert isinstance(export_collection_to_figma(primitives), FigmaExport)


class TestExportMultipleCollections:
    """Tests for multi-collection export."""

    @pytest.mark.unit
    def test_cross_collection_alias(self):
        """Alias id equals the target's id and the preview its colour."""
        mode = [VariableMode(id="m", name="M")]
        base = CollectionNode(
            id="c1",
            name="Base",
            modes=mode,
            variables=[
                Variable(id="v1", name="Base", values_by_mode={"m": ColorValue(hex="#112233")})
            ],
        )
        ref = CollectionNode(
            id="c2",
            name="Ref",
            modes=mode,
            variables=[
                Variable(
                    id="v2",
                    name="Ref",
                    values_by_mode={"m": AliasValue(variable_id="v1", collection_id="c1")},
                )
            ],
        )
        base_doc, ref_doc = (d.to_dict() for d in export_multiple_collections([base, ref]))

        base_variable = base_doc["variables"][0]
        ref_variable = ref_doc["variables"][0]
        assert ref_variable["valuesByMode"]["m"] == {
            "type": "VARIABLE_ALIAS",
            "id": base_variable["id"],
        }
        assert ref_variable["resolvedValuesByMode"]["m"]["resolvedValue"] == (
            base_variable["valuesByMode"]["m"]
        )

    @pytest.mark.unit
    def test_preview_is_one_hop(self, layered_collections):
        """An alias to an alias previews as black."""
        documents = export_multiple_collections(layered_collections)
        theme_doc = documents[2].to_dict()
        button = theme_doc["variables"][0]
        resolved = button["resolvedValuesByMode"]["light"]
        assert resolved["alias"] == generate_variable_id("primary", "sem")
        assert resolved["aliasName"] == "✦/color/primary"
        assert resolved["resolvedValue"] == BLACK_DICT

    @pytest.mark.unit
    def test_preview_uses_same_mode(self, layered_collections):
        """Previews take the target's value for the same mode id."""
        sem_doc = export_multiple_collections(layered_collections)[1].to_dict()
        surface = _variable_dict(sem_doc, "surface", "sem")
        white = {"r": 1.0, "g": 1.0, "b": 1.0, "a": 1.0}
        assert surface["resolvedValuesByMode"]["light"]["resolvedValue"] == white
        assert surface["resolvedValuesByMode"]["dark"]["resolvedValue"] == BLACK_DICT

    @pytest.mark.unit
    def test_input_order_and_stability(self, layered_collections):
        """Documents follow input order and repeat exactly."""
        first = [d.to_dict() for d in export_multiple_collections(layered_collections)]
        second = [d.to_dict() for d in export_multiple_collections(layered_collections)]
        assert [d["name"] for d in first] == ["Primitives", "Semantic", "Brand Theme"]
        assert first == second


class TestFigmaExporter:
    """Tests for the registered Figma exporter."""

    @pytest.mark.unit
    def test_registered(self):
        """The exporter is available by name."""
        assert isinstance(get_exporter("figma"), FigmaExporter)

    @pytest.mark.unit
    def test_default_filename(self, theme, layered_collections):
        """One collection is named after it, several share one file."""
        exporter = FigmaExporter()
        assert exporter.default_filename([theme]) == "brand-theme.json"
        assert exporter.default_filename(layered_collections) == "collections.json"

    @pytest.mark.unit
    def test_single_collection_is_document(self, primitives):
        """Exporting one collection yields one document."""
        content = FigmaExporter().export([primitives])
        assert isinstance(content, dict)
        assert content["id"] == "VariableCollectionId:prim"

    @pytest.mark.unit
    def test_selected_collection_with_context(self, semantic, layered_collections):
        """A selected collection resolves aliases against the full snapshot."""
        result = FigmaExporter().export_with_warnings(
            [semantic], all_collections=layered_collections
        )
        assert not result.has_warnings
        assert result.provider == "figma"

    @pytest.mark.unit
    def test_many_collections_is_list(self, layered_collections):
        """Exporting several collections yields a list without warnings."""
        result = FigmaExporter().export_with_warnings(layered_collections)
        assert isinstance(result.content, list)
        assert len(result.content) == 3
        assert result.warnings == []

    @pytest.mark.unit
    def test_all_modes_single_file(self, layered_collections):
        """Figma documents already carry every mode."""
        files = FigmaExporter().export_all_modes(layered_collections)
        assert list(files) == ["collections.json"]
