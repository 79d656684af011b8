"""Unit tests for snapshot models."""

import json

import pytest
from pydantic import ValidationError

from rangde.model import (
    RGBA,
    AliasValue,
    CollectionLayer,
    CollectionNode,
    ColorValue,
    Variable,
    VariableKey,
    alias_target,
    export_json_schema,
    hex_to_rgba,
    index_variables,
    load_collections,
    load_collections_file,
)


class TestVariableKey:
    """Tests for the composite variable key."""

    @pytest.mark.unit
    def test_equality_and_hash(self):
        """Keys with the same fields are equal and hash alike."""
        assert VariableKey("c1", "v1") == VariableKey("c1", "v1")
        assert len({VariableKey("c1", "v1"), VariableKey("c1", "v1")}) == 1

    @pytest.mark.unit
    def test_same_variable_id_in_different_collections(self):
        """Variable ids only identify a node together with the collection."""
        assert VariableKey("c1", "v1") != VariableKey("c2", "v1")

    @pytest.mark.unit
    def test_ordering(self):
        """Keys order by collection id, then variable id."""
        keys = [VariableKey("b", "a"), VariableKey("a", "z"), VariableKey("a", "b")]
        assert sorted(keys) == [
            VariableKey("a", "b"),
            VariableKey("a", "z"),
            VariableKey("b", "a"),
        ]

    @pytest.mark.unit
    def test_str(self):
        """String form is collection:variable."""
        assert str(VariableKey("c1", "v1")) == "c1:v1"


class TestSnapshotParsing:
    """Tests for parsing host snapshots."""

    @pytest.mark.unit
    def test_camel_case_input(self):
        """camelCase keys from the host are accepted."""
        collections = load_collections(
            [
                {
                    "id": "sem",
                    "name": "Semantic",
                    "layer": "semantic",
                    "modes": [{"id": "m1", "name": "Light"}],
                    "variables": [
                        {
                            "id": "v1",
                            "name": "text/default",
                            "codeSyntax": "var(--text)",
                            "valuesByMode": {
                                "m1": {
                                    "type": "alias",
                                    "variableId": "p1",
                                    "collectionId": "prim",
                                }
                            },
                        }
                    ],
                    "position": {"x": 0, "y": 0},
                    "createdAt": 0,
                }
            ]
        )
        collection = collections[0]
        assert collection.layer == CollectionLayer.SEMANTIC
        variable = collection.variables[0]
        assert variable.code_syntax == "var(--text)"
        value = variable.values_by_mode["m1"]
        assert isinstance(value, AliasValue)
        assert value.collection_id == "prim"

    @pytest.mark.unit
    def test_collections_wrapper(self):
        """A {"collections": [...]} mapping is unwrapped."""
        collections = load_collections(
            {"collections": [{"id": "c", "name": "C"}]}
        )
        assert [c.id for c in collections] == ["c"]

    @pytest.mark.unit
    def test_unknown_value_type_rejected(self):
        """Only color and alias values are valid."""
        with pytest.raises(ValidationError):
            load_collections(
                [
                    {
                        "id": "c",
                        "name": "C",
                        "variables": [
                            {
                                "id": "v",
                                "name": "v",
                                "valuesByMode": {"m": {"type": "gradient"}},
                            }
                        ],
                    }
                ]
            )

    @pytest.mark.unit
    def test_invalid_hex_rejected(self):
        """Malformed hex strings fail validation."""
        with pytest.raises(ValidationError):
            ColorValue(hex="#GG0000")
        with pytest.raises(ValidationError):
            ColorValue(hex="#12345")

    @pytest.mark.unit
    def test_models_are_frozen(self):
        """Snapshots cannot be mutated through the models."""
        collection = CollectionNode(id="c", name="C")
        with pytest.raises(ValidationError):
            collection.name = "other"

    @pytest.mark.unit
    def test_load_file(self, tmp_path):
        """Snapshot files are read as JSON."""
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps([{"id": "c", "name": "C", "layer": "theme"}]))
        collections = load_collections_file(path)
        assert collections[0].layer == CollectionLayer.THEME

    @pytest.mark.unit
    def test_json_schema(self):
        """Schema export uses camelCase names."""
        schema = export_json_schema()
        assert schema["type"] == "array"
        assert "valuesByMode" in json.dumps(schema)


class TestHelpers:
    """Tests for lookup helpers."""

    @pytest.mark.unit
    def test_alias_target_defaults_to_owner(self):
        """Aliases without a collection id point into the owner."""
        assert alias_target(AliasValue(variable_id="v"), "own") == VariableKey(
            "own", "v"
        )
        assert alias_target(
            AliasValue(variable_id="v", collection_id="other"), "own"
        ) == VariableKey("other", "v")

    @pytest.mark.unit
    def test_index_variables_preserves_order(self):
        """Index keys follow collection then variable order."""
        collections = [
            CollectionNode(
                id="b",
                name="B",
                variables=[Variable(id="2", name="x"), Variable(id="1", name="y")],
            ),
            CollectionNode(id="a", name="A", variables=[Variable(id="1", name="z")]),
        ]
        index = index_variables(collections)
        assert list(index) == [
            VariableKey("b", "2"),
            VariableKey("b", "1"),
            VariableKey("a", "1"),
        ]

    @pytest.mark.unit
    def test_variable_alias_helpers(self):
        """has_aliases and alias_values inspect every mode."""
        variable = Variable(
            id="v",
            name="v",
            values_by_mode={
                "m1": ColorValue(hex="#fff"),
                "m2": AliasValue(variable_id="x"),
            },
        )
        assert variable.has_aliases
        assert [mode for mode, _ in variable.alias_values()] == ["m2"]

    @pytest.mark.unit
    def test_collection_lookups(self):
        """get_variable and get_mode return None for unknown ids."""
        collection = CollectionNode(
            id="c",
            name="C",
            modes=[{"id": "m", "name": "Default"}],
            variables=[Variable(id="v", name="v")],
        )
        assert collection.get_variable("v").name == "v"
        assert collection.get_variable("missing") is None
        assert collection.get_mode("m").name == "Default"
        assert collection.get_mode("missing") is None


class TestHexToRgba:
    """Tests for hex color conversion."""

    @pytest.mark.unit
    def test_six_digit(self):
        """#RRGGBB converts with opaque alpha."""
        assert hex_to_rgba("#FF0000") == RGBA(r=1.0, g=0.0, b=0.0, a=1.0)

    @pytest.mark.unit
    def test_short_form(self):
        """#RGB expands each digit."""
        assert hex_to_rgba("#fff") == RGBA(r=1.0, g=1.0, b=1.0, a=1.0)

    @pytest.mark.unit
    def test_alpha(self):
        """#RRGGBBAA carries alpha rounded to two decimals."""
        color = hex_to_rgba("#00000080")
        assert color.a == 0.5

    @pytest.mark.unit
    def test_without_hash(self):
        """The leading # is optional."""
        assert hex_to_rgba("112233") == hex_to_rgba("#112233")

    @pytest.mark.unit
    def test_invalid(self):
        """Invalid strings raise ValueError."""
        with pytest.raises(ValueError, match="Invalid hex color"):
            hex_to_rgba("#12345")
        with pytest.raises(ValueError, match="Invalid hex color"):
            hex_to_rgba("#zzzzzz")
