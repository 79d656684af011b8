"""Unit tests for the exporter registry and shared naming helpers."""

import pytest

from rangde.exporters import (
    ExportProvider,
    ExportResult,
    ExportWarning,
    get_exporter,
    list_exporters,
    resolve_alias,
    slugify,
    strip_name_prefix,
    token_reference,
    variable_name_to_path,
)
from rangde.exporters.lib import collect_modes, insert_token
from rangde.model import AliasValue, CollectionNode, VariableMode


class TestNamingHelpers:
    """Tests for name normalization."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("🎨/blue/500", "blue/500"),
            ("✦/color/primary", "color/primary"),
            ("🎨✦🎨plain", "plain"),
            ("button/🎨", "button/🎨"),
            ("🎨//double", "/double"),
        ],
    )
    def test_strip_name_prefix(self, name, expected):
        """Only leading glyphs and one slash are removed."""
        assert strip_name_prefix(name) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Brand Theme", "brand-theme"),
            ("  Mixed__Case!! ", "mixed-case"),
            ("already-slug", "already-slug"),
            ("---", ""),
        ],
    )
    def test_slugify(self, text, expected):
        """Slugs are lowercase with single inner dashes."""
        assert slugify(text) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("🎨/blue/500", ["blue", "500"]),
            ("✦/Color Primary/Hover", ["color", "primary", "hover"]),
            ("a//b", ["a", "b"]),
            ("🎨", []),
            ("x/(!)/y", ["x", "y"]),
        ],
    )
    def test_variable_name_to_path(self, name, expected):
        """Names split on slashes and whitespace into slugged segments."""
        assert variable_name_to_path(name) == expected

    @pytest.mark.unit
    def test_token_reference(self, primitives):
        """References are rooted at the collection slug."""
        blue = primitives.get_variable("blue-500")
        assert token_reference(primitives, blue) == "{primitives.blue.500}"


class TestResolveAlias:
    """Tests for resolve_alias."""

    @pytest.mark.unit
    def test_cross_collection(self, semantic, layered_collections):
        """Aliases with a collection id resolve there."""
        collection, variable = resolve_alias(
            AliasValue(variable_id="white", collection_id="prim"),
            semantic,
            layered_collections,
        )
        assert collection.id == "prim"
        assert variable.id == "white"

    @pytest.mark.unit
    def test_owner_default(self, primitives):
        """Aliases without a collection id resolve in the owner."""
        resolved = resolve_alias(AliasValue(variable_id="black"), primitives, [primitives])
        assert resolved[1].id == "black"

    @pytest.mark.unit
    def test_missing(self, semantic, layered_collections):
        """Missing collections or variables resolve to None."""
        assert resolve_alias(AliasValue(variable_id="x", collection_id="prim"), semantic, layered_collections) is None
        assert resolve_alias(AliasValue(variable_id="white", collection_id="nope"), semantic, layered_collections) is None


class TestTreeHelpers:
    """Tests for mode collection and token insertion."""

    @pytest.mark.unit
    def test_collect_modes_first_seen_order(self):
        """Modes keep first-seen order; later names win."""
        collections = [
            CollectionNode(id="a", name="A", modes=[VariableMode(id="x", name="X")]),
            CollectionNode(
                id="b",
                name="B",
                modes=[VariableMode(id="y", name="Y"), VariableMode(id="x", name="Ex")],
            ),
        ]
        assert collect_modes(collections) == {"x": "Ex", "y": "Y"}

    @pytest.mark.unit
    def test_insert_token_nested(self):
        """Tokens are placed under created groups."""
        tree = {}
        insert_token(tree, ["a", "b"], {"value": 1}, "value")
        insert_token(tree, ["a", "c"], {"value": 2}, "value")
        assert tree == {"a": {"b": {"value": 1}, "c": {"value": 2}}}

    @pytest.mark.unit
    def test_insert_token_empty_path(self):
        """An empty path inserts nothing."""
        tree = {}
        insert_token(tree, [], {"value": 1}, "value")
        assert tree == {}


class TestRegistry:
    """Tests for exporter registration and lookup."""

    @pytest.mark.unit
    def test_list_exporters(self):
        """All built-in exporters are registered."""
        assert set(list_exporters()) >= {"figma", "dtcg", "tokens-studio"}

    @pytest.mark.unit
    def test_get_exporter_instances(self):
        """Lookups return fresh ExportProvider instances."""
        exporter = get_exporter("dtcg")
        assert isinstance(exporter, ExportProvider)
        assert exporter is not get_exporter("dtcg")

    @pytest.mark.unit
    def test_unknown_exporter(self):
        """Unknown names raise KeyError listing what is available."""
        with pytest.raises(KeyError, match="Available:.*figma"):
            get_exporter("sketch")


class TestExportResult:
    """Tests for ExportResult."""

    @pytest.mark.unit
    def test_has_warnings(self):
        """has_warnings reflects the warning list."""
        assert not ExportResult(content={}).has_warnings
        warning = ExportWarning(collection_id="c", variable_id="v", mode_id="m", message="x")
        assert ExportResult(content={}, warnings=[warning]).has_warnings
