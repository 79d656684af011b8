"""Unit tests for the Tokens Studio exporter."""

import pytest

from rangde.exporters import get_exporter
from rangde.exporters.tokens_studio import (
    TokensStudioExporter,
    create_themes_from_modes,
    export_collection_to_token_set,
    export_to_tokens_studio,
    export_with_all_modes_as_token_sets,
    token_set_name,
)
from rangde.model import CollectionNode, ColorValue, Variable, VariableMode


@pytest.fixture
def dark_only() -> CollectionNode:
    """Unlayered collection declaring only the dark mode."""
    return CollectionNode(
        id="night",
        name="Night Extras",
        modes=[VariableMode(id="dark", name="Dark")],
        variables=[
            Variable(id="glow", name="glow", values_by_mode={"dark": ColorValue(hex="#0ff")})
        ],
    )


class TestTokenSetName:
    """Tests for token set naming."""

    @pytest.mark.unit
    def test_layered(self, theme):
        """Layered collections are prefixed with their layer."""
        assert token_set_name(theme) == "theme-brand-theme"

    @pytest.mark.unit
    def test_unlayered(self, dark_only):
        """Unlayered collections use the slug only."""
        assert token_set_name(dark_only) == "night-extras"


class TestExportCollectionToTokenSet:
    """Tests for single token set export."""

    @pytest.mark.unit
    def test_tokens(self, semantic, layered_collections):
        """Tokens carry value, type and optional description."""
        token_set = export_collection_to_token_set(semantic, layered_collections)
        assert token_set == {
            "color": {
                "primary": {
                    "value": "{primitives.blue.500}",
                    "type": "color",
                    "description": "Primary brand color",
                },
                "surface": {"value": "{primitives.white}", "type": "color"},
            }
        }

    @pytest.mark.unit
    def test_unresolved_alias(self, theme):
        """Unknown targets fall back to black with a warning."""
        warnings = []
        token_set = export_collection_to_token_set(theme, [theme], "dark", warnings)
        assert token_set["button"]["background"]["value"] == "#000000"
        assert [(w.variable_id, w.mode_id) for w in warnings] == [("button-bg", "dark")]


class TestThemes:
    """Tests for mode-derived themes."""

    @pytest.mark.unit
    def test_one_theme_per_mode(self, layered_collections, dark_only):
        """Sets are enabled only where the collection declares the mode."""
        themes = create_themes_from_modes(layered_collections + [dark_only])
        assert [t["id"] for t in themes] == ["light", "dark"]
        light, dark = themes
        assert light["name"] == "Light"
        assert light["selectedTokenSets"] == {
            "primitive-primitives": "enabled",
            "semantic-semantic": "enabled",
            "theme-brand-theme": "enabled",
            "night-extras": "disabled",
        }
        assert dark["selectedTokenSets"]["night-extras"] == "enabled"


class TestExportToTokensStudio:
    """Tests for the full document."""

    @pytest.mark.unit
    def test_document(self, layered_collections):
        """Sets, themes and metadata are all present."""
        document = export_to_tokens_studio(layered_collections)
        order = ["primitive-primitives", "semantic-semantic", "theme-brand-theme"]
        assert document["$metadata"] == {"tokenSetOrder": order}
        assert len(document["$themes"]) == 2
        assert document["theme-brand-theme"]["button"]["background"]["value"] == (
            "{semantic.color.primary}"
        )
        assert document["primitive-primitives"]["white"] == {
            "value": "#FFFFFF",
            "type": "color",
        }

    @pytest.mark.unit
    def test_without_themes(self, layered_collections):
        """Themes can be left out."""
        document = export_to_tokens_studio(layered_collections, include_themes=False)
        assert "$themes" not in document
        assert "$metadata" in document

    @pytest.mark.unit
    def test_mode_selection(self, layered_collections):
        """An explicit mode applies to every set."""
        document = export_to_tokens_studio(layered_collections, mode_id="dark")
        assert document["semantic-semantic"]["color"]["surface"]["value"] == (
            "{primitives.black}"
        )


class TestExportWithAllModes:
    """Tests for per-mode token sets."""

    @pytest.mark.unit
    def test_sets_per_mode(self, primitives, dark_only):
        """Each collection gets one set per declared mode."""
        document = export_with_all_modes_as_token_sets([primitives, dark_only])
        assert document["$metadata"]["tokenSetOrder"] == [
            "primitive-primitives-light",
            "primitive-primitives-dark",
            "night-extras-dark",
        ]
        assert document["night-extras-dark"]["glow"]["value"] == "#0ff"
        assert len(document["$themes"]) == 2


class TestTokensStudioExporter:
    """Tests for the registered exporter."""

    @pytest.mark.unit
    def test_registered(self):
        """The exporter is available by name."""
        exporter = get_exporter("tokens-studio")
        assert isinstance(exporter, TokensStudioExporter)
        assert exporter.default_filename([]) == "tokens-studio.json"

    @pytest.mark.unit
    def test_all_modes_single_document(self, layered_collections):
        """All modes are written into one document."""
        files = TokensStudioExporter().export_all_modes(layered_collections)
        assert list(files) == ["tokens-studio.json"]
        assert "semantic-semantic-dark" in files["tokens-studio.json"]

    @pytest.mark.unit
    def test_selection_with_context(self, theme, layered_collections):
        """A selected collection resolves against the full snapshot."""
        result = TokensStudioExporter().export_with_warnings(
            [theme], all_collections=layered_collections
        )
        assert result.warnings == []
        assert result.content["$metadata"]["tokenSetOrder"] == ["theme-brand-theme"]
