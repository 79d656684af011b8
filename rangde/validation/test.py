"""Unit tests for alias validation."""

import time

import pytest

from rangde.model import (
    AliasValue,
    CollectionLayer,
    CollectionNode,
    ColorValue,
    Variable,
    VariableKey,
)
from rangde.validation import (
    AliasValidationResult,
    CollectionValidationReport,
    get_collections_by_layer,
    get_layer_description,
    get_layer_label,
    has_circular_dependency,
    validate_alias,
    validate_alias_relationship,
    validate_all_collections,
    validate_collection_variables,
)


def _collection(cid, layer=None, variables=()):
    return CollectionNode(id=cid, name=cid.title(), layer=layer, variables=list(variables))


def _alias_var(vid, *targets):
    """Variable with one alias per (mode, variable, collection) target."""
    return Variable(
        id=vid,
        name=vid,
        values_by_mode={
            mode: AliasValue(variable_id=target, collection_id=cid)
            for mode, target, cid in targets
        },
    )


class TestValidateAliasRelationship:
    """Tests for the layer rules."""

    @pytest.mark.unit
    def test_theme_to_semantic_is_valid(self, theme, semantic):
        """Theme may alias Semantic."""
        assert validate_alias_relationship(theme, semantic).is_valid

    @pytest.mark.unit
    def test_semantic_to_theme_is_invalid(self, semantic, theme):
        """Direction matters: Semantic may not alias Theme."""
        result = validate_alias_relationship(semantic, theme)
        assert not result.is_valid
        assert "Semantic collections can only alias Primitive" in result.error
        assert "theme" in result.error

    @pytest.mark.unit
    def test_semantic_to_primitive_is_valid(self, semantic, primitives):
        """Semantic may alias Primitive."""
        assert validate_alias_relationship(semantic, primitives).is_valid

    @pytest.mark.unit
    def test_theme_to_primitive_is_invalid(self, theme, primitives):
        """Theme must skip no layer."""
        result = validate_alias_relationship(theme, primitives)
        assert not result.is_valid
        assert "Theme collections can only alias Semantic" in result.error

    @pytest.mark.unit
    def test_primitive_cannot_alias(self, primitives, semantic):
        """Primitives never alias."""
        result = validate_alias_relationship(primitives, semantic)
        assert not result.is_valid
        assert "Primitive collections cannot have aliases" in result.error

    @pytest.mark.unit
    @pytest.mark.parametrize("layer", list(CollectionLayer))
    def test_self_alias_is_invalid(self, layer):
        """Aliasing the same layered collection is rejected for every layer."""
        collection = _collection("c", layer)
        result = validate_alias_relationship(collection, collection)
        assert not result.is_valid
        assert result.error == "Cannot create alias to the same collection"

    @pytest.mark.unit
    def test_legacy_mode_allows_anything(self, primitives):
        """Unlayered collections skip the rules, even for primitives."""
        legacy = _collection("legacy")
        assert validate_alias_relationship(primitives, legacy).is_valid
        assert validate_alias_relationship(legacy, primitives).is_valid
        assert validate_alias_relationship(legacy, legacy).is_valid

    @pytest.mark.unit
    def test_result_shape(self, theme, semantic):
        """Valid results carry no messages."""
        assert validate_alias_relationship(theme, semantic) == AliasValidationResult(
            is_valid=True
        )


class TestHasCircularDependency:
    """Tests for alias cycle detection."""

    @pytest.mark.unit
    def test_two_collection_cycle(self, cyclic_collections):
        """V1 -> V2 -> V1 is a cycle."""
        assert has_circular_dependency("v1", "c1", "v2", "c2", cyclic_collections)

    @pytest.mark.unit
    def test_acyclic_chain(self, layered_collections):
        """A theme -> semantic -> primitive chain has no cycle."""
        assert not has_circular_dependency(
            "button-bg", "theme", "primary", "sem", layered_collections
        )

    @pytest.mark.unit
    def test_proposed_edge_closing_a_cycle(self, layered_collections):
        """A primitive aliasing the theme variable would close a loop."""
        assert has_circular_dependency(
            "blue-500", "prim", "button-bg", "theme", layered_collections
        )

    @pytest.mark.unit
    def test_target_is_source_is_sentinel(self, layered_collections):
        """Reaching the source at the start is not reported as a cycle."""
        assert not has_circular_dependency(
            "primary", "sem", "primary", "sem", layered_collections
        )

    @pytest.mark.unit
    def test_unknown_target_fails_open(self, layered_collections):
        """Unresolvable targets terminate as non-cyclic."""
        assert not has_circular_dependency(
            "primary", "sem", "nope", "sem", layered_collections
        )
        assert not has_circular_dependency(
            "primary", "sem", "blue-500", "missing", layered_collections
        )

    @pytest.mark.unit
    def test_same_collection_alias_default(self):
        """Aliases without collection id follow the owner collection."""
        collection = _collection(
            "c",
            variables=[
                Variable(id="a", name="a", values_by_mode={"m": AliasValue(variable_id="b")}),
                Variable(id="b", name="b", values_by_mode={"m": ColorValue(hex="#fff")}),
            ],
        )
        assert has_circular_dependency("b", "c", "a", "c", [collection])
        assert not has_circular_dependency("a", "c", "b", "c", [collection])

    @pytest.mark.unit
    def test_sibling_forks_are_isolated(self):
        """Diamond-shaped graphs are not mistaken for cycles.

        t aliases x in one mode and y in another; both alias z. Visiting z
        through x must not make the y branch report a cycle.
        """
        collection = _collection(
            "c",
            variables=[
                _alias_var("t", ("m1", "x", "c"), ("m2", "y", "c")),
                _alias_var("x", ("m1", "z", "c")),
                _alias_var("y", ("m1", "z", "c")),
                Variable(id="z", name="z", values_by_mode={"m1": ColorValue(hex="#000")}),
            ],
        )
        assert not has_circular_dependency("s", "c", "t", "c", [collection])

    @pytest.mark.unit
    def test_cycle_found_in_later_mode(self):
        """Every mode of the current variable is explored."""
        collection = _collection(
            "c",
            variables=[
                _alias_var("t", ("m1", "x", "c"), ("m2", "s", "c")),
                Variable(id="x", name="x", values_by_mode={"m1": ColorValue(hex="#000")}),
                Variable(id="s", name="s"),
            ],
        )
        assert has_circular_dependency("s", "c", "t", "c", [collection])

    @pytest.mark.unit
    def test_visited_path_seed(self, layered_collections):
        """Keys already on the path count as revisits."""
        assert has_circular_dependency(
            "button-bg",
            "theme",
            "primary",
            "sem",
            layered_collections,
            visited_path={VariableKey("prim", "blue-500")},
        )

    @pytest.mark.unit
    def test_long_chain_does_not_recurse(self):
        """Deep alias chains are walked without recursion limits."""
        variables = [Variable(id="v0", name="v0", values_by_mode={"m": ColorValue(hex="#000")})]
        variables += [_alias_var(f"v{i}", ("m", f"v{i - 1}", "c")) for i in range(1, 3000)]
        collection = _collection("c", variables=variables)

        assert not has_circular_dependency("src", "c", "v2999", "c", [collection])
        assert not has_circular_dependency("v2999", "c", "v2998", "c", [collection])
        assert has_circular_dependency("v0", "c", "v2999", "c", [collection])

    @pytest.mark.unit
    def test_long_chain_admission(self):
        """validate_alias returns a result for deep chains instead of raising."""
        variables = [Variable(id="v0", name="v0", values_by_mode={"m": ColorValue(hex="#000")})]
        variables += [_alias_var(f"v{i}", ("m", f"v{i - 1}", "c")) for i in range(1, 3000)]
        collection = _collection("c", variables=variables)

        result = validate_alias(collection, "v0", collection, "v2999", [collection])
        assert not result.is_valid
        assert "circular" in result.error

    @pytest.mark.unit
    def test_shared_subgraphs_are_searched_once(self):
        """A ladder of diamonds finishes quickly.

        a_i and b_i each alias a_{i+1} in one mode and b_{i+1} in another, so
        the number of distinct paths doubles per level.
        """
        levels = 40
        variables = []
        for i in range(levels):
            for prefix in ("a", "b"):
                variables.append(
                    _alias_var(
                        f"{prefix}{i}",
                        ("m1", f"a{i + 1}", "c"),
                        ("m2", f"b{i + 1}", "c"),
                    )
                )
        for prefix in ("a", "b"):
            variables.append(
                Variable(
                    id=f"{prefix}{levels}",
                    name=f"{prefix}{levels}",
                    values_by_mode={"m1": ColorValue(hex="#000")},
                )
            )
        collection = _collection("c", variables=variables)

        started = time.perf_counter()
        assert not has_circular_dependency("src", "c", "a0", "c", [collection])
        assert has_circular_dependency(f"b{levels}", "c", "a0", "c", [collection])
        assert time.perf_counter() - started < 2.0


class TestValidateAlias:
    """Tests for the combined admission check."""

    @pytest.mark.unit
    def test_valid_edge(self, layered_collections, theme, semantic):
        """A layered, acyclic alias is admitted."""
        result = validate_alias(theme, "button-bg", semantic, "surface", layered_collections)
        assert result.is_valid
        assert result.error is None

    @pytest.mark.unit
    def test_layer_violation_wins(self, layered_collections, primitives, theme):
        """Layer errors are reported before cycle checks."""
        result = validate_alias(
            primitives, "blue-500", theme, "button-bg", layered_collections
        )
        assert not result.is_valid
        assert "Primitive" in result.error

    @pytest.mark.unit
    def test_cycle_rejected(self, cyclic_collections):
        """A cycle blocks the alias in legacy mode too."""
        c1, c2 = cyclic_collections
        result = validate_alias(c1, "v1", c2, "v2", cyclic_collections)
        assert not result.is_valid
        assert "circular" in result.error

    @pytest.mark.unit
    def test_self_alias_rejected_in_legacy_mode(self, cyclic_collections):
        """A variable can never alias itself."""
        c1 = cyclic_collections[0]
        result = validate_alias(c1, "v1", c1, "v1", cyclic_collections)
        assert not result.is_valid
        assert result.error == "Variable cannot alias itself"

    @pytest.mark.unit
    def test_unknown_target_warns(self, layered_collections, theme, semantic):
        """Missing targets are admitted with a warning."""
        result = validate_alias(theme, "button-bg", semantic, "ghost", layered_collections)
        assert result.is_valid
        assert "ghost" in result.warning


class TestValidateCollectionVariables:
    """Tests for whole-collection reports."""

    @pytest.mark.unit
    def test_valid_layers(self, layered_collections):
        """The layered fixture has no errors or warnings."""
        for collection in layered_collections:
            report = validate_collection_variables(collection, layered_collections)
            assert report == CollectionValidationReport()
            assert report.is_valid

    @pytest.mark.unit
    def test_unlayered_single_warning(self, cyclic_collections):
        """No layer produces exactly one warning and stops."""
        report = validate_collection_variables(cyclic_collections[0], cyclic_collections)
        assert report.errors == []
        assert report.warnings == ["Collection has no layer assigned"]

    @pytest.mark.unit
    def test_primitive_with_alias(self, semantic):
        """Primitive variables holding aliases are errors."""
        prim = _collection(
            "p",
            CollectionLayer.PRIMITIVE,
            [_alias_var("bad", ("m", "primary", "sem"))],
        )
        report = validate_collection_variables(prim, [prim, semantic])
        assert not report.is_valid
        assert report.errors[0].startswith('Variable "bad" has aliases')
        assert report.errors[1] == (
            'Variable "bad" (mode m): Primitive collections cannot have aliases - '
            "they must contain concrete values"
        )

    @pytest.mark.unit
    def test_semantic_without_alias_warns(self, primitives):
        """Semantic and theme variables should alias but need not."""
        sem = _collection(
            "s",
            CollectionLayer.SEMANTIC,
            [Variable(id="raw", name="raw", values_by_mode={"m": ColorValue(hex="#fff")})],
        )
        thm = _collection(
            "t", CollectionLayer.THEME, [Variable(id="raw", name="raw")]
        )
        sem_report = validate_collection_variables(sem, [primitives, sem])
        thm_report = validate_collection_variables(thm, [primitives, thm])
        assert sem_report.is_valid
        assert "semantic variables should alias primitives" in sem_report.warnings[0]
        assert "theme variables should alias semantic" in thm_report.warnings[0]

    @pytest.mark.unit
    def test_wrong_layer_alias_reports_mode(self, primitives, semantic):
        """Each offending mode is reported with its id."""
        thm = _collection(
            "t",
            CollectionLayer.THEME,
            [_alias_var("x", ("light", "blue-500", "prim"), ("dark", "primary", "sem"))],
        )
        report = validate_collection_variables(thm, [primitives, semantic, thm])
        assert len(report.errors) == 1
        assert report.errors[0].startswith('Variable "x" (mode light): Theme collections')

    @pytest.mark.unit
    def test_same_collection_alias_is_error(self):
        """Aliases defaulting to the owner collection hit the same-collection rule."""
        sem = _collection(
            "s",
            CollectionLayer.SEMANTIC,
            [
                Variable(id="a", name="a", values_by_mode={"m": AliasValue(variable_id="b")}),
                Variable(id="b", name="b", values_by_mode={"m": ColorValue(hex="#fff")}),
            ],
        )
        report = validate_collection_variables(sem, [sem])
        assert report.errors == [
            'Variable "a" (mode m): Cannot create alias to the same collection'
        ]

    @pytest.mark.unit
    def test_unknown_target_collection_skipped(self):
        """Aliases into collections outside the snapshot are not re-checked."""
        sem = _collection(
            "s", CollectionLayer.SEMANTIC, [_alias_var("a", ("m", "x", "ghost"))]
        )
        report = validate_collection_variables(sem, [sem])
        assert report.errors == []
        assert report.warnings == []


class TestHelpers:
    """Tests for layer helpers and snapshot-wide validation."""

    @pytest.mark.unit
    def test_validate_all_collections(self, layered_collections, cyclic_collections):
        """Reports are keyed by collection id in input order."""
        snapshot = layered_collections + cyclic_collections
        reports = validate_all_collections(snapshot)
        assert list(reports) == ["prim", "sem", "theme", "c1", "c2"]
        assert reports["c1"].warnings == ["Collection has no layer assigned"]

    @pytest.mark.unit
    def test_duplicate_collection_id_is_logged(self, primitives, caplog):
        """A repeated collection id keeps the first report and logs the rest."""
        duplicate = _collection("prim", variables=[_alias_var("x", ("m", "y", None))])
        with caplog.at_level("WARNING"):
            reports = validate_all_collections([primitives, duplicate])
        assert list(reports) == ["prim"]
        assert reports["prim"].warnings == []
        assert "Duplicate collection id prim" in caplog.text

    @pytest.mark.unit
    def test_get_collections_by_layer(self, layered_collections, cyclic_collections):
        """None selects unassigned collections."""
        snapshot = layered_collections + cyclic_collections
        assert [c.id for c in get_collections_by_layer(snapshot, CollectionLayer.SEMANTIC)] == ["sem"]
        assert [c.id for c in get_collections_by_layer(snapshot, None)] == ["c1", "c2"]

    @pytest.mark.unit
    def test_labels_and_descriptions(self):
        """Every layer, and no layer, has a label and description."""
        assert get_layer_label(CollectionLayer.THEME) == "Theme"
        assert get_layer_label(None) == "Unassigned"
        assert "no aliases" in get_layer_description(CollectionLayer.PRIMITIVE)
        assert "any alias" in get_layer_description(None)
