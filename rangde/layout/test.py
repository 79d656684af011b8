"""Unit tests for the dependency-graph layout engine."""

import pytest

from rangde.model import (
    AliasValue,
    CollectionLayer,
    CollectionNode,
    ColorValue,
    Variable,
    VariableKey,
)
from rangde.layout import (
    LayoutConfig,
    LayoutResult,
    Position,
    auto_arrange_collections,
    auto_layout_variables,
    build_dependency_graph,
    calculate_column_layout,
    get_column_index,
    get_column_x,
    topological_order,
)


def _color_var(vid, name=None):
    return Variable(id=vid, name=name or vid, values_by_mode={"m": ColorValue(hex="#000")})


def _alias_var(vid, target, collection_id=None, name=None):
    return Variable(
        id=vid,
        name=name or vid,
        values_by_mode={"m": AliasValue(variable_id=target, collection_id=collection_id)},
    )


def _positions(result: LayoutResult) -> dict[str, tuple[int, int, float, float]]:
    return {
        str(v.key): (v.column, v.row_in_column, v.position.x, v.position.y)
        for v in result.variables
    }


class TestBuildDependencyGraph:
    """Tests for graph construction."""

    @pytest.mark.unit
    def test_nodes_and_edges(self, layered_collections):
        """One node per variable, one edge per distinct alias target."""
        graph = build_dependency_graph(layered_collections)
        assert len(graph) == 6
        assert graph[VariableKey("prim", "white")] == []
        assert graph[VariableKey("sem", "primary")] == [VariableKey("prim", "blue-500")]
        assert graph[VariableKey("sem", "surface")] == [
            VariableKey("prim", "white"),
            VariableKey("prim", "black"),
        ]

    @pytest.mark.unit
    def test_dangling_alias_has_no_edge(self):
        """Aliases to unknown variables are ignored."""
        collection = CollectionNode(
            id="c", name="C", variables=[_alias_var("a", "ghost"), _alias_var("b", "x", "nowhere")]
        )
        graph = build_dependency_graph([collection])
        assert graph == {VariableKey("c", "a"): [], VariableKey("c", "b"): []}

    @pytest.mark.unit
    def test_same_collection_default(self):
        """Aliases without collection id resolve in the owner."""
        collection = CollectionNode(
            id="c", name="C", variables=[_alias_var("a", "b"), _color_var("b")]
        )
        graph = build_dependency_graph([collection])
        assert graph[VariableKey("c", "a")] == [VariableKey("c", "b")]


class TestTopologicalOrder:
    """Tests for cycle-tolerant ordering."""

    @pytest.mark.unit
    def test_dependencies_first(self, layered_collections):
        """Every dependency finishes before its dependent."""
        graph = build_dependency_graph(layered_collections)
        order, broken = topological_order(graph)
        assert broken == []
        assert sorted(order) == sorted(graph)
        position = {key: i for i, key in enumerate(order)}
        for key, dependencies in graph.items():
            for dependency in dependencies:
                assert position[dependency] < position[key]

    @pytest.mark.unit
    def test_cycle_edge_is_dropped(self, cyclic_collections):
        """The edge closing a cycle is reported and every node finishes."""
        graph = build_dependency_graph(cyclic_collections)
        order, broken = topological_order(graph)
        assert order == [VariableKey("c2", "v2"), VariableKey("c1", "v1")]
        assert broken == [(VariableKey("c2", "v2"), VariableKey("c1", "v1"))]

    @pytest.mark.unit
    def test_self_alias(self):
        """A variable aliasing itself is a one-node cycle."""
        graph = build_dependency_graph(
            [CollectionNode(id="c", name="C", variables=[_alias_var("a", "a")])]
        )
        order, broken = topological_order(graph)
        assert order == [VariableKey("c", "a")]
        assert broken == [(VariableKey("c", "a"), VariableKey("c", "a"))]

    @pytest.mark.unit
    def test_long_chain_does_not_recurse(self):
        """Deep alias chains are handled without recursion limits."""
        variables = [_color_var("v0")] + [
            _alias_var(f"v{i}", f"v{i - 1}") for i in range(1, 3000)
        ]
        graph = build_dependency_graph([CollectionNode(id="c", name="C", variables=variables)])
        order, broken = topological_order(graph)
        assert broken == []
        assert order[0] == VariableKey("c", "v0")
        assert order[-1] == VariableKey("c", "v2999")


class TestAutoLayoutVariables:
    """Tests for auto_layout_variables."""

    @pytest.mark.unit
    def test_empty_input(self):
        """No collections yields an empty layout."""
        result = auto_layout_variables([])
        assert result.variables == []
        assert result.column_count == 0

    @pytest.mark.unit
    def test_collections_without_variables(self):
        """Collections with no variables yield an empty layout."""
        result = auto_layout_variables([CollectionNode(id="c", name="C")])
        assert result.to_dict() == {"variables": [], "columnCount": 0, "cycles": []}

    @pytest.mark.unit
    def test_layered_positions(self, layered_collections):
        """Columns follow dependency depth; rows follow names."""
        result = auto_layout_variables(layered_collections)
        assert result.column_count == 3
        assert _positions(result) == {
            "prim:black": (0, 0, 50, 50),
            "prim:blue-500": (0, 1, 50, 250),
            "prim:white": (0, 2, 50, 450),
            "sem:primary": (1, 0, 520, 50),
            "sem:surface": (1, 1, 520, 250),
            "theme:button-bg": (2, 0, 990, 50),
        }

    @pytest.mark.unit
    def test_output_order(self, layered_collections):
        """Variables are listed column by column, top to bottom."""
        result = auto_layout_variables(layered_collections)
        assert [str(v.key) for v in result.variables] == [
            "prim:black",
            "prim:blue-500",
            "prim:white",
            "sem:primary",
            "sem:surface",
            "theme:button-bg",
        ]

    @pytest.mark.unit
    def test_collection_groups_sorted_and_spaced(self):
        """Groups in one column sort by collection id with one extra gap."""
        collections = [
            CollectionNode(id="zeta", name="A", variables=[_color_var("z1")]),
            CollectionNode(id="alpha", name="Z", variables=[_color_var("a2", "b"), _color_var("a1", "a")]),
        ]
        result = auto_layout_variables(collections)
        assert _positions(result) == {
            "alpha:a1": (0, 0, 50, 50),
            "alpha:a2": (0, 1, 50, 250),
            "zeta:z1": (0, 0, 50, 490),
        }

    @pytest.mark.unit
    def test_name_ties_break_on_id(self):
        """Equal names are ordered by variable id."""
        collection = CollectionNode(
            id="c", name="C", variables=[_color_var("b", "same"), _color_var("a", "same")]
        )
        result = auto_layout_variables([collection])
        assert [v.variable.id for v in result.variables] == ["a", "b"]

    @pytest.mark.unit
    def test_column_monotonicity(self, layered_collections):
        """A variable always sits right of everything it aliases."""
        result = auto_layout_variables(layered_collections)
        columns = {v.key: v.column for v in result.variables}
        for key, dependencies in build_dependency_graph(layered_collections).items():
            for dependency in dependencies:
                assert columns[key] > columns[dependency]

    @pytest.mark.unit
    def test_deterministic(self, layered_collections, cyclic_collections):
        """Identical input yields identical output."""
        snapshot = layered_collections + cyclic_collections
        first = auto_layout_variables(snapshot).to_dict()
        second = auto_layout_variables(snapshot).to_dict()
        assert first == second

    @pytest.mark.unit
    def test_cycle_still_lays_out(self, cyclic_collections, caplog):
        """Cycles degrade the layout but never abort it."""
        with caplog.at_level("WARNING"):
            result = auto_layout_variables(cyclic_collections)
        assert result.has_cycles
        assert result.column_count == 2
        assert _positions(result) == {
            "c2:v2": (0, 0, 50, 50),
            "c1:v1": (1, 0, 520, 50),
        }
        assert "Cycle detected" in caplog.text

    @pytest.mark.unit
    def test_dangling_alias_is_column_zero(self):
        """Unknown alias targets do not push a variable right."""
        collection = CollectionNode(id="c", name="C", variables=[_alias_var("a", "ghost")])
        result = auto_layout_variables([collection])
        assert result.column_count == 1
        assert result.variables[0].column == 0

    @pytest.mark.unit
    def test_custom_config(self, layered_collections):
        """Geometry can be rescaled without changing the structure."""
        config = LayoutConfig(
            column_width=10, node_height=1, node_spacing=1, column_spacing=0, start_x=0, start_y=0
        )
        result = auto_layout_variables(layered_collections, config)
        by_key = {str(v.key): v.position for v in result.variables}
        assert by_key["theme:button-bg"] == Position(x=20, y=0)
        assert by_key["prim:white"] == Position(x=0, y=4)

    @pytest.mark.unit
    def test_config_from_environment(self, monkeypatch):
        """RANGDE_LAYOUT_* variables feed LayoutConfig."""
        monkeypatch.setenv("RANGDE_LAYOUT_COLUMN_WIDTH", "100")
        monkeypatch.setenv("RANGDE_LAYOUT_START_X", "0")
        config = LayoutConfig.from_environment()
        assert config.column_width == 100
        assert config.column_x(2) == 2 * (100 + 150)

    @pytest.mark.unit
    def test_to_dict(self, layered_collections):
        """Serialized variables keep their data and placement."""
        result = auto_layout_variables(layered_collections)
        entry = result.to_dict()["variables"][-1]
        assert entry["id"] == "button-bg"
        assert entry["collectionName"] == "Brand Theme"
        assert entry["valuesByMode"]["light"]["variableId"] == "primary"
        assert entry["position"] == {"x": 990, "y": 50}


def _layered(cid, layer=None):
    return CollectionNode(id=cid, name=cid.upper(), layer=layer)


class TestCollectionArrangement:
    """Tests for arranging whole collections by layer."""

    @pytest.mark.unit
    def test_column_index(self):
        """Layers map to columns 0-2; unassigned is -1."""
        assert get_column_index(CollectionLayer.PRIMITIVE) == 0
        assert get_column_index(CollectionLayer.SEMANTIC) == 1
        assert get_column_index(CollectionLayer.THEME) == 2
        assert get_column_index(None) == -1

    @pytest.mark.unit
    def test_column_x(self):
        """Columns are 400 apart from x=100; unassigned uses the first column."""
        assert get_column_x(CollectionLayer.PRIMITIVE) == 100
        assert get_column_x(CollectionLayer.SEMANTIC) == 500
        assert get_column_x(CollectionLayer.THEME) == 900
        assert get_column_x(None) == 100

    @pytest.mark.unit
    def test_layer_columns(self, layered_collections):
        """Each layer gets its own column, stacked from y=100."""
        layout = calculate_column_layout(layered_collections)
        assert layout == {
            "prim": Position(x=100, y=100),
            "sem": Position(x=500, y=100),
            "theme": Position(x=900, y=100),
        }

    @pytest.mark.unit
    def test_unassigned_grid_below_tallest_column(self):
        """Unassigned collections wrap every three, below the layer columns."""
        collections = [
            _layered("p1", CollectionLayer.PRIMITIVE),
            _layered("p2", CollectionLayer.PRIMITIVE),
            _layered("s1", CollectionLayer.SEMANTIC),
        ] + [_layered(f"u{i}") for i in range(4)]

        layout = calculate_column_layout(collections)

        assert layout["p2"] == Position(x=100, y=300)
        assert layout["s1"] == Position(x=500, y=100)
        # Two primitive rows: 100 + 2 * 200 + 100
        assert layout["u0"] == Position(x=100, y=600)
        assert layout["u1"] == Position(x=500, y=600)
        assert layout["u2"] == Position(x=900, y=600)
        assert layout["u3"] == Position(x=100, y=800)

    @pytest.mark.unit
    def test_only_unassigned(self):
        """Without layered collections the grid starts one gap below the top."""
        layout = calculate_column_layout([_layered("u")])
        assert layout["u"] == Position(x=100, y=200)

    @pytest.mark.unit
    def test_duplicate_id_keeps_first(self):
        """A repeated id keeps its first position and takes no grid slot."""
        layout = calculate_column_layout(
            [_layered("a", CollectionLayer.THEME), _layered("a"), _layered("b")]
        )
        assert layout == {
            "a": Position(x=900, y=100),
            "b": Position(x=100, y=400),
        }

    @pytest.mark.unit
    def test_auto_arrange_keeps_input_order(self, layered_collections):
        """Every collection is paired with its position, in input order."""
        arranged = auto_arrange_collections(list(reversed(layered_collections)))
        assert [a.collection.id for a in arranged] == ["theme", "sem", "prim"]
        assert arranged[0].position == Position(x=900, y=100)
        data = arranged[0].to_dict()
        assert data["id"] == "theme"
        assert data["position"] == {"x": 900, "y": 100}

    @pytest.mark.unit
    def test_empty(self):
        """No collections, no positions."""
        assert calculate_column_layout([]) == {}
        assert auto_arrange_collections([]) == []
