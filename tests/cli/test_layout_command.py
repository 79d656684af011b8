"""Tests for layout CLI command."""

import json


def test_layout_json(cli, snapshot_file):
    """JSON output lists positioned variables and the column count."""
    result = cli("layout", str(snapshot_file))
    assert result.returncode == 0
    layout = json.loads(result.stdout)
    assert layout["columnCount"] == 2
    assert [v["id"] for v in layout["variables"]] == ["blue-500", "primary"]
    assert layout["variables"][1]["column"] == 1


def test_layout_text_to_file(cli, snapshot_file, tmp_path):
    """Text summaries can be written to a file."""
    output = tmp_path / "layout.txt"
    result = cli("layout", str(snapshot_file), "--format", "text", "-o", str(output))
    assert result.returncode == 0
    text = output.read_text(encoding="utf-8")
    assert text.startswith("Column 0")
    assert "Semantic / ✦/color/primary" in text


def test_layout_no_args(cli):
    """Running without a snapshot prints help and exits 1."""
    result = cli("layout")
    assert result.returncode == 1
    assert "usage" in result.stdout.lower()


def test_layout_collections_json(cli, snapshot_file):
    """--collections places whole collections in layer columns."""
    result = cli("layout", str(snapshot_file), "--collections")
    assert result.returncode == 0
    arranged = json.loads(result.stdout)
    assert [c["id"] for c in arranged] == ["prim", "sem"]
    assert arranged[0]["position"] == {"x": 100, "y": 100}
    assert arranged[1]["position"] == {"x": 500, "y": 100}


def test_layout_collections_text(cli, snapshot_file):
    """Text arrangement shows one line per collection."""
    result = cli("layout", str(snapshot_file), "--collections", "--format", "text")
    assert result.returncode == 0
    assert result.stdout.splitlines() == [
        "Primitives [Primitive]  (100, 100)",
        "Semantic [Semantic]  (500, 100)",
    ]
