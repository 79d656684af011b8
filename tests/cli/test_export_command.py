"""Tests for export, schema and config CLI commands."""

import json


def test_export_figma_default(cli, snapshot_file, tmp_path):
    """Figma export of all collections writes collections.json."""
    result = cli("export", str(snapshot_file), "-f", "figma", "-o", str(tmp_path))
    assert result.returncode == 0
    documents = json.loads((tmp_path / "collections.json").read_text(encoding="utf-8"))
    assert [d["id"] for d in documents] == [
        "VariableCollectionId:prim",
        "VariableCollectionId:sem",
    ]
    assert str(tmp_path / "collections.json") in result.stdout


def test_export_selected_collection_resolves_aliases(cli, snapshot_file, tmp_path):
    """A selected collection still resolves aliases into the snapshot."""
    result = cli(
        "export", str(snapshot_file), "-f", "figma", "-c", "sem", "-o", str(tmp_path)
    )
    assert result.returncode == 0
    document = json.loads((tmp_path / "semantic.json").read_text(encoding="utf-8"))
    value = document["variables"][0]["valuesByMode"]["light"]
    assert value["type"] == "VARIABLE_ALIAS"


def test_export_dtcg_all_modes(cli, snapshot_file, tmp_path):
    """DTCG writes one file per mode."""
    result = cli(
        "export", str(snapshot_file), "-f", "dtcg", "--all-modes", "-o", str(tmp_path)
    )
    assert result.returncode == 0
    dark = json.loads((tmp_path / "tokens.dark.json").read_text(encoding="utf-8"))
    assert dark["primitives"]["blue"]["500"]["$value"] == "#1D4ED8"
    assert (tmp_path / "tokens.json").exists()


def test_export_tokens_studio_filename(cli, snapshot_file, tmp_path):
    """The output file name can be overridden."""
    result = cli(
        "export",
        str(snapshot_file),
        "-f",
        "tokens-studio",
        "--mode",
        "dark",
        "--filename",
        "studio.json",
        "-o",
        str(tmp_path),
    )
    assert result.returncode == 0
    document = json.loads((tmp_path / "studio.json").read_text(encoding="utf-8"))
    assert document["$metadata"]["tokenSetOrder"] == [
        "primitive-primitives",
        "semantic-semantic",
    ]


def test_export_unknown_collection(cli, snapshot_file, tmp_path):
    """Unknown collection ids fail with the available ids."""
    result = cli("export", str(snapshot_file), "-c", "nope", "-o", str(tmp_path))
    assert result.returncode == 1
    assert "Available: prim, sem" in result.stderr


def test_schema_command(cli):
    """The schema describes a list of collections with camelCase keys."""
    result = cli("schema")
    assert result.returncode == 0
    schema = json.loads(result.stdout)
    assert schema["type"] == "array"
    assert "valuesByMode" in json.dumps(schema)


def test_config_command(cli):
    """Config lists every environment variable."""
    result = cli("config", "--category", "layout")
    assert result.returncode == 0
    assert "RANGDE_LAYOUT_COLUMN_WIDTH" in result.stdout
    assert "RANGDE_LOG_LEVEL" not in result.stdout


def test_unknown_command(cli):
    """Unknown commands print help and exit 1."""
    result = cli("frobnicate")
    assert result.returncode == 1
    assert "Usage: python . {command}" in result.stdout
