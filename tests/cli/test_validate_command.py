"""Tests for validate CLI command."""

import json


def test_validate_valid_snapshot(cli, snapshot_file):
    """A valid snapshot exits 0 with OK per collection."""
    result = cli("validate", str(snapshot_file))
    assert result.returncode == 0
    assert "Primitives [Primitive]: OK" in result.stdout
    assert "Semantic [Semantic]: OK" in result.stdout


def test_validate_reports_errors(cli, invalid_snapshot_file):
    """Layer violations exit 1 and are listed."""
    result = cli("validate", str(invalid_snapshot_file))
    assert result.returncode == 1
    assert "primitive collections cannot have aliases" in result.stdout


def test_validate_json(cli, snapshot_file):
    """JSON reports are keyed by collection id."""
    result = cli("validate", str(snapshot_file), "--format", "json")
    assert result.returncode == 0
    payload = json.loads(result.stdout)
    assert payload["sem"] == {"isValid": True, "errors": [], "warnings": []}


def test_validate_missing_file(cli, tmp_path):
    """Unreadable snapshots fail cleanly."""
    result = cli("validate", str(tmp_path / "missing.json"))
    assert result.returncode == 1
    assert "Validation failed" in result.stderr


def test_validate_malformed_snapshot(cli, tmp_path):
    """Schema violations fail cleanly."""
    path = tmp_path / "bad.json"
    path.write_text('[{"id": "x"}]', encoding="utf-8")
    result = cli("validate", str(path))
    assert result.returncode == 1
    assert "Traceback" not in result.stderr
