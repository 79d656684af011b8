"""Fixtures for CLI tests that run `python .` in a subprocess."""

import json
import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]

SNAPSHOT = [
    {
        "id": "prim",
        "name": "Primitives",
        "layer": "primitive",
        "modes": [{"id": "light", "name": "Light"}, {"id": "dark", "name": "Dark"}],
        "variables": [
            {
                "id": "blue-500",
                "name": "🎨/blue/500",
                "valuesByMode": {
                    "light": {"type": "color", "hex": "#3B82F6"},
                    "dark": {"type": "color", "hex": "#1D4ED8"},
                },
            }
        ],
    },
    {
        "id": "sem",
        "name": "Semantic",
        "layer": "semantic",
        "modes": [{"id": "light", "name": "Light"}, {"id": "dark", "name": "Dark"}],
        "variables": [
            {
                "id": "primary",
                "name": "✦/color/primary",
                "valuesByMode": {
                    "light": {"type": "alias", "variableId": "blue-500", "collectionId": "prim"},
                    "dark": {"type": "alias", "variableId": "blue-500", "collectionId": "prim"},
                },
            }
        ],
        "position": {"x": 100, "y": 40},
    },
]


def run_cli(*args: str) -> subprocess.CompletedProcess:
    """Run the CLI from the repository root."""
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        encoding="utf-8",
        cwd=REPO_ROOT,
        timeout=60,
    )


@pytest.fixture
def snapshot_file(tmp_path) -> Path:
    """A valid two-layer snapshot on disk."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(SNAPSHOT, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def invalid_snapshot_file(tmp_path) -> Path:
    """A snapshot where a primitive collection holds an alias."""
    broken = json.loads(json.dumps(SNAPSHOT))
    broken[0]["variables"].append(
        {
            "id": "copy",
            "name": "🎨/copy",
            "valuesByMode": {"light": {"type": "alias", "variableId": "blue-500"}},
        }
    )
    path = tmp_path / "invalid.json"
    path.write_text(json.dumps(broken, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def cli():
    """Callable running `python . <args>`."""
    return run_cli
