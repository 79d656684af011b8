"""Tests for configuration management."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_default_export_format,
    get_environment,
    get_environment_info,
    get_export_dir,
    get_log_level,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("RANGDE_LAYOUT_COLUMN_WIDTH", raising=False)
        result = get_environment(EnvVar.LAYOUT_COLUMN_WIDTH)
        assert result == 320

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("RANGDE_LAYOUT_COLUMN_WIDTH", "999")
        result = get_environment(EnvVar.LAYOUT_COLUMN_WIDTH, override=500)
        assert result == 500

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("RANGDE_LAYOUT_NODE_HEIGHT", "80")
        result = get_environment(EnvVar.LAYOUT_NODE_HEIGHT)
        assert result == 80
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_invalid_int_returns_default(self, monkeypatch):
        """Invalid integer value returns default."""
        monkeypatch.setenv("RANGDE_LAYOUT_START_X", "not-a-number")
        result = get_environment(EnvVar.LAYOUT_START_X)
        assert result == 50

    @pytest.mark.unit
    def test_string_type(self, monkeypatch):
        """String type returns as-is."""
        monkeypatch.setenv("RANGDE_EXPORT_FORMAT", "dtcg")
        result = get_environment(EnvVar.EXPORT_FORMAT)
        assert result == "dtcg"
        assert isinstance(result, str)

    @pytest.mark.unit
    def test_path_type(self, monkeypatch, tmp_path):
        """Path type is converted from string."""
        monkeypatch.setenv("RANGDE_EXPORT_DIR", str(tmp_path))
        result = get_environment(EnvVar.EXPORT_DIR)
        assert result == tmp_path
        assert isinstance(result, Path)

    @pytest.mark.unit
    def test_none_default_for_export_dir(self, monkeypatch):
        """Export dir defaults to None when not set."""
        monkeypatch.delenv("RANGDE_EXPORT_DIR", raising=False)
        assert get_environment(EnvVar.EXPORT_DIR) is None


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.LAYOUT_COLUMN_SPACING)
        assert isinstance(info, EnvConfig)
        assert info.name == "RANGDE_LAYOUT_COLUMN_SPACING"
        assert info.default == 150
        assert info.var_type is int
        assert info.category == "layout"

    @pytest.mark.unit
    def test_description_present(self):
        """Description field is populated."""
        info = get_environment_info(EnvVar.EXPORT_FORMAT)
        assert "figma" in info.description

    @pytest.mark.unit
    def test_declared_types_are_convertible(self):
        """Every variable uses a type the converter handles."""
        for env_var in EnvVar:
            info = get_environment_info(env_var)
            assert info.var_type in (str, int, Path)
            assert info.default is None or isinstance(info.default, info.var_type)


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_returns_all_variables(self):
        """Returns all EnvVar members when no category."""
        result = list_environment_variables()
        assert len(result) == len(EnvVar)
        assert all(isinstance(v, EnvVar) for v in result)

    @pytest.mark.unit
    def test_filter_by_category(self):
        """Filters by category correctly."""
        layout_vars = list_environment_variables("layout")
        assert EnvVar.LAYOUT_COLUMN_WIDTH in layout_vars
        assert EnvVar.LAYOUT_START_Y in layout_vars
        assert EnvVar.EXPORT_FORMAT not in layout_vars
        assert len(layout_vars) == 6


# =============================================================================
# Tests for convenience functions
# =============================================================================


class TestConvenience:
    """Tests for log level, export format and export dir helpers."""

    @pytest.mark.unit
    def test_log_level_upper_cased(self, monkeypatch):
        """Log level names are normalized to upper case."""
        monkeypatch.setenv("RANGDE_LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"

    @pytest.mark.unit
    def test_log_level_default(self, monkeypatch):
        """Log level defaults to INFO."""
        monkeypatch.delenv("RANGDE_LOG_LEVEL", raising=False)
        assert get_log_level() == "INFO"

    @pytest.mark.unit
    def test_default_export_format(self, monkeypatch):
        """Export format defaults to figma."""
        monkeypatch.delenv("RANGDE_EXPORT_FORMAT", raising=False)
        assert get_default_export_format() == "figma"
        assert get_default_export_format("dtcg") == "dtcg"

    @pytest.mark.unit
    def test_export_dir_override(self, tmp_path):
        """Override parameter takes highest priority and accepts strings."""
        assert get_export_dir(str(tmp_path / "out")) == tmp_path / "out"

    @pytest.mark.unit
    def test_export_dir_from_env(self, tmp_path, monkeypatch):
        """RANGDE_EXPORT_DIR used when no override."""
        monkeypatch.setenv("RANGDE_EXPORT_DIR", str(tmp_path / "env"))
        assert get_export_dir() == tmp_path / "env"

    @pytest.mark.unit
    def test_export_dir_default(self, tmp_path, monkeypatch):
        """Falls back to ./exports under the working directory."""
        monkeypatch.delenv("RANGDE_EXPORT_DIR", raising=False)
        monkeypatch.chdir(tmp_path)
        assert get_export_dir().resolve() == (tmp_path / "exports").resolve()
