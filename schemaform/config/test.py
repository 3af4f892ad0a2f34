"""Tests for configuration management."""

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_environment,
    get_environment_info,
    get_schema_base_url,
    is_production,
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
        monkeypatch.delenv("SCHEMAFORM_MAX_SCHEMA_ISSUES", raising=False)
        assert get_environment(EnvVar.SCHEMAFORM_MAX_SCHEMA_ISSUES) == 8

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("SCHEMAFORM_MAX_SCHEMA_ISSUES", "20")
        assert get_environment(EnvVar.SCHEMAFORM_MAX_SCHEMA_ISSUES, override=3) == 3

    @pytest.mark.unit
    def test_int_type_conversion(self, monkeypatch):
        """Integer type conversion from string."""
        monkeypatch.setenv("SCHEMAFORM_MAX_SCHEMA_ISSUES", "12")
        result = get_environment(EnvVar.SCHEMAFORM_MAX_SCHEMA_ISSUES)
        assert result == 12
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_float_type_conversion(self, monkeypatch):
        """Float type conversion from string."""
        monkeypatch.setenv("SCHEMAFORM_LOAD_TIMEOUT", "2.5")
        assert get_environment(EnvVar.SCHEMAFORM_LOAD_TIMEOUT) == 2.5

    @pytest.mark.unit
    def test_invalid_number_falls_back_to_default(self, monkeypatch):
        """Unparseable numbers use the default."""
        monkeypatch.setenv("SCHEMAFORM_LOAD_TIMEOUT", "soon")
        assert get_environment(EnvVar.SCHEMAFORM_LOAD_TIMEOUT) == 10.0


class TestConvenience:
    """Tests for convenience helpers."""

    @pytest.mark.unit
    def test_development_is_default(self, monkeypatch):
        """Unset environment is not production."""
        monkeypatch.delenv("SCHEMAFORM_ENV", raising=False)
        assert is_production() is False

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["production", "PROD", " Production "])
    def test_production_detection(self, monkeypatch, value):
        """Production spellings are recognized."""
        monkeypatch.setenv("SCHEMAFORM_ENV", value)
        assert is_production() is True

    @pytest.mark.unit
    def test_base_url_strips_trailing_slash(self, monkeypatch):
        """Base URL never ends with a slash."""
        monkeypatch.setenv("SCHEMAFORM_SCHEMA_BASE_URL", "https://forms.example.com/")
        assert get_schema_base_url() == "https://forms.example.com"


class TestIntrospection:
    """Tests for metadata helpers."""

    @pytest.mark.unit
    def test_info_returns_config(self):
        """Environment info exposes EnvConfig metadata."""
        info = get_environment_info(EnvVar.SCHEMAFORM_ENV)
        assert isinstance(info, EnvConfig)
        assert info.name == "SCHEMAFORM_ENV"

    @pytest.mark.unit
    def test_list_by_category(self):
        """Variables can be filtered by category."""
        loader_vars = list_environment_variables("loader")
        assert EnvVar.SCHEMAFORM_LOAD_TIMEOUT in loader_vars
        assert EnvVar.SCHEMAFORM_ENV not in loader_vars
        assert len(list_environment_variables()) == len(EnvVar)

    @pytest.mark.unit
    def test_types_have_converters(self):
        """Every variable uses a type that _convert_value handles."""
        for var in EnvVar:
            assert var.value.var_type in (str, int, float)
            assert isinstance(var.value.default, var.value.var_type)
