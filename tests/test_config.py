"""Tests for the config module."""

import pytest

from tablecalc.config import Settings, _parse_cors_origins
from tablecalc.formulas import FormulaLimits


class TestParseCorsOrigins:
    """Test CORS origins parsing."""

    def test_parse_cors_origins_with_value(self, monkeypatch):
        """Test parsing CORS origins from environment variable."""
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://localhost:3000,http://localhost:8080")
        result = _parse_cors_origins()
        assert result == ["http://localhost:3000", "http://localhost:8080"]

    def test_parse_cors_origins_without_value(self, monkeypatch):
        """Test default CORS origins when not set."""
        monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
        assert _parse_cors_origins() == ["*"]

    def test_parse_cors_origins_empty_string(self, monkeypatch):
        """Test parsing empty CORS origins defaults to wildcard."""
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "")
        assert _parse_cors_origins() == ["*"]


class TestSettings:
    """Test Settings configuration."""

    def test_settings_explicit_values(self):
        """Test Settings built with explicit parameters."""
        settings = Settings(
            formula_max_length=200,
            formula_max_depth=5,
            error_marker="#ERROR",
            host="0.0.0.0",
            port=9000,
            debug=True,
        )

        assert settings.formula_max_length == 200
        assert settings.formula_max_depth == 5
        assert settings.error_marker == "#ERROR"
        assert settings.host == "0.0.0.0"
        assert settings.port == 9000
        assert settings.debug is True

    def test_settings_cors_origins(self):
        """Test CORS origins are kept as given."""
        settings = Settings(cors_allow_origins=["http://localhost:3000", "http://example.com"])
        assert settings.cors_allow_origins == ["http://localhost:3000", "http://example.com"]


class TestFormulaLimits:
    """Test engine limits."""

    def test_defaults(self):
        """Test the documented default bounds."""
        limits = FormulaLimits()

        assert limits.max_formula_length == 500
        assert limits.max_argument_length == 50
        assert limits.max_reference_length == 10
        assert limits.max_row == 10000
        assert limits.max_column_letters == 3
        assert limits.max_range_cells == 1000
        assert limits.max_depth == 50
        assert limits.max_evaluation_steps == 500_000

    def test_from_settings(self, monkeypatch):
        """Test limits follow the active settings."""
        custom = Settings(
            formula_max_range_cells=25, formula_max_depth=3, formula_max_evaluation_steps=1000
        )
        monkeypatch.setattr("tablecalc.formulas.models.settings", custom)

        limits = FormulaLimits.from_settings()

        assert limits.max_range_cells == 25
        assert limits.max_depth == 3
        assert limits.max_evaluation_steps == 1000

    def test_rejects_nonsense_bounds(self):
        """Test that column letters cannot exceed three."""
        with pytest.raises(ValueError):
            FormulaLimits(max_column_letters=4)
