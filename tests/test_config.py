"""Tests for the config module."""

from pathlib import Path

from formulavalidator.config import Settings, _parse_cors_origins, _parse_optional_path


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


class TestParseOptionalPath:
    """Test optional path parsing."""

    def test_unset_is_none(self, monkeypatch):
        """Test that an unset variable gives None."""
        monkeypatch.delenv("CONFORMANCE_VECTORS_PATH", raising=False)
        assert _parse_optional_path("CONFORMANCE_VECTORS_PATH") is None

    def test_value_becomes_path(self, monkeypatch, tmp_path):
        """Test that a set variable is converted to a Path."""
        monkeypatch.setenv("CONFORMANCE_VECTORS_PATH", str(tmp_path / "vectors.json"))
        assert _parse_optional_path("CONFORMANCE_VECTORS_PATH") == tmp_path / "vectors.json"


class TestSettings:
    """Test Settings configuration."""

    def test_settings_fixture_values(self, mock_settings):
        """Test the shared settings fixture."""
        assert mock_settings.host == "127.0.0.1"
        assert mock_settings.port == 8000
        assert mock_settings.debug is False
        assert mock_settings.log_formulas is False
        assert mock_settings.conformance_vectors_path is None

    def test_settings_explicit_values(self, tmp_path):
        """Test Settings with explicit parameters."""
        settings = Settings(
            host="0.0.0.0",
            port=9000,
            debug=True,
            cors_allow_origins=["http://localhost:3000", "http://example.com"],
            log_level="DEBUG",
            log_formulas=True,
            conformance_vectors_path=tmp_path / "custom.json",
        )

        assert settings.host == "0.0.0.0"
        assert settings.port == 9000
        assert settings.debug is True
        assert settings.cors_allow_origins == ["http://localhost:3000", "http://example.com"]
        assert settings.log_level == "DEBUG"
        assert settings.log_formulas is True
        assert settings.conformance_vectors_path == tmp_path / "custom.json"

    def test_settings_path_handling(self, tmp_path):
        """Test that string paths are converted to Path objects."""
        settings = Settings(conformance_vectors_path=str(tmp_path / "v.json"))
        assert isinstance(settings.conformance_vectors_path, Path)

    def test_settings_debug_flag_variations(self):
        """Test debug flag with various boolean values."""
        assert Settings(debug=True).debug is True
        assert Settings(debug=False).debug is False
