"""Tests for configuration validation."""

import os
from unittest.mock import patch

import pytest

from filegen.config import Settings, get_settings


class TestConfigDefaults:
    """Test default configuration values."""

    def test_defaults(self):
        """Defaults apply when no environment is set."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
            assert settings.environment == "development"
            assert settings.chunk_size_bytes == 65536
            assert settings.use_binary_units is True
            assert settings.output_dir == "./generated"

    def test_debug_defaults_to_false(self):
        """Debug should default to False for safety."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
            assert settings.debug is False

    def test_is_development(self):
        """is_development reflects the environment."""
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}, clear=True):
            settings = Settings(_env_file=None)
            assert settings.is_development is False

    def test_get_settings_is_cached(self):
        """get_settings returns the same instance."""
        assert get_settings() is get_settings()


class TestConfigValidation:
    """Test configuration validators."""

    def test_log_level_is_uppercased(self):
        """Log level is normalized to uppercase."""
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}, clear=True):
            settings = Settings(_env_file=None)
            assert settings.log_level == "DEBUG"

    def test_chunk_size_from_env(self):
        """Chunk size can be configured."""
        with patch.dict(os.environ, {"CHUNK_SIZE_BYTES": "1048576"}, clear=True):
            settings = Settings(_env_file=None)
            assert settings.chunk_size_bytes == 1048576

    def test_chunk_size_too_small(self):
        """Chunk size below the minimum is rejected."""
        with (
            patch.dict(os.environ, {"CHUNK_SIZE_BYTES": "16"}, clear=True),
            pytest.raises(ValueError, match="CHUNK_SIZE_BYTES must be between"),
        ):
            Settings(_env_file=None)

    def test_chunk_size_too_large(self):
        """Chunk size above the maximum is rejected."""
        with (
            patch.dict(
                os.environ, {"CHUNK_SIZE_BYTES": str(64 * 1024 * 1024)}, clear=True
            ),
            pytest.raises(ValueError, match="CHUNK_SIZE_BYTES must be between"),
        ):
            Settings(_env_file=None)

    def test_cors_origins_from_comma_list(self):
        """CORS origins passed directly parse from a comma separated string."""
        settings = Settings(
            _env_file=None, cors_origins="http://a.example, http://b.example"
        )
        assert settings.cors_origins == ["http://a.example", "http://b.example"]

    def test_cors_origins_from_json(self):
        """CORS origins parse from a JSON list."""
        env = {"CORS_ORIGINS": '["http://a.example"]'}
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)
            assert settings.cors_origins == ["http://a.example"]

    def test_decimal_units_from_env(self):
        """Binary units can be turned off."""
        with patch.dict(os.environ, {"USE_BINARY_UNITS": "false"}, clear=True):
            settings = Settings(_env_file=None)
            assert settings.use_binary_units is False
