"""Tests for application settings."""

from simwire.config import Settings
from simwire.protocol.models import PROTOCOL_VERSION


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.protocol_version == PROTOCOL_VERSION
        assert settings.min_protocol_version == 1
        assert settings.max_message_bytes == 1024 * 1024
        assert settings.fatal_error_codes == []

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SIMWIRE_PORT", "9000")
        monkeypatch.setenv("SIMWIRE_FATAL_ERROR_CODES", '["fatal", "gpu_lost"]')
        settings = Settings(_env_file=None)
        assert settings.port == 9000
        assert settings.fatal_error_codes == ["fatal", "gpu_lost"]

    def test_supports_version(self):
        settings = Settings(_env_file=None, protocol_version=3, min_protocol_version=2)
        assert not settings.supports_version(1)
        assert settings.supports_version(2)
        assert settings.supports_version(3)
        assert not settings.supports_version(4)
