from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from simwire.protocol.models import PROTOCOL_VERSION


class Settings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 8765
    debug: bool = False
    log_level: str = "INFO"

    # Protocol
    protocol_version: int = PROTOCOL_VERSION
    min_protocol_version: int = 1
    max_message_bytes: int = 1024 * 1024
    fatal_error_codes: list[str] = []

    model_config = SettingsConfigDict(
        env_prefix="SIMWIRE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def supports_version(self, version: int) -> bool:
        return self.min_protocol_version <= version <= self.protocol_version


settings = Settings()
