"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Chunk size bounds (bytes)
MIN_CHUNK_SIZE_BYTES = 1024
MAX_CHUNK_SIZE_BYTES = 16 * 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Generation
    chunk_size_bytes: int = 64 * 1024
    use_binary_units: bool = True  # 1024-based units; False = 1000-based

    # File Storage
    output_dir: str = "./generated"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Logging
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper() if isinstance(v, str) else "INFO"

    @field_validator("chunk_size_bytes")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        """Keep chunk size within sane bounds."""
        if not MIN_CHUNK_SIZE_BYTES <= v <= MAX_CHUNK_SIZE_BYTES:
            raise ValueError(
                f"CHUNK_SIZE_BYTES must be between {MIN_CHUNK_SIZE_BYTES} "
                f"and {MAX_CHUNK_SIZE_BYTES}"
            )
        return v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            # Handle JSON-like string from env var
            import json

            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",")]
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
