"""Configuration management for the food analyzer MCP server."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    environment: str = "development"
    log_level: str = "info"

    # MCP server metadata (reported by `initialize`)
    server_name: str = "food-analyzer-mcp"
    server_version: str = "1.0.0"

    # OpenAI
    # Empty key is allowed: the vision endpoint rejects the call instead.
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    vision_model: str = "gpt-4o"
    vision_max_tokens: int = 800

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def vision_configured(self) -> bool:
        """Check if an OpenAI credential is present."""
        return bool(self.openai_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
