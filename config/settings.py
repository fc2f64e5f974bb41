"""Configuration settings loaded from .env file."""

from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, loaded from .env file.

    The API key is sent as ``x-api-key`` on every agent and upload request.
    """

    # Agent service
    lyzr_api_key: str = ""
    agent_api_url: str = "https://agent-prod.studio.lyzr.ai/v3/inference/chat/"
    agent_stream_url: str = "https://agent-prod.studio.lyzr.ai/v3/inference/stream/"
    upload_url: str = "https://agent-prod.studio.lyzr.ai/v3/assets/upload"
    default_agent_id: Optional[str] = None

    # Transport
    request_timeout: float = 120.0

    # Logging
    log_dir: Path = Path("./data/logs")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be > 0")
        return v

    @field_validator("agent_api_url", "agent_stream_url", "upload_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"URL must start with http:// or https://: {v}")
        return v

    @field_validator("log_dir")
    @classmethod
    def ensure_parent_dirs(cls, v: Path) -> Path:
        v.parent.mkdir(parents=True, exist_ok=True)
        return v


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
