"""Configuration management using pydantic-settings."""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


ASSISTANT_TYPES = ("health_coach", "excursion_creator")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=7788, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # Database Configuration
    database_path: str = Field(default="./data/assistant_relay.db", description="DuckDB database file")

    # Auth Configuration
    jwt_secret: Optional[str] = Field(default=None, description="Secret used to verify bearer access tokens")
    jwt_audience: Optional[str] = Field(default="authenticated", description="Expected token audience")
    jwt_algorithms: str = Field(default="HS256", description="Accepted token algorithms (comma separated)")

    # Remote Assistant Service Configuration
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    openai_api_base: str = Field(default="https://api.openai.com/v1", description="OpenAI API base URL")
    openai_beta: str = Field(default="assistants=v2", description="OpenAI-Beta header value")
    openai_timeout: float = Field(default=30.0, description="Per-request timeout in seconds")

    # Assistant Configuration
    health_coach_assistant_id: Optional[str] = Field(default=None, description="Health Coach assistant ID")
    excursion_creator_assistant_id: Optional[str] = Field(default=None, description="Excursion Creator assistant ID")

    # Run Polling Configuration
    run_poll_interval: float = Field(default=1.0, description="Seconds between run status polls")
    run_poll_max_attempts: int = Field(default=30, description="Maximum run status polls")

    # Client SDK Configuration
    backend_url: Optional[str] = Field(default=None, description="Base URL of this backend, used by the client SDK")
    anon_key: Optional[str] = Field(default=None, description="Public anonymous key sent by the client SDK")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_file: Optional[str] = Field(default="./logs/app.log", description="Log file path")

    def get_jwt_algorithms(self) -> List[str]:
        """Get list of accepted token algorithms."""
        return [alg.strip() for alg in self.jwt_algorithms.split(",") if alg.strip()]

    def get_assistant_id(self, assistant_type: str) -> Optional[str]:
        """Get the remote assistant ID configured for an assistant type."""
        if assistant_type not in ASSISTANT_TYPES:
            raise ValueError(f"Unknown assistant type: {assistant_type}")
        return getattr(self, f"{assistant_type}_assistant_id")


# Global settings instance
settings = Settings()
