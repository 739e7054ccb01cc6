"""Application configuration."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Storage
    database_path: str = "data/goaltrack.db"

    # Auth
    jwt_secret: str = "secret-key"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 30

    # Server
    server_host: str = "0.0.0.0"
    server_port: int = 5000
    cors_origins: list[str] = ["*"]

    # Daily reconciliation sweep (runs at 00:00 UTC)
    reconcile_sweep_enabled: bool = True

    # AI providers
    openai_api_key: str = ""
    openai_model: str = "gpt-3.5-turbo"
    deepseek_api_key: str = ""
    deepseek_api_url: str = "https://api.deepseek.com/v1/chat/completions"
    deepseek_model: str = "deepseek-chat"
    ai_timeout: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = False


settings = Settings()
