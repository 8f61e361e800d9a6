"""Application configuration using Pydantic Settings."""

import logging
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """SQLite database settings."""
    
    model_config = SettingsConfigDict(env_prefix="DB_", env_file=".env", extra="ignore")
    
    path: str = "data/family_tree.db"
    timeout: float = 5.0
    
    def ensure_dirs(self) -> None:
        """Create the database directory if needed."""
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)


class ApiSettings(BaseSettings):
    """HTTP server settings."""
    
    model_config = SettingsConfigDict(env_prefix="API_", env_file=".env", extra="ignore")
    
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Main application settings."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
    
    log_level: str = "INFO"
    
    database: DatabaseSettings = DatabaseSettings()
    api: ApiSettings = ApiSettings()


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging for entrypoints."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


settings = Settings()
