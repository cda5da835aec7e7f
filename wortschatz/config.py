"""Application configuration using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Application settings, configurable via environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Path("data")

    # Storage
    database_url: str = ""  # defaults to a SQLite file inside data_dir

    # Logging
    log_level: LogLevel = "INFO"
    log_file_enabled: bool = False
    log_file_path: Path | None = None
    log_file_max_bytes: int = 10 * 1024 * 1024  # 10 MB
    log_file_backup_count: int = 5

    @property
    def resolved_log_file_path(self) -> Path:
        """Return log file path, defaulting to data_dir/wortschatz.log if not set."""
        return self.log_file_path or self.data_dir / "wortschatz.log"

    @property
    def db_path(self) -> Path:
        return self.data_dir / "wortschatz.db"

    @property
    def resolved_database_url(self) -> str:
        """Return the SQLAlchemy async URL, defaulting to SQLite under data_dir."""
        return self.database_url or f"sqlite+aiosqlite:///{self.db_path}"

    # OpenAI
    openai_api_key: str = ""
    completion_model: str = "gpt-4o-mini"
    review_model: str = "gpt-4o"
    alternatives_model: str = "gpt-4o"
    oracle_timeout: float = 60.0

    @property
    def oracle_configured(self) -> bool:
        return bool(self.openai_api_key)

    # Auth gate for review/completion and entry writes
    admin_password: str = ""
    auth_cookie_name: str = "wortschatz_auth"


settings = Settings()
