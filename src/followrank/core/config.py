"""Configuration management using Pydantic Settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///data/followrank.db"

    # PageRank
    pagerank_damping: float = 0.85
    pagerank_max_iter: int = Field(default=50, gt=0)
    pagerank_tol: float = Field(default=1e-06, gt=0)

    # Reporting / persistence
    persist_batch_size: int = Field(default=1000, gt=0)
    report_top_n: int = Field(default=10, gt=0)

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"

    # Paths
    data_dir: Path = Path("data")

    @field_validator("pagerank_damping")
    @classmethod
    def check_damping(cls, v: float) -> float:
        """Damping must be a probability strictly between 0 and 1."""
        if not 0.0 < v < 1.0:
            raise ValueError("pagerank_damping must be between 0 and 1")
        return v

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return v

    def ensure_dirs(self) -> None:
        """Create required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()
    settings.ensure_dirs()
    return settings
