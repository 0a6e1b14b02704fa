"""Application settings using Pydantic BaseSettings for environment variable management."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log output format (json for production, console for dev)
        max_workers: Upper bound for the analysis worker pool (None = CPU count)
        snapshot_path: Default JSON snapshot used by the CLI
    """

    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="json",
        description="Log output format: json or console"
    )
    max_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum concurrent analysis units (defaults to CPU count)"
    )
    snapshot_path: Optional[str] = Field(
        default=None,
        description="Path to a JSON graph snapshot for CLI commands"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_prefix": "VERITAS_",
    }


# Singleton instance - import this throughout the application
settings = Settings()
