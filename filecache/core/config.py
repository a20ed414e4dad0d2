"""Environment-driven configuration with Pydantic v2."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_TTL_SECONDS = 60


class Settings(BaseSettings):
    """Cache settings driven entirely by environment variables."""

    # Storage
    base_path: str = Field(default="cache", validation_alias="FILE_CACHE_BASE_PATH")
    default_ttl: int = Field(default=DEFAULT_TTL_SECONDS, validation_alias="FILE_CACHE_DEFAULT_TTL", ge=0)

    # Metrics
    snapshot_retention: Optional[int] = Field(default=None, validation_alias="FILE_CACHE_SNAPSHOT_RETENTION", ge=1)

    # Optional background sweeper
    sweep_interval: int = Field(default=300, validation_alias="FILE_CACHE_SWEEP_INTERVAL", ge=1)

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "console"] = Field(default="json", validation_alias="LOG_FORMAT")
    log_file: Optional[str] = Field(default=None, validation_alias="LOG_FILE")

    @field_validator("base_path")
    @classmethod
    def expand_base_path(cls, v):
        """Expand ~ so entries never land in a literal '~' directory."""
        return str(Path(v).expanduser())

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "populate_by_name": True,
        "env_parse_none_str": "none",
    }
