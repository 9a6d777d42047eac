"""
Settings for tenant-rbac.

Values are read from the environment (prefix ``RBAC_``) or a ``.env`` file.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RbacSettings(BaseSettings):
    """Runtime configuration for the RBAC core and its default adapters."""

    model_config = SettingsConfigDict(
        env_prefix="RBAC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    app_name: str = Field(default="tenant-rbac")
    environment: str = Field(default="development")

    # Database Configuration
    database_url: str = Field(default="postgresql://localhost:5432/rbac")
    db_schema: str = Field(default="public")
    db_pool_min_size: int = Field(default=5, ge=1)
    db_pool_max_size: int = Field(default=20, ge=1)
    db_command_timeout: float = Field(default=30.0, gt=0)

    # Redis Cache Configuration
    redis_url: Optional[str] = Field(default=None)
    cache_ttl_permissions: int = Field(default=600, ge=0)  # 10 minutes

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="simple")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {value}")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        value = value.lower()
        if value not in {"simple", "detailed", "json"}:
            raise ValueError(f"Invalid log format: {value}")
        return value

    @field_validator("db_schema")
    @classmethod
    def _check_schema(cls, value: str) -> str:
        # Interpolated into SQL, so only plain identifiers are accepted
        if not value.replace("_", "").isalnum():
            raise ValueError(f"Invalid schema name: {value}")
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> RbacSettings:
    """Get cached settings instance."""
    return RbacSettings()
