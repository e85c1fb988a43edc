"""
Configuration management for the menu tenancy core.

Settings are read from the environment (and an optional .env file) once per
process. Field names match the environment variable names case-insensitively.
"""
from functools import lru_cache
from typing import Any, List, Literal, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import NamespaceLimits, RateLimitDefaults


class TenancySettings(BaseSettings):
    """Settings consumed by the tenancy core and the API process."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Core Application Settings
    app_name: str = Field(default="menu-tenancy")
    environment: str = Field(default="development")
    debug: bool = Field(default=False)

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)

    # Tenant Resolution
    root_domain: Optional[str] = Field(
        default=None,
        description="Tenants are served from <slug>.<root_domain>"
    )
    dev_host_suffix: str = Field(default=".localhost")
    tenant_domain_map: str = Field(
        default="{}",
        description="Custom domain to tenant slug, as a raw JSON object"
    )
    default_tenant_slug: Optional[str] = Field(
        default=None,
        description="Last-resort slug for local development"
    )
    admin_host: Optional[str] = Field(
        default=None,
        description="Admin routes are only served on this host when set"
    )
    cors_origins: str = Field(
        default="*",
        description="Comma separated origins; subdomains of root_domain are always allowed"
    )

    # Platform Database (tenants, subscriptions, tenant_databases)
    platform_database_url: Optional[str] = Field(default=None)
    platform_pool_min_size: int = Field(default=1)
    platform_pool_max_size: int = Field(default=10)

    # Provisioning Credentials
    provision_db_scheme: str = Field(default="postgresql")
    provision_db_host: str = Field(default="127.0.0.1")
    provision_db_port: int = Field(default=5432)
    provision_db_user: str = Field(default="postgres")
    provision_db_password: SecretStr = Field(default=SecretStr(""))
    provision_db_maintenance_database: str = Field(default="postgres")
    provision_timeout_seconds: int = Field(default=30)
    tenant_db_prefix: str = Field(default=NamespaceLimits.DEFAULT_PREFIX)

    # Tenant Pools
    tenant_pool_min_size: int = Field(default=1)
    tenant_pool_max_size: int = Field(default=10)
    tenant_pool_timeout_seconds: int = Field(default=30)
    pool_close_timeout_seconds: float = Field(default=10.0)

    # Rate Limiting
    rate_limit_window_seconds: int = Field(default=RateLimitDefaults.WINDOW_SECONDS)
    rate_limit_max_requests: int = Field(default=RateLimitDefaults.MAX_REQUESTS)
    rate_limit_backend: Literal["memory", "redis"] = Field(default="memory")
    rate_limit_sweep_interval_seconds: int = Field(
        default=RateLimitDefaults.SWEEP_INTERVAL_SECONDS
    )
    redis_url: Optional[str] = Field(default=None)

    # Security
    app_encryption_key: Optional[SecretStr] = Field(
        default=None,
        description="When set, stored connection descriptors are encrypted"
    )

    @field_validator("root_domain", "admin_host", "default_tenant_slug", mode="before")
    @classmethod
    def _normalize_optional_host(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip().lower()
        return value or None

    @field_validator("dev_host_suffix", mode="before")
    @classmethod
    def _normalize_suffix(cls, value: Any) -> str:
        return str(value or "").strip().lower()

    @field_validator("tenant_db_prefix")
    @classmethod
    def _validate_prefix(cls, value: str) -> str:
        # Deferred: features import config
        from ..features.database.utils.namespace import validate_namespace_prefix
        from ..core.exceptions import InvalidNamespaceError
        try:
            validate_namespace_prefix(value)
        except InvalidNamespaceError as e:
            raise ValueError(e.message) from e
        return value

    @field_validator("rate_limit_window_seconds", "rate_limit_max_requests")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("rate limit window and cap must be > 0")
        return value

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    def get_provision_password(self) -> str:
        return self.provision_db_password.get_secret_value()

    def get_cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def get_encryption_key(self) -> Optional[str]:
        if self.app_encryption_key is None:
            return None
        return self.app_encryption_key.get_secret_value() or None


@lru_cache()
def get_settings() -> TenancySettings:
    """Get cached settings instance."""
    return TenancySettings()
