"""
Medida Configuration Module.

Handles application settings, feature flags, and Supabase connection details.
Uses pydantic-settings for validation and type safety.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeatureFlags(BaseSettings):
    """Feature flags for enabling/disabling modules."""

    model_config = SettingsConfigDict(env_prefix="FEATURE_")

    tables: bool = True
    search: bool = True
    users: bool = True

    def to_dict(self) -> dict[str, bool]:
        """Return feature flags as dictionary for health endpoint."""
        return {
            "tables": self.tables,
            "search": self.search,
            "users": self.users,
        }


class SupabaseSettings(BaseSettings):
    """Supabase configuration for storage and authentication."""

    model_config = SettingsConfigDict(env_prefix="SUPABASE_")

    url: str = Field(default="https://demo.supabase.co", description="Supabase project URL")
    service_role_key: str = Field(default="demo-service-role-key", description="Supabase service role key")
    jwt_secret: str = Field(default="demo-jwt-secret-for-development-only", description="JWT secret for token validation")
    jwt_audience: str = Field(default="authenticated", description="Expected 'aud' claim of Supabase access tokens")


class SearchSettings(BaseSettings):
    """Full-text search configuration for row data."""

    model_config = SettingsConfigDict(env_prefix="SEARCH_")

    text_search_config: str = Field(default="english", description="Postgres text search configuration")
    text_search_type: Literal["plain", "phrase", "web_search"] = Field(
        default="web_search",
        description="PostgREST full-text search flavour",
    )
    debounce_seconds: float = Field(default=0.5, ge=0, description="Delay before a typed search term is committed")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = False
    app_log_level: str = "INFO"

    # Nested settings
    features: FeatureFlags = Field(default_factory=FeatureFlags)
    supabase: SupabaseSettings = Field(default_factory=SupabaseSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
