"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.

Usage:
    from backend.settings import get_settings, Settings

    settings = get_settings()
    print(settings.supabase_url)

    # Tests: build an isolated instance that ignores .env
    test_settings = Settings(environment="test", _env_file=None)
"""

from functools import lru_cache
from typing import Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.models import DEFAULT_LOOKBACK_DAYS, AnalyticsView


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )

    # -------------------------------------------------------------------------
    # Supabase Database
    # -------------------------------------------------------------------------
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (full access)",
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anonymous key (limited access)",
    )

    @property
    def supabase_key(self) -> Optional[str]:
        """Get the best available Supabase key (service role preferred)."""
        return self.supabase_service_role_key or self.supabase_anon_key

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------
    one_rm_formula: str = Field(
        default="brzycki",
        description="Estimated 1RM formula used for record detection: brzycki or epley",
    )

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------
    exercise_frequency_lookback_days: int = Field(
        default=DEFAULT_LOOKBACK_DAYS[AnalyticsView.EXERCISE_FREQUENCY], ge=1
    )
    muscle_group_volume_lookback_days: int = Field(
        default=DEFAULT_LOOKBACK_DAYS[AnalyticsView.MUSCLE_GROUP_VOLUME], ge=1
    )
    exercise_progression_lookback_days: int = Field(
        default=DEFAULT_LOOKBACK_DAYS[AnalyticsView.EXERCISE_PROGRESSION], ge=1
    )
    workout_frequency_lookback_days: int = Field(
        default=DEFAULT_LOOKBACK_DAYS[AnalyticsView.WORKOUT_FREQUENCY], ge=1
    )
    overview_lookback_days: int = Field(
        default=DEFAULT_LOOKBACK_DAYS[AnalyticsView.OVERVIEW], ge=1
    )
    exercise_frequency_limit: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum rows returned by the exercise frequency view",
    )

    @property
    def analytics_lookback_days(self) -> Dict[AnalyticsView, Optional[int]]:
        """Default lookback per analytics view; None means all history."""
        lookbacks = dict(DEFAULT_LOOKBACK_DAYS)
        lookbacks.update(
            {
                AnalyticsView.EXERCISE_FREQUENCY: self.exercise_frequency_lookback_days,
                AnalyticsView.MUSCLE_GROUP_VOLUME: self.muscle_group_volume_lookback_days,
                AnalyticsView.EXERCISE_PROGRESSION: self.exercise_progression_lookback_days,
                AnalyticsView.WORKOUT_FREQUENCY: self.workout_frequency_lookback_days,
                AnalyticsView.OVERVIEW: self.overview_lookback_days,
            }
        )
        return lookbacks

    # -------------------------------------------------------------------------
    # Session Commit
    # -------------------------------------------------------------------------
    commit_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for a commit that loses a race on prior bests",
    )
    commit_retry_min_wait_seconds: float = Field(default=0.05, ge=0)
    commit_retry_max_wait_seconds: float = Field(default=1.0, ge=0)

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level '{v}'. Must be one of: {valid_levels}")
        return v.upper()

    @field_validator("one_rm_formula")
    @classmethod
    def validate_one_rm_formula(cls, v: str) -> str:
        valid_formulas = {"brzycki", "epley"}
        if v.lower() not in valid_formulas:
            raise ValueError(
                f"Invalid 1RM formula '{v}'. Must be one of: {valid_formulas}"
            )
        return v.lower()

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
