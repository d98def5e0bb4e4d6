"""Configuration management for the SIL game session engine.

This module provides centralized configuration using pydantic-settings,
supporting environment variables, .env files, and runtime overrides.

Example:
    >>> from sil_engine.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.game.journey_rounds
    5

Environment Variables:
    SIL_ENGINE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    SIL_ENGINE_GAME_JOURNEY_ROUNDS: Number of rounds in a Journey
    SIL_ENGINE_GAME_ARENA_DURATION_MS: Arena time box in milliseconds
    SIL_ENGINE_SCORING_MIDPOINT_BALANCE_WEIGHT: Weight of "being between"
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from sil_engine.core.exceptions import ConfigurationError


class GameSettings(BaseSettings):
    """Configuration for mode runner behavior.

    Attributes:
        journey_rounds: Number of rounds played in Journey mode.
        arena_duration_ms: Arena time box in milliseconds.
        default_language: Language used when the caller supplies none.
    """

    model_config = SettingsConfigDict(
        env_prefix="SIL_ENGINE_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    journey_rounds: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Rounds played in Journey mode",
    )
    arena_duration_ms: int = Field(
        default=60_000,
        gt=0,
        le=3_600_000,
        description="Arena time box in milliseconds",
    )
    default_language: str = Field(
        default="en",
        min_length=2,
        description="Default content language",
    )


class ScoringSettings(BaseSettings):
    """Configuration for the semantic scoring kernel.

    Attributes:
        midpoint_balance_weight: Weight of the balance term in midpoint ranking.
        midpoint_coverage_weight: Weight of the coverage term in midpoint ranking.
        embedding_dimension: Dimension of generated pseudo-embeddings.
    """

    model_config = SettingsConfigDict(
        env_prefix="SIL_ENGINE_SCORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    midpoint_balance_weight: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Weight of 1 - |simA - simB|",
    )
    midpoint_coverage_weight: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Weight of (simA + simB) / 2",
    )
    embedding_dimension: int = Field(
        default=64,
        ge=2,
        le=4096,
        description="Dimension of hash-derived embeddings",
    )

    @model_validator(mode="after")
    def validate_midpoint_weights(self) -> "ScoringSettings":
        """Ensure balance outweighs coverage and the weights sum to one.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If the weights are inconsistent.
        """
        if self.midpoint_balance_weight < self.midpoint_coverage_weight:
            raise ConfigurationError(
                f"midpoint_balance_weight ({self.midpoint_balance_weight}) must be >= "
                f"midpoint_coverage_weight ({self.midpoint_coverage_weight})",
                config_key="midpoint_balance_weight",
            )
        total = self.midpoint_balance_weight + self.midpoint_coverage_weight
        if abs(total - 1.0) > 1e-9:
            raise ConfigurationError(
                f"midpoint weights must sum to 1.0 (got {total})",
                config_key="midpoint_coverage_weight",
            )
        return self


class Settings(BaseSettings):
    """Main engine settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Engine logging level.
        json_logs: Render logs as JSON.
        game: Mode runner settings.
        scoring: Scoring kernel settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="SIL_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="SIL Game Session Engine",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON",
    )

    game: GameSettings = Field(default_factory=GameSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the engine settings singleton.

    Returns:
        The engine Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except PydanticValidationError as exc:
        raise ConfigurationError(
            f"Invalid engine settings: {exc.error_count()} error(s)",
            details={"errors": [f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors()]},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Primarily useful in tests or after environment variables change.
    """
    get_settings.cache_clear()


__all__ = [
    "GameSettings",
    "ScoringSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
