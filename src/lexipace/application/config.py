from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from lexipace.domain import constants as c

CONFIG_FILES = [
    Path.home() / ".config/lexipace/config.toml",
    Path.home() / ".lexipace.toml",
]


class ForgettingCurve(BaseModel):
    """Review checkpoints in hours, paired positionally with retention rates."""

    model_config = ConfigDict(frozen=True)

    review_points_hours: tuple[float, ...] = tuple(c.REVIEW_POINTS_HOURS)
    retention_rates: tuple[float, ...] = tuple(c.RETENTION_RATES)

    @model_validator(mode="after")
    def check_shape(self) -> "ForgettingCurve":
        if not self.review_points_hours:
            raise ValueError("forgetting curve needs at least one review point")
        if len(self.review_points_hours) != len(self.retention_rates):
            raise ValueError(
                "review_points_hours and retention_rates must have the same length "
                f"({len(self.review_points_hours)} != {len(self.retention_rates)})"
            )
        points = self.review_points_hours
        if any(b <= a for a, b in zip(points, points[1:])):
            raise ValueError("review_points_hours must be strictly ascending")
        if points[0] <= 0:
            raise ValueError("review_points_hours must be positive")
        return self

    def point(self, index: int) -> float:
        """Checkpoint at `index`, clamped to the last one."""
        return self.review_points_hours[min(index, len(self.review_points_hours) - 1)]

    def retention(self, index: int) -> float:
        return self.retention_rates[min(index, len(self.retention_rates) - 1)]


class SchedulerConfig(BaseSettings):
    """
    Tuning values for the scheduler and session coordinator.
    Supports loading from:
    1. Manual overrides (CLI, tests)
    2. Environment variables (LEXIPACE_*)
    3. Config file (~/.config/lexipace/config.toml)

    Instances are frozen and passed explicitly to the services that use them.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEXIPACE_",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    # Forgetting curve
    forgetting_curve: ForgettingCurve = Field(default_factory=ForgettingCurve)
    excellent_curve_cap: int = c.EXCELLENT_CURVE_CAP
    good_curve_cap: int = c.GOOD_CURVE_CAP

    # Mastery thresholds
    excellent_correct_rate: float = c.EXCELLENT_CORRECT_RATE
    good_correct_rate: float = c.GOOD_CORRECT_RATE
    poor_correct_rate: float = c.POOR_CORRECT_RATE

    # Priority weights
    frequency_normalization_factor: float = Field(
        default=c.FREQUENCY_NORMALIZATION_FACTOR, gt=0
    )
    error_weight_multiplier: float = c.ERROR_WEIGHT_MULTIPLIER
    max_time_weight: float = c.MAX_TIME_WEIGHT
    response_time_threshold_ms: int = c.RESPONSE_TIME_THRESHOLD_MS

    # Insights
    min_attempts_for_analysis: int = Field(default=c.MIN_ATTEMPTS_FOR_ANALYSIS, ge=1)
    analysis_limit: int = Field(default=c.ANALYSIS_LIMIT, ge=0)
    profile_analysis_limit: int = Field(default=c.PROFILE_ANALYSIS_LIMIT, ge=0)
    review_focus_learned_items: int = c.REVIEW_FOCUS_LEARNED_ITEMS

    # Session
    default_learning_count: int = Field(default=c.DEFAULT_LEARNING_COUNT, ge=0)
    max_review_items: int = Field(default=c.MAX_REVIEW_ITEMS, ge=0)
    minutes_per_review_item: int = c.MINUTES_PER_REVIEW_ITEM
    minutes_per_new_item: int = c.MINUTES_PER_NEW_ITEM
    review_check_interval_ms: int = c.REVIEW_CHECK_INTERVAL_MS
    reminder_preview_size: int = c.REMINDER_PREVIEW_SIZE

    # Advice
    streak_encouragement_days: int = c.STREAK_ENCOURAGEMENT_DAYS
    morning_start_hour: int = Field(default=c.MORNING_START_HOUR, ge=0, le=23)
    morning_end_hour: int = Field(default=c.MORNING_END_HOUR, ge=0, le=23)

    # CLI storage
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".config/lexipace/data")
    catalog_path: Path | None = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = next((f for f in CONFIG_FILES if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator(
        "excellent_correct_rate",
        "good_correct_rate",
        "poor_correct_rate",
    )
    @classmethod
    def check_rate(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"correct-rate thresholds must be within [0, 1], got {v}")
        return v

    @field_validator("data_dir", "catalog_path", mode="before")
    @classmethod
    def resolve_path(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return Path(v).expanduser().resolve()

    @model_validator(mode="after")
    def check_morning_window(self) -> "SchedulerConfig":
        if self.morning_start_hour > self.morning_end_hour:
            raise ValueError("morning_start_hour must not be after morning_end_hour")
        return self


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> SchedulerConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in SchedulerConfig
    2. ~/.config/lexipace/config.toml (if exists)
    3. Environment variables (LEXIPACE_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return SchedulerConfig(**overrides)
