"""
Engine configuration and calibration parameter sets.

Layered resolution: host overrides, then MNEME_* environment variables, then
an optional TOML file in the home directory, then the defaults below.
"""

import math
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from mneme.domain.constants import (
    FSRS_DEFAULT_RETENTION,
    FSRS_MAXIMUM_INTERVAL,
    FSRS_WEIGHT_COUNT,
    LAPSE_SUSPEND_THRESHOLD,
    SM2_INITIAL_EASE_FACTOR,
    SM2_MAXIMUM_INTERVAL,
    SM2_MIN_EASE_FACTOR,
)

# Published FSRS v4 defaults, as shipped with the first release of the engine.
DEFAULT_FSRS_WEIGHTS: tuple[float, ...] = (
    0.4, 0.6, 2.4, 5.8,  # initial stability per grade
    4.93, 0.94,  # initial difficulty base and grade slope
    0.86, 0.01,  # difficulty step and mean reversion
    1.49, 0.14, 0.94,  # stability growth, decay exponent, retrievability gain
    2.18, 0.05,  # lapse collapse factors
    0.34, 1.26,  # reserved (post-lapse stability in later FSRS versions)
    0.29, 2.61,  # hard penalty, easy bonus
)  # fmt: skip


def config_files() -> list[Path]:
    """Candidate config file locations; the first existing one is used."""
    return [
        Path.home() / ".config/mneme/config.toml",
        Path.home() / ".mneme.toml",
    ]


class FsrsParameters(BaseModel):
    """
    Versioned calibration data for the forgetting-curve scheduler.

    The weights are empirically tuned numbers; each index has a named accessor
    so the scheduler never reads ``weights[n]`` directly. Recalibrating means
    shipping a new parameter set (e.g. via ``from_toml``), not editing code.
    """

    model_config = ConfigDict(frozen=True)

    version: str = "fsrs-v4-default"
    weights: tuple[float, ...] = DEFAULT_FSRS_WEIGHTS
    request_retention: float = Field(default=FSRS_DEFAULT_RETENTION, gt=0.0, lt=1.0)
    maximum_interval: int = Field(default=FSRS_MAXIMUM_INTERVAL, ge=1)

    @field_validator("weights")
    @classmethod
    def check_weights(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        if len(v) != FSRS_WEIGHT_COUNT:
            raise ValueError(f"expected {FSRS_WEIGHT_COUNT} weights, got {len(v)}")
        if not all(math.isfinite(w) for w in v):
            raise ValueError("weights must be finite")
        return v

    def initial_stability(self, grade: int) -> float:
        return self.weights[grade - 1]

    @property
    def initial_difficulty_base(self) -> float:
        return self.weights[4]

    @property
    def initial_difficulty_slope(self) -> float:
        return self.weights[5]

    @property
    def difficulty_step(self) -> float:
        return self.weights[6]

    @property
    def mean_reversion(self) -> float:
        return self.weights[7]

    @property
    def stability_growth(self) -> float:
        return self.weights[8]

    @property
    def stability_decay(self) -> float:
        return self.weights[9]

    @property
    def retrievability_gain(self) -> float:
        return self.weights[10]

    @property
    def lapse_base(self) -> float:
        return self.weights[11]

    @property
    def lapse_scale(self) -> float:
        return self.weights[12]

    @property
    def hard_penalty(self) -> float:
        return self.weights[15]

    @property
    def easy_bonus(self) -> float:
        return self.weights[16]

    @classmethod
    def from_toml(cls, path: Path) -> "FsrsParameters":
        """
        Load a parameter set from a TOML file.

        Accepts either a top-level table or an ``[fsrs]`` section::

            [fsrs]
            version = "my-deck-2024-05"
            weights = [0.4, 0.6, ...]
        """
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return cls.model_validate(data.get("fsrs", data))


class Sm2Parameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_ease_factor: float = Field(default=SM2_MIN_EASE_FACTOR, gt=0.0)
    # Starting ease for reset cards and never-reviewed cards migrated to SM-2
    initial_ease_factor: float = Field(default=SM2_INITIAL_EASE_FACTOR, gt=0.0)
    maximum_interval: int = Field(default=SM2_MAXIMUM_INTERVAL, ge=1)


class RecommendationThresholds(BaseModel):
    """Tunable thresholds for the adaptive recommender and burnout estimator."""

    model_config = ConfigDict(frozen=True)

    # Session length (minutes)
    long_session_minutes: int = 30
    short_session_minutes: int = 15
    default_session_minutes: int = 20
    long_session_accuracy: float = 80.0
    long_session_streak: int = 5
    struggling_accuracy: float = 60.0

    # Difficulty direction
    increase_accuracy: float = 85.0
    increase_max_response_ms: float = 15_000.0

    # Question types and study tips
    weak_type_accuracy: float = 70.0
    tips_accuracy: float = 70.0
    slow_response_ms: float = 30_000.0
    great_streak: int = 10

    # Burnout
    burnout_elapsed_minutes: float = 45.0
    burnout_accuracy: float = 50.0
    burnout_response_ms: float = 45_000.0
    burnout_hard_ratio: float = 0.6
    high_risk_score: int = 4
    medium_risk_score: int = 2


class AppConfig(BaseSettings):
    """
    Engine configuration.
    Supports loading from:
    1. Environment variables (MNEME_*, nested with __)
    2. Config file (~/.config/mneme/config.toml)
    3. Manual overrides from the host
    """

    model_config = SettingsConfigDict(
        env_prefix="MNEME_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    default_scheduler: Literal["fsrs", "sm2"] = "fsrs"
    lapse_suspend_threshold: int = Field(default=LAPSE_SUSPEND_THRESHOLD, ge=1)
    parameters_file: Path | None = None

    fsrs: FsrsParameters = Field(default_factory=FsrsParameters)
    sm2: Sm2Parameters = Field(default_factory=Sm2Parameters)
    recommendations: RecommendationThresholds = Field(default_factory=RecommendationThresholds)

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

        toml_file = next((f for f in config_files() if f.exists()), None)

        # Earlier sources win: overrides, then env, then the file.
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("parameters_file", mode="before")
    @classmethod
    def resolve_parameters_file(cls, v: Any) -> Path | None:
        if v is None or v == "":
            return None
        return Path(v).expanduser().resolve()


def resolve_config(overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/mneme/config.toml (if exists)
    3. Environment variables (MNEME_*)
    4. overrides (passed by the host), None values ignored
    5. parameters_file, if set, replaces the FSRS parameter set
    """
    config = AppConfig(**{k: v for k, v in (overrides or {}).items() if v is not None})

    if config.parameters_file is not None:
        config.fsrs = FsrsParameters.from_toml(config.parameters_file)

    return config
